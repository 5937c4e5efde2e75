import logging
from decimal import ROUND_HALF_UP, Decimal
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from ..exceptions import (InsufficientBatchError, InsufficientStockError,
                          InvalidTransitionError, ProductNotFound,
                          StockTransactionNotFound, WarehouseNotFound)
from ..models import (BatchStatus, Product, ProductBatch, StockBalance,
                      StockTransaction, StockTransactionItem,
                      StockTransactionStatus, StockTransactionType, Warehouse)
from .audit_helper import log_action
from .journal import CENT

logger = logging.getLogger(__name__)

QTY = Decimal("0.0001")
ZERO = Decimal("0")


def to_quantity(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(QTY, rounding=ROUND_HALF_UP)


def to_cost(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(CENT, rounding=ROUND_HALF_UP)


# ----------------------------
# Lookups
# ----------------------------
def get_warehouse(company, warehouse):
    if isinstance(warehouse, Warehouse):
        warehouse_id = warehouse.pk
    else:
        warehouse_id = warehouse
    found = (
        Warehouse.objects.for_company(company)
        .alive()
        .filter(pk=warehouse_id)
        .first()
    )
    if found is None:
        raise WarehouseNotFound(warehouse_id)
    return found


def get_product(company, product):
    product_id = product.pk if isinstance(product, Product) else product
    found = Product.objects.for_company(company).filter(pk=product_id).first()
    if found is None:
        raise ProductNotFound(product_id)
    return found


# ----------------------------
# Stock ledger
# ----------------------------
def get_or_create_balance(company, product, warehouse, *, lock=False):
    """Zero-valued balance row on first reference; locked when asked."""
    qs = StockBalance.objects.for_company(company)
    if lock:
        qs = qs.select_for_update()
    balance, created = qs.get_or_create(
        company=company, product=product, warehouse=warehouse,
    )
    if created:
        logger.debug("stock balance opened for %s @ %s", product, warehouse)
    return balance


def apply_movement(company, product, warehouse, signed_quantity, unit_cost):
    """
    Move quantity on the (product, warehouse) balance.

    Inbound with a positive cost re-weights the average cost; every other
    movement keeps it and revalues quantity at the old average.
    Must run inside the caller's transaction.
    """
    qty = to_quantity(signed_quantity)
    cost = to_cost(unit_cost)
    balance = get_or_create_balance(company, product, warehouse, lock=True)

    new_quantity = balance.quantity + qty
    if new_quantity < 0:
        raise InsufficientStockError(
            product.pk, warehouse.pk, balance.quantity, -qty)

    if qty > 0 and cost > 0:
        new_value = balance.total_value + qty * cost
        balance.average_cost = (
            to_cost(new_value / new_quantity) if new_quantity else Decimal("0.00")
        )
        balance.total_value = to_cost(new_value)
    else:
        balance.total_value = to_cost(new_quantity * balance.average_cost)

    balance.quantity = new_quantity
    # save() refreshes available_quantity
    balance.save()
    return balance


def create_inbound_batch(company, product, warehouse, batch_number, quantity, unit_cost):
    qty = to_quantity(quantity)
    cost = to_cost(unit_cost)
    return ProductBatch.objects.create(
        company=company,
        product=product,
        warehouse=warehouse,
        batch_number=batch_number,
        quantity=qty,
        initial_quantity=qty,
        unit_cost=cost,
        total_cost=to_cost(qty * cost),
        status=BatchStatus.AVAILABLE,
    )


def deduct_fifo(company, product, warehouse, quantity):
    """Drain available batches oldest first; all or nothing."""
    remaining = to_quantity(quantity)
    batches = (
        ProductBatch.objects.for_company(company)
        .select_for_update()
        .filter(product=product, warehouse=warehouse, status=BatchStatus.AVAILABLE)
        .order_by("created_at", "id")
    )

    for batch in batches:
        if remaining <= 0:
            break
        take = min(batch.quantity, remaining)
        batch.quantity -= take
        if batch.quantity == 0:
            batch.status = BatchStatus.DEPLETED
        batch.save()
        remaining -= take

    if remaining > 0:
        raise InsufficientBatchError(product.pk, warehouse.pk, remaining)


def list_stock_balances(company, warehouse=None, product=None):
    qs = StockBalance.objects.for_company(company).select_related("product", "warehouse")
    if warehouse is not None:
        qs = qs.filter(warehouse=warehouse)
    if product is not None:
        qs = qs.filter(product=product)
    return qs.order_by("warehouse__code", "product__sku")


# ----------------------------
# Stock transactions
# ----------------------------
@transaction.atomic
def create_stock_transaction(company, header, items, user=None):
    """
    header: code, date, txn_type, warehouse, plus optional source,
    destination_warehouse, reference_type, reference_id, notes.
    items: dicts with product, quantity, unit_cost and optional unit, notes.
    """
    items = list(items)
    if not items:
        raise ValidationError("A stock transaction needs at least one item")

    destination = header.get("destination_warehouse")
    extra = {}
    if header.get("source"):
        extra["source"] = header["source"]
    txn = StockTransaction(
        company=company,
        code=header["code"],
        date=header["date"],
        txn_type=header["txn_type"],
        warehouse=get_warehouse(company, header["warehouse"]),
        destination_warehouse=(
            get_warehouse(company, destination) if destination else None
        ),
        reference_type=header.get("reference_type"),
        reference_id=header.get("reference_id"),
        notes=header.get("notes"),
        created_by=user,
        **extra,
    )
    txn.save()

    for idx, item in enumerate(items, start=1):
        product = get_product(company, item["product"])
        qty = to_quantity(item["quantity"])
        unit_cost = to_cost(item.get("unit_cost"))
        StockTransactionItem.objects.create(
            company=company,
            transaction=txn,
            line_number=idx,
            product=product,
            quantity=qty,
            unit=item.get("unit") or product.unit,
            unit_cost=unit_cost,
            total_cost=to_cost(qty * unit_cost),
            notes=item.get("notes"),
        )

    log_action(
        action="create",
        instance=txn,
        user=user,
        changes={"code": txn.code, "txn_type": txn.txn_type, "items": len(items)},
    )
    logger.info("stock transaction %s (%s) created", txn.code, txn.txn_type)
    return txn


def _receive(txn, item, warehouse, unit_cost):
    unit_cost = to_cost(unit_cost)
    qty = abs(item.quantity)
    apply_movement(txn.company, item.product, warehouse, qty, unit_cost)
    item.batch = create_inbound_batch(
        txn.company, item.product, warehouse, txn.code, qty, unit_cost)
    item.unit_cost = unit_cost
    item.total_cost = to_cost(item.quantity * unit_cost)
    item.save()


def _issue(txn, item, warehouse):
    qty = abs(item.quantity)
    balance = apply_movement(txn.company, item.product, warehouse, -qty, ZERO)
    deduct_fifo(txn.company, item.product, warehouse, qty)
    # Outbound lines are valued at the running average cost
    if not item.unit_cost:
        item.unit_cost = balance.average_cost
        item.total_cost = to_cost(item.quantity * balance.average_cost)
        item.save()
    return balance


def _current_average(company, product, warehouse):
    return get_or_create_balance(company, product, warehouse, lock=True).average_cost


def _confirm_item(txn, item):
    company = txn.company
    kind = txn.txn_type

    if kind == StockTransactionType.IN:
        _receive(txn, item, txn.warehouse, item.unit_cost)

    elif kind == StockTransactionType.RETURN:
        cost = item.unit_cost or _current_average(company, item.product, txn.warehouse)
        _receive(txn, item, txn.warehouse, cost)

    elif kind == StockTransactionType.OUT:
        _issue(txn, item, txn.warehouse)

    elif kind == StockTransactionType.TRANSFER:
        # Destination receives at the source average before the move
        cost = _current_average(company, item.product, txn.warehouse)
        _issue(txn, item, txn.warehouse)
        _receive(txn, item, txn.destination_warehouse, cost)

    elif kind == StockTransactionType.ADJUSTMENT:
        if item.quantity > 0:
            cost = item.unit_cost or _current_average(company, item.product, txn.warehouse)
            _receive(txn, item, txn.warehouse, cost)
        else:
            _issue(txn, item, txn.warehouse)

    else:
        raise ValidationError(f"Unknown stock transaction type {kind}")


def confirm_stock_transaction(company, transaction_id, user=None):
    """Apply every item to balances and batches, or nothing at all."""
    with transaction.atomic():
        txn = (
            StockTransaction.objects.for_company(company)
            .select_for_update(of=("self",))
            .select_related("warehouse", "destination_warehouse")
            .filter(pk=transaction_id)
            .first()
        )
        if txn is None:
            raise StockTransactionNotFound(transaction_id)
        if txn.status != StockTransactionStatus.DRAFT:
            raise InvalidTransitionError(
                f"Only draft transactions can be confirmed (transaction is {txn.status})"
            )

        items = list(txn.items.select_related("product").order_by("line_number"))
        if not items:
            raise ValidationError("Cannot confirm a stock transaction without items")
        for item in items:
            _confirm_item(txn, item)

        txn.status = StockTransactionStatus.CONFIRMED
        txn.confirmed_by = user
        txn.confirmed_at = timezone.now()
        txn.save()
        log_action(action="confirm", instance=txn, user=user)

    logger.info(
        "stock transaction %s (%s) confirmed, %s items",
        txn.code, txn.txn_type, len(items),
    )
    return txn
