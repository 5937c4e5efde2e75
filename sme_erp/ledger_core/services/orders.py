import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from django.db import DatabaseError, transaction
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from ..exceptions import InvalidTransitionError, OrderNotFound
from ..models import (JournalEntry, LedgerStatus, PurchaseOrder,
                      PurchaseOrderStatus, SalesOrder, SalesOrderStatus,
                      StockBalance)
from .audit_helper import log_action
from .auto_posting import (OrderItemCost, PurchaseOrderSnapshot,
                           SalesOrderSnapshot, from_purchase_order,
                           from_sales_order)

logger = logging.getLogger(__name__)

# Failures that leave the order completed with its ledger pending
LEDGER_ERRORS = (ValidationError, ObjectDoesNotExist, DatabaseError)


@dataclass
class LedgerOutcome:
    """Result of a status change: the order plus what happened in the books."""

    order: object
    ledger_status: str
    journal_entry: Optional[JournalEntry] = None
    error: Optional[str] = None

    @property
    def recorded(self):
        return self.ledger_status == LedgerStatus.RECORDED


# ----------------------------
# Snapshots
# ----------------------------
def sales_snapshot(order: SalesOrder) -> SalesOrderSnapshot:
    """COGS inputs priced at the warehouse average cost (0 when unknown)."""
    costs = {}
    if order.warehouse_id:
        costs = dict(
            StockBalance.objects.for_company(order.company_id)
            .filter(warehouse_id=order.warehouse_id)
            .values_list("product_id", "average_cost")
        )
    items = [
        OrderItemCost(
            quantity=item.quantity,
            unit_cost=costs.get(item.product_id, Decimal("0.00")),
        )
        for item in order.items.all()
    ]
    return SalesOrderSnapshot(
        order_id=str(order.pk),
        code=order.code,
        date=order.date,
        customer_id=str(order.customer_id),
        total=order.total,
        subtotal=order.subtotal,
        discount_amount=order.discount_amount,
        tax_amount=order.tax_amount,
        items=items,
    )


def purchase_snapshot(order: PurchaseOrder) -> PurchaseOrderSnapshot:
    return PurchaseOrderSnapshot(
        order_id=str(order.pk),
        code=order.code,
        date=order.date,
        supplier_id=str(order.supplier_id),
        total=order.total,
        subtotal=order.subtotal,
        discount_amount=order.discount_amount,
        tax_amount=order.tax_amount,
    )


# ----------------------------
# Ledger recording
# ----------------------------
def _record_ledger(order, generator, snapshot, user):
    try:
        entry = generator(order.company, snapshot, user=user)
    except LEDGER_ERRORS as exc:
        logger.exception(
            "ledger pending for %s %s", type(order).__name__, order.code)
        order.ledger_status = LedgerStatus.PENDING
        order.ledger_error = "; ".join(getattr(exc, "messages", None) or [str(exc)])
        order.save(update_fields=["ledger_status", "ledger_error", "updated_at"])
        return LedgerOutcome(order, order.ledger_status, error=order.ledger_error)

    order.ledger_status = LedgerStatus.RECORDED
    order.ledger_error = None
    order.journal_entry = entry
    order.save(update_fields=["ledger_status", "ledger_error", "journal_entry", "updated_at"])
    log_action(
        action="ledger",
        instance=order,
        user=user,
        changes={"journal_entry": entry.entry_number},
    )
    return LedgerOutcome(order, order.ledger_status, journal_entry=entry)


def _already_recorded(order):
    # A recorded order whose entry was soft-deleted needs booking again
    return (
        order.ledger_status == LedgerStatus.RECORDED
        and order.journal_entry is not None
        and order.journal_entry.deleted_at is None
    )


def record_sales_ledger(order: SalesOrder, user=None) -> LedgerOutcome:
    """(Re)run the sales generator for one completed order."""
    if order.status != SalesOrderStatus.COMPLETED:
        raise InvalidTransitionError(
            "Only completed sales orders can be recorded in the ledger")
    if _already_recorded(order):
        return LedgerOutcome(order, order.ledger_status, journal_entry=order.journal_entry)
    return _record_ledger(order, from_sales_order, sales_snapshot(order), user)


def record_purchase_ledger(order: PurchaseOrder, user=None) -> LedgerOutcome:
    """(Re)run the purchase generator for one received order."""
    if order.status != PurchaseOrderStatus.RECEIVED:
        raise InvalidTransitionError(
            "Only received purchase orders can be recorded in the ledger")
    if _already_recorded(order):
        return LedgerOutcome(order, order.ledger_status, journal_entry=order.journal_entry)
    return _record_ledger(order, from_purchase_order, purchase_snapshot(order), user)


# ----------------------------
# Status changes
# ----------------------------
def _change_status(company, model, order_id, new_status, user):
    with transaction.atomic():
        order = (
            model.objects.for_company(company)
            .alive()
            .select_for_update()
            .filter(pk=order_id)
            .first()
        )
        if order is None:
            raise OrderNotFound(model.__name__, order_id)
        old_status = order.status
        order.transition_to(new_status)
        log_action(
            action="status",
            instance=order,
            user=user,
            changes={"from": old_status, "to": new_status},
        )
    logger.info("%s %s: %s -> %s", model.__name__, order.code, old_status, new_status)
    return order


def change_sales_order_status(company, order_id, new_status, user=None) -> LedgerOutcome:
    """
    Move a sales order along its workflow. Completion records the
    AUTO_SALES entry; a ledger failure never undoes the status change.
    """
    order = _change_status(company, SalesOrder, order_id, new_status, user)
    if order.status == SalesOrderStatus.COMPLETED:
        return record_sales_ledger(order, user=user)
    return LedgerOutcome(order, order.ledger_status)


def change_purchase_order_status(company, order_id, new_status, user=None) -> LedgerOutcome:
    order = _change_status(company, PurchaseOrder, order_id, new_status, user)
    if order.status == PurchaseOrderStatus.RECEIVED:
        return record_purchase_ledger(order, user=user)
    return LedgerOutcome(order, order.ledger_status)


def pending_ledger_orders(company):
    """Completed orders still missing their journal entry."""
    return {
        "sales_orders": list(
            SalesOrder.objects.for_company(company).alive()
            .filter(ledger_status=LedgerStatus.PENDING).order_by("date", "code")
        ),
        "purchase_orders": list(
            PurchaseOrder.objects.for_company(company).alive()
            .filter(ledger_status=LedgerStatus.PENDING).order_by("date", "code")
        ),
    }
