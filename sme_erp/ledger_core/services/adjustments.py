import logging
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from ..exceptions import AdjustmentNotFound, InvalidTransitionError
from ..models import (Adjustment, AdjustmentItem, AdjustmentStatus,
                      StockTransactionSource, StockTransactionType)
from .audit_helper import log_action
from .stock import (confirm_stock_transaction, create_stock_transaction,
                    get_product, get_warehouse, to_quantity)

logger = logging.getLogger(__name__)


def next_adjustment_code(company, on_date=None):
    year = (on_date or timezone.localdate()).year
    count = Adjustment.objects.for_company(company).count()
    return f"ADJ-{year}-{count + 1:05d}"


@transaction.atomic
def create_adjustment(company, header, items, user=None):
    """
    Draft stock count correction.
    items: dicts with product, warehouse, current_quantity, adjusted_quantity.
    """
    items = list(items)
    if not items:
        raise ValidationError("An adjustment needs at least one item")

    adjustment = Adjustment(
        company=company,
        code=header.get("code") or next_adjustment_code(company, header.get("adjustment_date")),
        adjustment_date=header.get("adjustment_date") or timezone.localdate(),
        reason=header.get("reason") or "other",
        notes=header.get("notes"),
        created_by=user,
    )
    adjustment.save()

    for item in items:
        AdjustmentItem.objects.create(
            company=company,
            adjustment=adjustment,
            product=get_product(company, item["product"]),
            warehouse=get_warehouse(company, item["warehouse"]),
            current_quantity=to_quantity(item["current_quantity"]),
            adjusted_quantity=to_quantity(item["adjusted_quantity"]),
            notes=item.get("notes"),
        )

    log_action(action="create", instance=adjustment, user=user)
    logger.info("adjustment %s created with %s items", adjustment.code, len(items))
    return adjustment


def _get_draft_adjustment(company, adjustment_id, verb):
    adjustment = (
        Adjustment.objects.for_company(company)
        .select_for_update()
        .filter(pk=adjustment_id)
        .first()
    )
    if adjustment is None:
        raise AdjustmentNotFound(adjustment_id)
    if adjustment.status != AdjustmentStatus.DRAFT:
        raise InvalidTransitionError(f"Only draft adjustments can be {verb}")
    return adjustment


def approve_adjustment(company, adjustment_id, user=None):
    """
    Approve and apply: one confirmed ADJUSTMENT transaction per warehouse
    carrying (adjusted - current) for every item with a difference.
    """
    with transaction.atomic():
        adjustment = _get_draft_adjustment(company, adjustment_id, "approved")

        by_warehouse = {}
        for item in adjustment.items.select_related("product", "warehouse"):
            if item.difference == 0:
                continue
            by_warehouse.setdefault(item.warehouse, []).append(item)

        for warehouse, wh_items in by_warehouse.items():
            txn = create_stock_transaction(
                company,
                {
                    "code": f"{adjustment.code}-{warehouse.code}",
                    "date": adjustment.adjustment_date,
                    "txn_type": StockTransactionType.ADJUSTMENT,
                    "source": StockTransactionSource.ADJUSTMENT,
                    "warehouse": warehouse,
                    "reference_type": "adjustment",
                    "reference_id": str(adjustment.pk),
                    "notes": f"Stock adjustment: {adjustment.reason}",
                },
                [
                    {"product": it.product, "quantity": it.difference, "notes": it.notes}
                    for it in wh_items
                ],
                user=user,
            )
            confirm_stock_transaction(company, txn.pk, user=user)

        adjustment.status = AdjustmentStatus.APPROVED
        adjustment.approved_by = user
        adjustment.approved_at = timezone.now()
        adjustment.save()
        log_action(action="approve", instance=adjustment, user=user)

    logger.info("adjustment %s approved (%s warehouses)", adjustment.code, len(by_warehouse))
    return adjustment


def reject_adjustment(company, adjustment_id, reason=None, user=None):
    with transaction.atomic():
        adjustment = _get_draft_adjustment(company, adjustment_id, "rejected")
        adjustment.status = AdjustmentStatus.REJECTED
        adjustment.rejected_by = user
        adjustment.rejected_at = timezone.now()
        adjustment.rejection_reason = reason
        adjustment.save()
        log_action(
            action="reject", instance=adjustment, user=user,
            changes={"reason": reason},
        )

    logger.info("adjustment %s rejected", adjustment.code)
    return adjustment
