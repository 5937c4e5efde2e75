"""
Automatic journal entries for completed commercial documents.

    Sales order   Dr 131 total
                  Cr 511 subtotal - discount
                  Cr 3331 tax            (only when tax > 0)
                  Dr 632 cogs            (only when cogs > 0)
                  Cr 156 cogs            (with the 632 line)

    Purchase order  Dr 156 subtotal - discount
                    Dr 1331 tax          (only when tax > 0)
                    Cr 331 total

Line builders are pure; the from_* functions resolve accounts and persist
through create_journal_entry inside one atomic block.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional
from django.db import transaction
from ..models import JournalEntryType, PartnerType
from .accounts import find_accounts_by_code
from .journal import CENT, create_journal_entry, to_money

logger = logging.getLogger(__name__)

# TT133 account codes
ACC_RECEIVABLE = "131"
ACC_REVENUE = "511"
ACC_OUTPUT_VAT = "3331"
ACC_COGS = "632"
ACC_INVENTORY = "156"
ACC_INPUT_VAT = "1331"
ACC_PAYABLE = "331"

SALES_ACCOUNTS = (ACC_RECEIVABLE, ACC_REVENUE, ACC_OUTPUT_VAT, ACC_COGS, ACC_INVENTORY)
PURCHASE_ACCOUNTS = (ACC_INVENTORY, ACC_INPUT_VAT, ACC_PAYABLE)

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class OrderItemCost:
    quantity: Decimal
    unit_cost: Decimal


@dataclass(frozen=True)
class SalesOrderSnapshot:
    order_id: str
    code: str
    date: date
    customer_id: Optional[str]
    total: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    items: List[OrderItemCost] = field(default_factory=list)


@dataclass(frozen=True)
class PurchaseOrderSnapshot:
    order_id: str
    code: str
    date: date
    supplier_id: Optional[str]
    total: Decimal
    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal


@dataclass(frozen=True)
class PlannedLine:
    account_code: str
    debit_amount: Decimal
    credit_amount: Decimal
    description: str
    partner_type: Optional[str] = None
    partner_id: Optional[str] = None


def compute_cogs(items) -> Decimal:
    total = sum(
        (Decimal(str(it.quantity)) * Decimal(str(it.unit_cost)) for it in items),
        Decimal("0"),
    )
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def build_sales_lines(snapshot: SalesOrderSnapshot) -> List[PlannedLine]:
    code = snapshot.code
    total = to_money(snapshot.total)
    revenue = to_money(snapshot.subtotal) - to_money(snapshot.discount_amount)
    tax = to_money(snapshot.tax_amount)
    cogs = compute_cogs(snapshot.items)

    lines = [
        PlannedLine(
            ACC_RECEIVABLE, total, ZERO,
            f"Phải thu khách hàng {code}",
            partner_type=PartnerType.CUSTOMER,
            partner_id=snapshot.customer_id,
        ),
        PlannedLine(ACC_REVENUE, ZERO, revenue, f"Doanh thu bán hàng {code}"),
    ]
    if tax > 0:
        lines.append(PlannedLine(ACC_OUTPUT_VAT, ZERO, tax, f"VAT đầu ra {code}"))
    # 632 and 156 come as a pair
    if cogs > 0:
        lines.append(PlannedLine(ACC_COGS, cogs, ZERO, f"Giá vốn hàng bán {code}"))
        lines.append(PlannedLine(ACC_INVENTORY, ZERO, cogs, f"Xuất kho {code}"))
    return lines


def build_purchase_lines(snapshot: PurchaseOrderSnapshot) -> List[PlannedLine]:
    code = snapshot.code
    goods = to_money(snapshot.subtotal) - to_money(snapshot.discount_amount)
    tax = to_money(snapshot.tax_amount)

    lines = [PlannedLine(ACC_INVENTORY, goods, ZERO, f"Nhập kho {code}")]
    if tax > 0:
        lines.append(PlannedLine(ACC_INPUT_VAT, tax, ZERO, f"VAT đầu vào {code}"))
    lines.append(
        PlannedLine(
            ACC_PAYABLE, ZERO, to_money(snapshot.total),
            f"Phải trả NCC {code}",
            partner_type=PartnerType.SUPPLIER,
            partner_id=snapshot.supplier_id,
        )
    )
    return lines


def _persist(company, planned, accounts, **entry_meta):
    lines = [
        {
            "account": accounts[pl.account_code],
            "debit_amount": pl.debit_amount,
            "credit_amount": pl.credit_amount,
            "description": pl.description,
            "partner_type": pl.partner_type,
            "partner_id": pl.partner_id,
        }
        for pl in planned
    ]
    return create_journal_entry(company, lines, **entry_meta)


def from_sales_order(company, snapshot: SalesOrderSnapshot, user=None):
    """AUTO_SALES entry for a completed sales order. Errors propagate."""
    with transaction.atomic():
        # Every account must exist, even those whose line is omitted
        accounts = find_accounts_by_code(company, SALES_ACCOUNTS)
        entry = _persist(
            company,
            build_sales_lines(snapshot),
            accounts,
            entry_number=f"JE-SO-{snapshot.code}",
            entry_date=snapshot.date,
            entry_type=JournalEntryType.AUTO_SALES,
            description=f"Bán hàng {snapshot.code}",
            reference_type="sales_order",
            reference_id=snapshot.order_id,
            user=user,
        )
    logger.info("auto-posted sales order %s as %s", snapshot.code, entry.entry_number)
    return entry


def from_purchase_order(company, snapshot: PurchaseOrderSnapshot, user=None):
    """AUTO_PURCHASE entry for a received purchase order. Errors propagate."""
    with transaction.atomic():
        accounts = find_accounts_by_code(company, PURCHASE_ACCOUNTS)
        entry = _persist(
            company,
            build_purchase_lines(snapshot),
            accounts,
            entry_number=f"JE-PO-{snapshot.code}",
            entry_date=snapshot.date,
            entry_type=JournalEntryType.AUTO_PURCHASE,
            description=f"Mua hàng {snapshot.code}",
            reference_type="purchase_order",
            reference_id=snapshot.order_id,
            user=user,
        )
    logger.info("auto-posted purchase order %s as %s", snapshot.code, entry.entry_number)
    return entry
