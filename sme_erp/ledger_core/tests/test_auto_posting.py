from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from ..exceptions import AccountNotFound, UnbalancedJournalError
from ..models import (JournalEntry, JournalEntryLine, JournalEntryType,
                      JournalStatus, PartnerType)
from ..services.auto_posting import (OrderItemCost, PurchaseOrderSnapshot,
                                     SalesOrderSnapshot, build_purchase_lines,
                                     build_sales_lines, compute_cogs,
                                     from_purchase_order, from_sales_order)
from .helpers import TODAY, make_company


def sales_snapshot(total="11000000", subtotal="10000000", discount="0",
                   tax="1000000", items=None, code="SO-0001"):
    if items is None:
        items = [
            OrderItemCost(quantity=Decimal("10"), unit_cost=Decimal("500000")),
            OrderItemCost(quantity=Decimal("5"), unit_cost=Decimal("300000")),
        ]
    return SalesOrderSnapshot(
        order_id="42",
        code=code,
        date=TODAY,
        customer_id="7",
        total=Decimal(total),
        subtotal=Decimal(subtotal),
        discount_amount=Decimal(discount),
        tax_amount=Decimal(tax),
        items=items,
    )


def purchase_snapshot(total="10000000", subtotal="10000000", discount="0",
                      tax="0", code="PO-0001"):
    return PurchaseOrderSnapshot(
        order_id="9",
        code=code,
        date=TODAY,
        supplier_id="3",
        total=Decimal(total),
        subtotal=Decimal(subtotal),
        discount_amount=Decimal(discount),
        tax_amount=Decimal(tax),
    )


def line_rows(entry):
    return list(
        entry.lines.order_by("line_number").values_list(
            "line_number", "account__code", "debit_amount", "credit_amount")
    )


""" Pure line builders (no database) """
class LineBuilderTests(SimpleTestCase):

    def test_cogs_is_sum_of_quantity_times_unit_cost(self):
        self.assertEqual(compute_cogs(sales_snapshot().items), Decimal("6500000.00"))

    def test_sales_lines_without_tax_or_cogs(self):
        planned = build_sales_lines(
            sales_snapshot(total="10000000", tax="0", items=[]))
        self.assertEqual([pl.account_code for pl in planned], ["131", "511"])

    def test_sales_discount_reduces_revenue(self):
        planned = build_sales_lines(
            sales_snapshot(total="10450000", subtotal="10000000",
                           discount="500000", tax="950000", items=[]))
        revenue = planned[1]
        self.assertEqual(revenue.account_code, "511")
        self.assertEqual(revenue.credit_amount, Decimal("9500000.00"))

    def test_cogs_lines_come_in_pairs(self):
        planned = build_sales_lines(sales_snapshot())
        codes = [pl.account_code for pl in planned]
        self.assertEqual(codes, ["131", "511", "3331", "632", "156"])
        self.assertEqual(planned[3].debit_amount, planned[4].credit_amount)

    def test_receivable_line_carries_customer(self):
        first = build_sales_lines(sales_snapshot())[0]
        self.assertEqual(first.partner_type, PartnerType.CUSTOMER)
        self.assertEqual(first.partner_id, "7")

    def test_purchase_with_tax_has_three_lines(self):
        planned = build_purchase_lines(
            purchase_snapshot(total="11000000", tax="1000000"))
        self.assertEqual([pl.account_code for pl in planned], ["156", "1331", "331"])
        self.assertEqual(planned[2].partner_type, PartnerType.SUPPLIER)


class SalesAutoPostingTests(TestCase):

    def setUp(self):
        self.company = make_company()

    """ Order 11,000,000 with cogs 6,500,000 gives five lines """
    def test_sales_order_entry_scenario(self):
        entry = from_sales_order(self.company, sales_snapshot())

        self.assertEqual(entry.entry_type, JournalEntryType.AUTO_SALES)
        self.assertEqual(entry.status, JournalStatus.DRAFT)
        self.assertEqual(entry.entry_number, "JE-SO-SO-0001")
        self.assertEqual(entry.reference_type, "sales_order")
        self.assertEqual(entry.reference_id, "42")
        self.assertEqual(line_rows(entry), [
            (1, "131", Decimal("11000000.00"), Decimal("0.00")),
            (2, "511", Decimal("0.00"), Decimal("10000000.00")),
            (3, "3331", Decimal("0.00"), Decimal("1000000.00")),
            (4, "632", Decimal("6500000.00"), Decimal("0.00")),
            (5, "156", Decimal("0.00"), Decimal("6500000.00")),
        ])
        self.assertEqual(entry.total_debit, Decimal("17500000.00"))
        self.assertEqual(entry.total_credit, Decimal("17500000.00"))

        receivable = entry.lines.get(line_number=1)
        self.assertEqual(receivable.partner_type, PartnerType.CUSTOMER)
        self.assertEqual(receivable.partner_id, "7")

    def test_zero_tax_line_is_omitted(self):
        entry = from_sales_order(
            self.company, sales_snapshot(total="10000000", tax="0"))
        codes = [row[1] for row in line_rows(entry)]
        self.assertEqual(codes, ["131", "511", "632", "156"])
        self.assertEqual([row[0] for row in line_rows(entry)], [1, 2, 3, 4])

    def test_missing_account_rolls_back_everything(self):
        company = make_company(
            name="No VAT", slug="no-vat", codes={"131", "511", "632", "156"})

        with self.assertRaises(AccountNotFound) as cm:
            from_sales_order(company, sales_snapshot())

        self.assertIn("3331", str(cm.exception))
        self.assertEqual(JournalEntry.objects.for_company(company).count(), 0)
        self.assertEqual(JournalEntryLine.objects.for_company(company).count(), 0)

    def test_inconsistent_order_total_fails_balance_check(self):
        with self.assertRaises(UnbalancedJournalError):
            from_sales_order(self.company, sales_snapshot(total="12000000"))
        self.assertEqual(JournalEntry.objects.count(), 0)
        self.assertEqual(JournalEntryLine.objects.count(), 0)


class PurchaseAutoPostingTests(TestCase):

    def setUp(self):
        self.company = make_company()

    def test_zero_tax_purchase_has_exactly_two_lines(self):
        entry = from_purchase_order(self.company, purchase_snapshot())

        self.assertEqual(entry.entry_type, JournalEntryType.AUTO_PURCHASE)
        self.assertEqual(entry.entry_number, "JE-PO-PO-0001")
        self.assertEqual(line_rows(entry), [
            (1, "156", Decimal("10000000.00"), Decimal("0.00")),
            (2, "331", Decimal("0.00"), Decimal("10000000.00")),
        ])
        self.assertFalse(entry.lines.filter(account__code="1331").exists())

    def test_purchase_with_tax_and_discount(self):
        entry = from_purchase_order(
            self.company,
            purchase_snapshot(total="10450000", subtotal="10000000",
                              discount="500000", tax="950000"),
        )
        self.assertEqual(line_rows(entry), [
            (1, "156", Decimal("9500000.00"), Decimal("0.00")),
            (2, "1331", Decimal("950000.00"), Decimal("0.00")),
            (3, "331", Decimal("0.00"), Decimal("10450000.00")),
        ])
        payable = entry.lines.get(line_number=3)
        self.assertEqual(payable.partner_type, PartnerType.SUPPLIER)
        self.assertEqual(payable.partner_id, "3")

    def test_missing_input_vat_account_rolls_back(self):
        company = make_company(name="Bare", slug="bare", codes={"156", "331"})
        with self.assertRaises(AccountNotFound):
            from_purchase_order(company, purchase_snapshot())
        self.assertEqual(JournalEntry.objects.for_company(company).count(), 0)
