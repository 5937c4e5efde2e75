from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from ..exceptions import (InsufficientBatchError, InsufficientStockError,
                          InvalidTransitionError, StockTransactionNotFound,
                          WarehouseNotFound)
from ..models import (BatchStatus, ProductBatch, StockBalance,
                      StockTransactionStatus)
from ..services.stock import (apply_movement, confirm_stock_transaction,
                              create_stock_transaction, deduct_fifo,
                              get_or_create_balance, list_stock_balances)
from .helpers import (TODAY, make_company, make_product, make_user,
                      make_warehouse, stock_in, stock_out)


class StockTestMixin:
    def setUp(self):
        self.company = make_company(with_chart=False)
        self.user = make_user(self.company, username="thukho", role="storekeeper")
        self.warehouse = make_warehouse(self.company)
        self.product = make_product(self.company)

    def balance(self, warehouse=None):
        return StockBalance.objects.get(
            company=self.company, product=self.product,
            warehouse=warehouse or self.warehouse)


class StockBalanceTests(StockTestMixin, TestCase):

    def test_balance_is_created_lazily_at_zero(self):
        balance = get_or_create_balance(self.company, self.product, self.warehouse)
        self.assertEqual(balance.quantity, 0)
        self.assertEqual(balance.average_cost, 0)
        # Second call returns the same row
        again = get_or_create_balance(self.company, self.product, self.warehouse)
        self.assertEqual(balance.pk, again.pk)

    """ 100 @ 100,000 then 50 @ 130,000 averages to 110,000 """
    def test_weighted_average_cost(self):
        stock_in(self.company, self.warehouse, self.product, 100, 100000, "NK-001")
        stock_in(self.company, self.warehouse, self.product, 50, 130000, "NK-002")

        balance = self.balance()
        self.assertEqual(balance.quantity, Decimal("150"))
        self.assertEqual(balance.average_cost, Decimal("110000.00"))
        self.assertEqual(balance.total_value, Decimal("16500000.00"))

        stock_out(self.company, self.warehouse, self.product, 30, "XK-001")

        balance = self.balance()
        self.assertEqual(balance.quantity, Decimal("120"))
        self.assertEqual(balance.average_cost, Decimal("110000.00"))
        self.assertEqual(balance.total_value, Decimal("13200000.00"))

    def test_zero_cost_inbound_keeps_average(self):
        stock_in(self.company, self.warehouse, self.product, 10, 50000, "NK-001")
        stock_in(self.company, self.warehouse, self.product, 10, 0, "NK-002")

        balance = self.balance()
        self.assertEqual(balance.quantity, Decimal("20"))
        self.assertEqual(balance.average_cost, Decimal("50000.00"))
        self.assertEqual(balance.total_value, Decimal("1000000.00"))

    def test_available_follows_reserved(self):
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        balance = self.balance()
        balance.reserved_quantity = Decimal("4")
        balance.save()
        balance.refresh_from_db()
        self.assertEqual(balance.available_quantity, Decimal("6"))

    def test_apply_movement_rejects_negative_quantity(self):
        with self.assertRaises(InsufficientStockError) as cm:
            apply_movement(self.company, self.product, self.warehouse, Decimal("-1"), 0)
        self.assertEqual(cm.exception.requested, Decimal("1.0000"))

    def test_list_stock_balances_by_warehouse(self):
        other_wh = make_warehouse(self.company, code="WH-HCM", name="Kho HCM")
        stock_in(self.company, self.warehouse, self.product, 5, 1000, "NK-001")
        stock_in(self.company, other_wh, self.product, 7, 1000, "NK-002")

        rows = list(list_stock_balances(self.company, warehouse=other_wh))
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].quantity, Decimal("7"))


class FifoTests(StockTestMixin, TestCase):

    def test_inbound_creates_one_batch_per_line(self):
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-002")

        batches = ProductBatch.objects.for_company(self.company)
        self.assertEqual(batches.count(), 2)
        self.assertEqual(
            list(batches.values_list("batch_number", flat=True)), ["NK-001", "NK-002"])
        first = batches.first()
        self.assertEqual(first.total_cost, Decimal("10000.00"))
        self.assertEqual(first.status, BatchStatus.AVAILABLE)

    """ B1 (10) then B2 (5); issuing 12 drains B1 and leaves 3 in B2 """
    def test_outbound_consumes_oldest_batch_first(self):
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        stock_in(self.company, self.warehouse, self.product, 5, 1200, "NK-002")

        stock_out(self.company, self.warehouse, self.product, 12, "XK-001")

        b1 = ProductBatch.objects.get(batch_number="NK-001")
        b2 = ProductBatch.objects.get(batch_number="NK-002")
        self.assertEqual(b1.quantity, Decimal("0"))
        self.assertEqual(b1.status, BatchStatus.DEPLETED)
        self.assertEqual(b2.quantity, Decimal("3"))
        self.assertEqual(b2.status, BatchStatus.AVAILABLE)
        self.assertEqual(self.balance().quantity, Decimal("3"))

    def test_deduct_fifo_drains_batches_in_place(self):
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        stock_in(self.company, self.warehouse, self.product, 5, 1200, "NK-002")

        deduct_fifo(self.company, self.product, self.warehouse, 11)

        rows = list(ProductBatch.objects.order_by("created_at", "id")
                    .values_list("batch_number", "quantity", "status"))
        self.assertEqual(rows, [
            ("NK-001", Decimal("0.0000"), BatchStatus.DEPLETED),
            ("NK-002", Decimal("4.0000"), BatchStatus.AVAILABLE),
        ])
        # Batches only; the balance row is apply_movement's job
        self.assertEqual(self.balance().quantity, Decimal("15"))

    def test_outbound_beyond_stock_changes_nothing(self):
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        txn = create_stock_transaction(
            self.company,
            {"code": "XK-001", "date": TODAY, "txn_type": "out", "warehouse": self.warehouse},
            [{"product": self.product, "quantity": 4},
             {"product": self.product, "quantity": 7}],
        )

        with self.assertRaises(InsufficientStockError):
            confirm_stock_transaction(self.company, txn.pk, user=self.user)

        # First line was applied then rolled back with the second
        balance = self.balance()
        self.assertEqual(balance.quantity, Decimal("10"))
        self.assertEqual(balance.total_value, Decimal("10000.00"))
        batch = ProductBatch.objects.get(batch_number="NK-001")
        self.assertEqual(batch.quantity, Decimal("10"))
        txn.refresh_from_db()
        self.assertEqual(txn.status, StockTransactionStatus.DRAFT)
        self.assertIsNone(txn.confirmed_at)

    def test_batch_shortfall_undoes_balance_update(self):
        # Balance without any batch behind it
        StockBalance.objects.create(
            company=self.company, product=self.product, warehouse=self.warehouse,
            quantity=Decimal("10"), average_cost=Decimal("1000"),
            total_value=Decimal("10000"))
        txn = create_stock_transaction(
            self.company,
            {"code": "XK-001", "date": TODAY, "txn_type": "out", "warehouse": self.warehouse},
            [{"product": self.product, "quantity": 5}],
        )

        with self.assertRaises(InsufficientBatchError) as cm:
            confirm_stock_transaction(self.company, txn.pk)
        self.assertEqual(cm.exception.remaining, Decimal("5.0000"))

        self.assertEqual(self.balance().quantity, Decimal("10"))
        txn.refresh_from_db()
        self.assertEqual(txn.status, StockTransactionStatus.DRAFT)


class StockTransactionTests(StockTestMixin, TestCase):

    def test_confirm_sets_confirmed_by_and_item_cost(self):
        txn = stock_in(self.company, self.warehouse, self.product, 4, 2500, "NK-001",
                       user=self.user)
        self.assertEqual(txn.status, StockTransactionStatus.CONFIRMED)
        self.assertEqual(txn.confirmed_by, self.user)
        item = txn.items.get()
        self.assertEqual(item.total_cost, Decimal("10000.00"))
        self.assertIsNotNone(item.batch)

    def test_confirming_twice_fails(self):
        txn = stock_in(self.company, self.warehouse, self.product, 4, 2500, "NK-001")
        with self.assertRaises(InvalidTransitionError):
            confirm_stock_transaction(self.company, txn.pk)
        self.assertEqual(self.balance().quantity, Decimal("4"))

    def test_outbound_item_is_valued_at_average_cost(self):
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        txn = stock_out(self.company, self.warehouse, self.product, 2, "XK-001")
        item = txn.items.get()
        self.assertEqual(item.unit_cost, Decimal("1000.00"))
        self.assertEqual(item.total_cost, Decimal("2000.00"))

    def test_return_without_cost_uses_average(self):
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        stock_in(self.company, self.warehouse, self.product, 2, 0, "TL-001", txn_type="return")

        balance = self.balance()
        self.assertEqual(balance.quantity, Decimal("12"))
        self.assertEqual(balance.average_cost, Decimal("1000.00"))
        returned = ProductBatch.objects.get(batch_number="TL-001")
        self.assertEqual(returned.unit_cost, Decimal("1000.00"))

    def test_transfer_moves_quantity_and_value(self):
        destination = make_warehouse(self.company, code="WH-HCM", name="Kho HCM")
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        stock_in(self.company, self.warehouse, self.product, 10, 2000, "NK-002")

        txn = create_stock_transaction(
            self.company,
            {"code": "CK-001", "date": TODAY, "txn_type": "transfer",
             "warehouse": self.warehouse, "destination_warehouse": destination},
            [{"product": self.product, "quantity": 12}],
        )
        confirm_stock_transaction(self.company, txn.pk)

        source = self.balance()
        target = self.balance(destination)
        self.assertEqual(source.quantity, Decimal("8"))
        self.assertEqual(target.quantity, Decimal("12"))
        self.assertEqual(target.average_cost, Decimal("1500.00"))
        self.assertEqual(source.total_value + target.total_value, Decimal("30000.00"))
        # Source drained oldest first
        self.assertEqual(
            ProductBatch.objects.get(batch_number="NK-001").status, BatchStatus.DEPLETED)
        self.assertEqual(
            ProductBatch.objects.get(batch_number="NK-002").quantity, Decimal("8"))
        self.assertTrue(
            ProductBatch.objects.filter(warehouse=destination, batch_number="CK-001").exists())

    def test_transfer_requires_destination(self):
        with self.assertRaises(ValidationError):
            create_stock_transaction(
                self.company,
                {"code": "CK-001", "date": TODAY, "txn_type": "transfer",
                 "warehouse": self.warehouse},
                [{"product": self.product, "quantity": 1}],
            )

    def test_non_adjustment_items_must_be_positive(self):
        with self.assertRaises(ValidationError):
            create_stock_transaction(
                self.company,
                {"code": "XK-001", "date": TODAY, "txn_type": "out", "warehouse": self.warehouse},
                [{"product": self.product, "quantity": -3}],
            )

    def test_signed_adjustment_items(self):
        stock_in(self.company, self.warehouse, self.product, 10, 1000, "NK-001")
        txn = create_stock_transaction(
            self.company,
            {"code": "DC-001", "date": TODAY, "txn_type": "adjustment", "warehouse": self.warehouse},
            [{"product": self.product, "quantity": -4}],
        )
        confirm_stock_transaction(self.company, txn.pk)
        self.assertEqual(self.balance().quantity, Decimal("6"))

    def test_other_company_cannot_confirm(self):
        txn = create_stock_transaction(
            self.company,
            {"code": "NK-001", "date": TODAY, "txn_type": "in", "warehouse": self.warehouse},
            [{"product": self.product, "quantity": 1, "unit_cost": 10}],
        )
        other = make_company(name="Other", slug="other", with_chart=False)
        with self.assertRaises(StockTransactionNotFound):
            confirm_stock_transaction(other, txn.pk)

    def test_other_company_warehouse_is_not_found(self):
        other = make_company(name="Other", slug="other", with_chart=False)
        foreign = make_warehouse(other, code="WH-X")
        with self.assertRaises(WarehouseNotFound):
            create_stock_transaction(
                self.company,
                {"code": "NK-001", "date": TODAY, "txn_type": "in", "warehouse": foreign},
                [{"product": self.product, "quantity": 1}],
            )
