from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..fsm import StateMachine
from ..managers import TenantManager
from .entitymembership import Company
from .product import Product
from .stock import ProductBatch
from .warehouse import Warehouse


class StockTransactionType(models.TextChoices):
    IN = "in", "Stock in"
    OUT = "out", "Stock out"
    ADJUSTMENT = "adjustment", "Adjustment"
    TRANSFER = "transfer", "Transfer"
    RETURN = "return", "Return"


class StockTransactionSource(models.TextChoices):
    PURCHASE = "purchase", "Purchase"
    SALES = "sales", "Sales"
    PRODUCTION = "production", "Production"
    ADJUSTMENT = "adjustment", "Adjustment"
    TRANSFER = "transfer", "Transfer"
    RETURN = "return", "Return"


class StockTransactionStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    CONFIRMED = "confirmed", "Confirmed"


# Confirmation is one-way
STOCK_TRANSACTION_FLOW = StateMachine(
    "stock transaction",
    {
        StockTransactionStatus.DRAFT: (StockTransactionStatus.CONFIRMED,),
        StockTransactionStatus.CONFIRMED: (),
    },
)


class StockTransaction(models.Model):  # Inbound / outbound movement document

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=50)
    date = models.DateField()
    txn_type = models.CharField(
        max_length=20, choices=StockTransactionType.choices)
    source = models.CharField(
        max_length=20,
        choices=StockTransactionSource.choices,
        default=StockTransactionSource.ADJUSTMENT,
    )
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, related_name="stock_transactions")
    # TRANSFER only: where the goods go
    destination_warehouse = models.ForeignKey(
        Warehouse,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="incoming_transfers",
    )
    reference_type = models.CharField(max_length=50, null=True, blank=True)
    reference_id = models.CharField(max_length=64, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    status = models.CharField(
        max_length=10,
        choices=StockTransactionStatus.choices,
        default=StockTransactionStatus.DRAFT,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="stock_transactions_created",
    )
    confirmed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="stock_transactions_confirmed",
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        db_table = "stock_transactions"
        indexes = [
            models.Index(fields=["company", "status"]),
            models.Index(fields=["company", "warehouse"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_stock_txn_code"
            )
        ]

    def __str__(self):
        return f"{self.code} {self.txn_type} [{self.status}]"

    def clean(self):
        if self.warehouse_id and self.warehouse.company_id != self.company_id:
            raise ValidationError("Warehouse must belong to the same company.")
        if self.txn_type == StockTransactionType.TRANSFER:
            if not self.destination_warehouse_id:
                raise ValidationError("Transfers require a destination warehouse.")
            if self.destination_warehouse_id == self.warehouse_id:
                raise ValidationError(
                    "Destination warehouse must differ from the source warehouse.")
            if self.destination_warehouse.company_id != self.company_id:
                raise ValidationError(
                    "Destination warehouse must belong to the same company.")
        elif self.destination_warehouse_id:
            raise ValidationError(
                "Only transfers may have a destination warehouse.")

    def save(self, *args, **kwargs):
        if self.pk:
            orig = StockTransaction.objects.filter(pk=self.pk).values_list(
                "status", flat=True).first()
            if orig and orig != self.status:
                STOCK_TRANSACTION_FLOW.assert_transition(orig, self.status)
        self.full_clean()
        return super().save(*args, **kwargs)


class StockTransactionItem(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    transaction = models.ForeignKey(
        StockTransaction,
        on_delete=models.CASCADE,
        related_name="items",
    )
    line_number = models.PositiveIntegerField()
    product = models.ForeignKey(Product, on_delete=models.PROTECT)
    # Batch created for this line by an inbound confirmation
    batch = models.ForeignKey(
        ProductBatch, null=True, blank=True, on_delete=models.SET_NULL)

    # Signed only on ADJUSTMENT transactions
    quantity = models.DecimalField(max_digits=18, decimal_places=4)
    unit = models.CharField(max_length=20, default="pcs")
    unit_cost = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total_cost = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(null=True, blank=True)

    objects = TenantManager()

    class Meta:
        db_table = "stock_transaction_items"
        ordering = ("transaction", "line_number")
        constraints = [
            models.UniqueConstraint(
                fields=["transaction", "line_number"],
                name="uq_stock_txn_item_line",
            ),
            models.CheckConstraint(
                condition=models.Q(unit_cost__gte=0),
                name="stock_txn_item_non_negative_cost",
            ),
        ]

    def __str__(self):
        return f"{self.transaction_id}#{self.line_number} {self.product_id} x {self.quantity}"

    def clean(self):
        if self.product_id and self.product.company_id != self.company_id:
            raise ValidationError("Product must belong to the same company.")
        if self.transaction_id:
            if self.transaction.txn_type == StockTransactionType.ADJUSTMENT:
                if self.quantity == 0:
                    raise ValidationError("Adjustment quantity cannot be zero")
            elif self.quantity <= 0:
                raise ValidationError("Quantity must be greater than zero")

    def save(self, *args, **kwargs):
        if not self.company_id and self.transaction_id:
            self.company_id = self.transaction.company_id
        self.full_clean()
        return super().save(*args, **kwargs)
