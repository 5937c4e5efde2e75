from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .entitymembership import Company
from .product import Product
from .warehouse import Warehouse


# ---------- Stock balance (running quantity + weighted average cost) ----------
class StockBalance(models.Model):
    """
    One row per (company, product, warehouse).
    Created lazily, mutated only by stock transaction confirmation.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="stock_balances")
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, related_name="stock_balances")

    quantity = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0"))
    reserved_quantity = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0"))
    # Always quantity - reserved_quantity
    available_quantity = models.DecimalField(
        max_digits=18, decimal_places=4, default=Decimal("0"))
    average_cost = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total_value = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    last_updated = models.DateTimeField(auto_now=True)

    objects = TenantManager()

    class Meta:
        db_table = "stock_balances"
        ordering = ("warehouse_id", "product_id")
        constraints = [
            models.UniqueConstraint(
                fields=["company", "product", "warehouse"],
                name="uq_stock_balance_key",
            ),
            # Never negative after a confirmed movement
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="stock_balance_non_negative_qty",
            ),
        ]

    def __str__(self):
        return (
            f"{self.product_id}@{self.warehouse_id}: {self.quantity} "
            f"@ {self.average_cost}"
        )

    def clean(self):
        if self.product_id and self.product.company_id != self.company_id:
            raise ValidationError("Product must belong to the same company.")
        if self.warehouse_id and self.warehouse.company_id != self.company_id:
            raise ValidationError("Warehouse must belong to the same company.")

    def save(self, *args, **kwargs):
        self.available_quantity = self.quantity - self.reserved_quantity
        self.full_clean()
        return super().save(*args, **kwargs)


class BatchStatus(models.TextChoices):
    AVAILABLE = "available", "Available"
    DEPLETED = "depleted", "Depleted"


# ---------- Product batch (one per confirmed inbound line) ----------
class ProductBatch(models.Model):
    """
    Cost layer consumed FIFO (oldest created_at first).
    Never deleted: quantity is drained and status flips to depleted.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="batches")
    warehouse = models.ForeignKey(
        Warehouse, on_delete=models.PROTECT, related_name="batches")
    # Stamped with the code of the stock transaction that created it
    batch_number = models.CharField(max_length=100)

    quantity = models.DecimalField(max_digits=18, decimal_places=4)
    # Quantity the batch was created with
    initial_quantity = models.DecimalField(max_digits=18, decimal_places=4)
    unit_cost = models.DecimalField(max_digits=18, decimal_places=2)
    total_cost = models.DecimalField(max_digits=18, decimal_places=2)
    status = models.CharField(
        max_length=20,
        choices=BatchStatus.choices,
        default=BatchStatus.AVAILABLE,
    )

    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        db_table = "product_batches"
        ordering = ("created_at", "id")
        indexes = [
            models.Index(
                fields=["company", "product", "warehouse", "status", "created_at"]
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="batch_non_negative_qty",
            ),
        ]

    def __str__(self):
        return f"{self.batch_number} {self.product_id}: {self.quantity} [{self.status}]"

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
