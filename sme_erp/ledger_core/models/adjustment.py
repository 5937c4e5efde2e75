from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..fsm import StateMachine
from ..managers import TenantManager
from .entitymembership import Company
from .product import Product
from .stock_transaction import StockTransaction
from .warehouse import Warehouse


class AdjustmentStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class AdjustmentReason(models.TextChoices):
    DAMAGE = "damage", "Damage"
    LOSS = "loss", "Loss"
    FOUND = "found", "Found"
    EXPIRED = "expired", "Expired"
    COUNTING = "counting", "Stock count"
    OTHER = "other", "Other"


ADJUSTMENT_FLOW = StateMachine(
    "adjustment",
    {
        AdjustmentStatus.DRAFT: (AdjustmentStatus.APPROVED, AdjustmentStatus.REJECTED),
        AdjustmentStatus.APPROVED: (),
        AdjustmentStatus.REJECTED: (),
    },
)


# ---------- Stock count correction ----------
class Adjustment(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=50)
    adjustment_date = models.DateField()
    reason = models.CharField(
        max_length=20, choices=AdjustmentReason.choices,
        default=AdjustmentReason.OTHER)
    status = models.CharField(
        max_length=10, choices=AdjustmentStatus.choices,
        default=AdjustmentStatus.DRAFT)
    notes = models.TextField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name="adjustments_created")
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name="adjustments_approved")
    approved_at = models.DateTimeField(null=True, blank=True)
    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name="adjustments_rejected")
    rejected_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TenantManager()

    class Meta:
        db_table = "adjustments"
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"], name="uq_company_adjustment_code")
        ]

    def __str__(self):
        return f"{self.code} [{self.status}]"

    def stock_transactions(self):
        """ADJUSTMENT transactions produced on approval, one per warehouse"""
        return StockTransaction.objects.for_company(self.company_id).filter(
            reference_type="adjustment", reference_id=str(self.pk))

    def save(self, *args, **kwargs):
        if self.pk:
            orig = Adjustment.objects.filter(pk=self.pk).values_list(
                "status", flat=True).first()
            if orig and orig != self.status:
                ADJUSTMENT_FLOW.assert_transition(orig, self.status)
        self.full_clean()
        return super().save(*args, **kwargs)


class AdjustmentItem(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    adjustment = models.ForeignKey(
        Adjustment, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT)
    warehouse = models.ForeignKey(Warehouse, on_delete=models.PROTECT)
    # Quantity on record vs quantity counted
    current_quantity = models.DecimalField(max_digits=18, decimal_places=4)
    adjusted_quantity = models.DecimalField(max_digits=18, decimal_places=4)
    notes = models.TextField(null=True, blank=True)

    objects = TenantManager()

    class Meta:
        db_table = "adjustment_items"
        ordering = ("adjustment", "id")

    @property
    def difference(self):
        return self.adjusted_quantity - self.current_quantity

    def clean(self):
        if self.adjusted_quantity < 0:
            raise ValidationError("Adjusted quantity cannot be negative")
        if self.warehouse_id and self.warehouse.company_id != self.company_id:
            raise ValidationError("Warehouse must belong to the same company.")
        if self.product_id and self.product.company_id != self.company_id:
            raise ValidationError("Product must belong to the same company.")

    def save(self, *args, **kwargs):
        if not self.company_id and self.adjustment_id:
            self.company_id = self.adjustment.company_id
        self.full_clean()
        return super().save(*args, **kwargs)
