from decimal import Decimal
from django.db import models
from ..managers import TenantManager
from .entitymembership import Company


# ---------- Products (stocked goods) ----------
class Product(models.Model):  # Represents something a company sells & purchases

    # Multi-tenant: each product belongs to a company
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # Stock Keeping Unit, unique within a company
    sku = models.CharField(max_length=80)
    name = models.CharField(max_length=200)
    # Unit of measure ("pcs", "kg", "thùng")
    unit = models.CharField(max_length=20, default="pcs")

    # List price used to pre-fill order lines
    default_unit_price = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    is_active = models.BooleanField(default=True)

    objects = TenantManager()

    class Meta:
        db_table = "products"
        indexes = [models.Index(fields=["company", "name"])]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "sku"], name="uq_company_product_sku"
            )
        ]

    def __str__(self):
        return f"{self.sku} {self.name}"

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
