from django.db import models
from ..managers import TenantManager
from .entitymembership import Company


class Supplier(models.Model):  # Mirrors Customer but for payables (account 331)

    # Multi-tenant
    company = models.ForeignKey(Company, on_delete=models.CASCADE)

    # Same fields as Customer, but now for suppliers
    code = models.CharField(max_length=50)
    name = models.CharField(max_length=200)
    tax_code = models.CharField(max_length=20, null=True, blank=True)
    contact_email = models.EmailField(null=True, blank=True)
    payment_terms_days = models.IntegerField(default=30)

    deleted_at = models.DateTimeField(null=True, blank=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        db_table = "suppliers"
        indexes = [models.Index(fields=["company", "name"])]

        # Supplier codes must be unique per company
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"],
                condition=models.Q(deleted_at__isnull=True),
                name="uq_company_supplier_code",
            ),
        ]

    def __str__(self):
        return f"{self.code} {self.name}"

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
