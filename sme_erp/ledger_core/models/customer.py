from django.db import models  # ORM base classes to define database tables as Python classes

from ..managers import TenantManager
from .entitymembership import Company


# ---------- Customer ----------
# Buyer on sales orders (receivable side, account 131)
class Customer(models.Model):
    # Multi-tenant: every customer belongs to a single company.
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    """ Example:
        Company A can have its own customers separate from Company B.
    """

    # Short code used on documents, e.g. "KH001"
    code = models.CharField(max_length=50)
    # The customer’s legal or trade name
    name = models.CharField(max_length=200)
    # Vietnamese tax identification number (mã số thuế)
    tax_code = models.CharField(max_length=20, null=True, blank=True)
    contact_email = models.EmailField(null=True, blank=True)

    # Standard credit terms
    payment_terms_days = models.IntegerField(default=30)

    deleted_at = models.DateTimeField(null=True, blank=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        db_table = "customers"
        indexes = [models.Index(fields=["company", "name"])]
        # Enforce uniqueness per tenant
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"],
                condition=models.Q(deleted_at__isnull=True),
                name="uq_company_customer_code",
            ),
        ]

    # Display customer name in UI
    def __str__(self):
        return f"{self.code} {self.name}"

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
