from django.db import models
from ..managers import TenantManager
from .entitymembership import Company


# ---------- Warehouse ----------
class Warehouse(models.Model):  # Physical or logical stock location

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=50)  # e.g. "WH-HN"
    name = models.CharField(max_length=200)
    address = models.TextField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = TenantManager()

    class Meta:
        db_table = "warehouses"
        ordering = ("company", "code")
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"],
                condition=models.Q(deleted_at__isnull=True),
                name="uq_company_warehouse_code",
            )
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
