from django.db import models        # ORM base classes to define database tables as Python classes
from .entitymembership import Company
from ..managers import TenantManager
from django.core.exceptions import ValidationError


# ---------- Period (accounting period) ----------
class Period(models.Model): # Time bucket during which journal entries are grouped

    # Every company has its own independent calendar of periods
    company = models.ForeignKey(Company,
                                # Prevent accidental deletion of periods tied to journal entries
                                on_delete=models.PROTECT
                                )

    # Human-readable label for the period
    name = models.CharField(max_length=50)  # Example: "2025-Q3" or "FY2025-01"

    start_date = models.DateField()
    end_date = models.DateField()

    # When is_closed=True no new postings are allowed
    is_closed = models.BooleanField(default=False)

    objects = TenantManager()

    class Meta:
        indexes = [
                    models.Index(fields=["company", "start_date"]),
                    models.Index(fields=["company", "is_closed"]),
                ]
        constraints = [
          models.UniqueConstraint(fields=["company", "name"],
                                  name="uq_company_period_name"),
      ]
        ordering = ("company", "start_date")

    def __str__(self):
        return f"{self.company.slug} {self.name}" # Example: "acme 2025-07".

    def clean(self):
        if self.start_date >= self.end_date:
            raise ValidationError("start_date must be before end_date")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
