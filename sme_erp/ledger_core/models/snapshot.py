from decimal import Decimal
from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .account import ChartOfAccount
from .entitymembership import Company


# ---------- Account Balance Snapshot (materialized) ----------
class AccountBalanceSnapshot(
    models.Model
):  # Per-account totals of posted journal lines, rebuilt by a Celery task

    # Tied to a specific tenant (multi-company setup)
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # on_delete= CASCADE: no orphaned snapshots once an account is gone
    account = models.ForeignKey(ChartOfAccount, on_delete=models.CASCADE)
    # Cut-off date: lines of entries dated on or before it are included
    snapshot_date = models.DateField()
    # Sum of posted debits and credits up to the cut-off
    debit_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    credit_balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    """ Example:
            131 might show Debit = 11,000,000; Credit = 0.
            3331 might show Debit = 0; Credit = 1,000,000. """

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        db_table = "account_balance_snapshots"
        indexes = [models.Index(fields=["company", "snapshot_date"])]

        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(debit_balance__gte=0) &
                    models.Q(credit_balance__gte=0)
                ),
                name="ab_snap_non_negative_amounts",
            ),
            # Do not store duplicate snapshots for the same account/date
            models.UniqueConstraint(
                fields=["company", "account", "snapshot_date"],
                name="uq_company_account_snapshot_date",
            ),
        ]

    def __str__(self):
        slug = self.company.slug
        acc = self.account.code
        return (
            f"{slug} {self.snapshot_date} | {acc}: "
            f"D {self.debit_balance} / C {self.credit_balance}"
        )

    @property
    def net_balance(self):
        return self.debit_balance - self.credit_balance

    def clean(self):
        # Tenancy check
        ac = self.account
        if ac and ac.company_id != self.company_id:
            raise ValidationError("Account must belong to the same company.")

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)
