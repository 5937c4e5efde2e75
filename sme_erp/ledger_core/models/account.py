from django.core.exceptions import ValidationError
from django.db import models
from ..managers import TenantManager
from .entitymembership import Company


# Classify general ledger accounts (drives BS vs P&L)
class AccountType(models.TextChoices):
    ASSET = "asset", "Asset"
    LIABILITY = "liability", "Liability"
    EQUITY = "equity", "Equity"
    REVENUE = "revenue", "Revenue"
    EXPENSE = "expense", "Expense"


# Define whether the account normally increases
# on the debit side or credit side
NORMAL_BALANCE = [
    ("debit", "Debit"),
    ("credit", "Credit"),
]


class ChartOfAccount(models.Model):
    """
    Ledger account in the Chart of Accounts.
    - code is unique per company among live (not soft-deleted) rows
    - hierarchy is by code: parent_code points at a summary account
    - only detail (leaf) accounts carry postings in normal use
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # e.g. "131", "3331"
    code = models.CharField(max_length=50)
    name = models.CharField(max_length=255)
    account_type = models.CharField(max_length=10, choices=AccountType.choices)
    normal_balance = models.CharField(
        max_length=6,
        choices=NORMAL_BALANCE,
        default="debit",
    )
    # Optional hierarchy by code (e.g. 1331 under 133)
    parent_code = models.CharField(max_length=50, null=True, blank=True)
    level = models.PositiveSmallIntegerField(default=1)
    # Leaf (True) vs summary (False)
    is_detail = models.BooleanField(default=False)
    # “soft deactivate” accounts (stop new postings) without deleting history
    is_active = models.BooleanField(default=True)
    description = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = TenantManager()

    class Meta:
        db_table = "chart_of_accounts"
        ordering = ("company", "code")
        indexes = [
            models.Index(fields=["company", "account_type"]),
            models.Index(fields=["company", "parent_code"]),
        ]
        constraints = [
            # Codes repeat across companies but must be unique within one
            models.UniqueConstraint(
                fields=["company", "code"],
                condition=models.Q(deleted_at__isnull=True),
                name="uq_company_account_code",
            )
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def parent(self):
        if not self.parent_code:
            return None
        return (
            ChartOfAccount.objects.for_company(self.company_id)
            .alive()
            .filter(code=self.parent_code)
            .first()
        )

    def children(self):
        return (
            ChartOfAccount.objects.for_company(self.company_id)
            .alive()
            .filter(parent_code=self.code)
        )

    def is_used(self):
        from .journal import JournalEntryLine

        return JournalEntryLine.objects.filter(account=self).exists()

    def clean(self):
        if self.parent_code:
            if self.parent_code == self.code:
                raise ValidationError("An account cannot be its own parent.")
            parent = self.parent()
            if parent is None:
                raise ValidationError(
                    f"Parent account {self.parent_code} not found"
                )
            # Detail accounts are leaves
            if parent.is_detail:
                raise ValidationError(
                    f"Detail account {parent.code} cannot be used as a parent."
                )

        # A summary account with children cannot be turned into a detail one
        if self.pk and self.is_detail and self.children().exists():
            raise ValidationError(
                f"Account {self.code} has children and must stay a summary account."
            )

    def save(self, *args, **kwargs):
        """Can't disable accounts used in journal lines"""
        if self.pk:
            old = ChartOfAccount.objects.filter(pk=self.pk).first()
            # If account was active before, but now being set to inactive
            if old and old.is_active and not self.is_active and self.is_used():
                raise ValidationError(
                    "Cannot disable an account that is used in journal lines."
                )
        self.full_clean()
        return super().save(*args, **kwargs)
