from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..exceptions import InvalidTransitionError, UnbalancedJournalError
from ..fsm import StateMachine
from ..managers import TenantManager
from .account import ChartOfAccount
from .entitymembership import Company
from .period import Period


class JournalEntryType(models.TextChoices):
    MANUAL = "manual", "Manual"
    AUTO_SALES = "auto_sales", "Auto: sales"
    AUTO_PURCHASE = "auto_purchase", "Auto: purchase"
    AUTO_INVENTORY = "auto_inventory", "Auto: inventory"
    AUTO_PAYMENT = "auto_payment", "Auto: payment"
    OPENING = "opening", "Opening"
    CLOSING = "closing", "Closing"


class JournalStatus(models.TextChoices):
    DRAFT = "draft", "Draft"  # still editable
    POSTED = "posted", "Posted"  # finalized
    REVERSED = "reversed", "Reversed"  # cancelled by a mirror entry


# JournalEntry workflow; deletion is a soft marker on drafts, not a state
JOURNAL_FLOW = StateMachine(
    "journal entry",
    {
        JournalStatus.DRAFT: (JournalStatus.POSTED,),
        JournalStatus.POSTED: (JournalStatus.REVERSED,),
        JournalStatus.REVERSED: (),
    },
)


def balance_tolerance():
    return Decimal(str(getattr(settings, "LEDGER_BALANCE_TOLERANCE", "0.01")))


# ---------- Journal (Header) & JournalEntryLine ----------
class JournalEntry(models.Model):  # Represents one accounting transaction
    # Multi-tenant: every entry belongs to a company
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    # Optional link to an accounting period (for closing)
    period = models.ForeignKey(
        Period,
        null=True,
        blank=True,
        on_delete=models.PROTECT,  # Prevent breaking historical ledger
    )
    entry_number = models.CharField(max_length=50)
    entry_date = models.DateField()
    entry_type = models.CharField(
        max_length=20,
        choices=JournalEntryType.choices,
        default=JournalEntryType.MANUAL,
    )
    status = models.CharField(
        max_length=10,
        choices=JournalStatus.choices,
        default=JournalStatus.DRAFT,
    )
    description = models.TextField(null=True, blank=True)

    # optional source document (sales_order, purchase_order, stock_transaction)
    reference_type = models.CharField(max_length=50, null=True, blank=True)
    reference_id = models.CharField(max_length=64, null=True, blank=True)

    # Stored totals; always equal within tolerance
    total_debit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total_credit = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="journal_entries_created",
    )
    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True, on_delete=models.SET_NULL,
        related_name="journal_entries_posted",
    )
    posted_at = models.DateTimeField(null=True, blank=True)

    # Set on a reversing entry, points at the entry it cancels
    reversal_of = models.OneToOneField(
        "self",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="reversed_by",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    # Enforce tenant scoping
    objects = TenantManager()

    class Meta:
        db_table = "journal_entries"
        indexes = [
            models.Index(fields=["company", "entry_date"]),
            models.Index(fields=["company", "status"]),
            models.Index(fields=["company", "reference_type", "reference_id"]),
        ]
        constraints = [
            # Within one company, each live entry number must be unique
            models.UniqueConstraint(
                fields=["company", "entry_number"],
                condition=models.Q(deleted_at__isnull=True),
                name="uq_je_company_number",
            )
        ]

    def __str__(self):
        return f"JE {self.entry_number} {self.entry_date} [{self.status}]"

    # Aggregate all debit and credit amounts across entry’s lines
    def compute_totals(self):
        """Return debits, credits sums for lines"""
        aggs = self.lines.aggregate(
            total_debit=models.Sum("debit_amount"),
            total_credit=models.Sum("credit_amount"),
        )
        return (
            aggs["total_debit"] or Decimal("0.00"),
            aggs["total_credit"] or Decimal("0.00"),
        )

    # True if double-entry rule holds: total debits = total credits
    def is_balanced(self):
        diff = abs(Decimal(self.total_debit) - Decimal(self.total_credit))
        return diff <= balance_tolerance()

    def assert_balanced(self):
        if not self.is_balanced():
            raise UnbalancedJournalError(self.total_debit, self.total_credit)

    @property
    def is_draft(self):
        return self.status == JournalStatus.DRAFT

    def clean(self):
        if self.period_id and self.period.company_id != self.company_id:
            raise ValidationError(
                "Period must belong to the same company as journal"
            )
        # Don't allow new drafts in closed periods
        if self.status == JournalStatus.DRAFT and self.period_id and self.period.is_closed:
            raise ValidationError(
                "Cannot create or edit journal inside a closed period."
            )

    def save(self, *args, **kwargs):
        if self.pk:  # Does this row already exist in DB?
            orig = JournalEntry.objects.filter(pk=self.pk).values_list(
                "status", flat=True).first()
            # Only forward moves along JOURNAL_FLOW (no unposting)
            if orig and orig != self.status:
                JOURNAL_FLOW.assert_transition(orig, self.status)

        # Balance is checked on every write, whatever the caller
        self.assert_balanced()
        self.full_clean()
        super().save(*args, **kwargs)


class PartnerType(models.TextChoices):
    CUSTOMER = "customer", "Customer"
    SUPPLIER = "supplier", "Supplier"


class JournalEntryLine(models.Model):  # Stores Lines ( credits / debits )
    """
    Each line belongs to a journal entry and to a GL account.
    line_number follows the order the lines were supplied (1..N).
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    journal = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )
    line_number = models.PositiveIntegerField()

    # Can’t delete account if lines exist → PROTECT
    account = models.ForeignKey(
        ChartOfAccount, on_delete=models.PROTECT, related_name="journal_lines")

    debit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    description = models.CharField(max_length=400, null=True, blank=True)

    # Subsidiary-ledger reference (customer / supplier)
    partner_type = models.CharField(
        max_length=20, choices=PartnerType.choices, null=True, blank=True)
    partner_id = models.CharField(max_length=64, null=True, blank=True)

    objects = TenantManager()

    class Meta:
        db_table = "journal_entry_lines"
        ordering = ("journal", "line_number")
        indexes = [
            models.Index(fields=["company", "account"]),
            models.Index(fields=["company", "journal"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["journal", "line_number"], name="uq_jl_journal_line_number"
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(debit_amount__gte=0) &
                    models.Q(credit_amount__gte=0)
                ),
                name="jl_non_negative_amounts",
            ),
        ]

    def __str__(self):
        return (
            f"{self.journal_id}#{self.line_number} | {self.account.code} "
            f"| D:{self.debit_amount} C:{self.credit_amount}"
        )

    def clean(self):
        # Ensure no negative values sneak in
        # (redundant with CheckConstraint but useful at app-level)
        if self.debit_amount < 0 or self.credit_amount < 0:
            raise ValidationError("Debit and credit must be >= 0")

        # Prevent “cross-company” contamination
        if self.account_id and self.account.company_id != self.company_id:
            raise ValidationError(
                "JournalEntryLine.account must belong to the same company.")
        if self.journal_id and self.journal.company_id != self.company_id:
            raise ValidationError(
                "JournalEntryLine.company must equal JournalEntry.company")

    def _assert_journal_is_draft(self, verb):
        status = JournalEntry.objects.filter(pk=self.journal_id).values_list(
            "status", flat=True).first()
        if status and status != JournalStatus.DRAFT:
            raise InvalidTransitionError(
                f"Cannot {verb} JournalEntryLine: parent journal is {status}."
            )

    def save(self, *args, **kwargs):
        # Copy tenant from parent when not given
        if not self.company_id and self.journal_id:
            self.company_id = self.journal.company_id

        # Lines are frozen once the parent leaves DRAFT
        self._assert_journal_is_draft("modify" if self.pk else "add")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        self._assert_journal_is_draft("delete")
        return super().delete(*args, **kwargs)
