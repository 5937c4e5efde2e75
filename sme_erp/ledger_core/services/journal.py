import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone
from ..exceptions import (AccountNotFound, InvalidTransitionError,
                          JournalEntryNotFound, UnbalancedJournalError)
from ..models import (ChartOfAccount, JournalEntry, JournalEntryLine,
                      JournalEntryType, JournalStatus, LedgerStatus,
                      PurchaseOrder, SalesOrder)
from ..models.journal import balance_tolerance
from .audit_helper import log_action
from .periods import resolve_period

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Entries whose lines count toward balances (a reversed entry stays in the
# books, offset by its posted mirror)
BOOKED_STATUSES = (JournalStatus.POSTED, JournalStatus.REVERSED)


def to_money(value) -> Decimal:
    """Coerce user/ORM input to a 2-place Decimal."""
    if value is None or value == "":
        return Decimal("0.00")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _resolve_line_account(company, line):
    account = line.get("account")
    if account is not None:
        if account.company_id != company.pk:
            raise AccountNotFound(account.code)
        return account

    account_id = line.get("account_id")
    account = (
        ChartOfAccount.objects.for_company(company)
        .alive()
        .filter(pk=account_id)
        .first()
    )
    if account is None:
        raise AccountNotFound(account_id)
    return account


def _normalize_lines(company, lines):
    normalized = []
    for idx, line in enumerate(lines, start=1):
        debit = to_money(line.get("debit_amount"))
        credit = to_money(line.get("credit_amount"))
        if debit < 0 or credit < 0:
            raise ValidationError(
                f"Line {idx}: debit and credit must be >= 0")
        account = _resolve_line_account(company, line)
        if not account.is_active:
            raise ValidationError(f"Account {account.code} is inactive")
        normalized.append({
            "line_number": idx,
            "account": account,
            "debit_amount": debit,
            "credit_amount": credit,
            "description": line.get("description"),
            "partner_type": line.get("partner_type"),
            "partner_id": line.get("partner_id"),
        })
    return normalized


def create_journal_entry(
    company,
    lines,
    *,
    entry_number,
    entry_date,
    entry_type=JournalEntryType.MANUAL,
    description=None,
    reference_type=None,
    reference_id=None,
    user=None,
):
    """
    Persist a DRAFT entry with its lines, atomically.

    lines: iterable of dicts with `account` (instance) or `account_id`,
    `debit_amount`, `credit_amount` and optional `description`,
    `partner_type`, `partner_id`. Line numbers follow the given order.
    """
    lines = list(lines)
    if not lines:
        raise ValidationError("A journal entry needs at least one line")

    with transaction.atomic():
        normalized = _normalize_lines(company, lines)
        total_debit = sum((ln["debit_amount"] for ln in normalized), Decimal("0.00"))
        total_credit = sum((ln["credit_amount"] for ln in normalized), Decimal("0.00"))
        if abs(total_debit - total_credit) > balance_tolerance():
            raise UnbalancedJournalError(total_debit, total_credit)

        entry = JournalEntry(
            company=company,
            period=resolve_period(company, entry_date),
            entry_number=entry_number,
            entry_date=entry_date,
            entry_type=entry_type,
            status=JournalStatus.DRAFT,
            description=description,
            reference_type=reference_type,
            reference_id=str(reference_id) if reference_id is not None else None,
            total_debit=total_debit,
            total_credit=total_credit,
            created_by=user,
        )
        entry.save()

        for ln in normalized:
            JournalEntryLine.objects.create(company=company, journal=entry, **ln)

        log_action(
            action="create",
            instance=entry,
            user=user,
            changes={
                "entry_number": entry_number,
                "entry_type": entry_type,
                "total_debit": total_debit,
                "total_credit": total_credit,
            },
        )

    logger.info(
        "journal entry %s created for %s (%s lines, %s)",
        entry.entry_number, company, len(normalized), total_debit,
    )
    return entry


def list_journal_entries(company, *, status=None, entry_type=None,
                         date_from=None, date_to=None):
    qs = JournalEntry.objects.for_company(company).alive()
    if status:
        qs = qs.filter(status=status)
    if entry_type:
        qs = qs.filter(entry_type=entry_type)
    if date_from:
        qs = qs.filter(entry_date__gte=date_from)
    if date_to:
        qs = qs.filter(entry_date__lte=date_to)
    return qs.order_by("-entry_date", "-entry_number")


def get_journal_entry(company, entry_id, *, for_update=False):
    qs = JournalEntry.objects.for_company(company).alive()
    if for_update:
        qs = qs.select_for_update()
    entry = qs.filter(pk=entry_id).first()
    if entry is None:
        raise JournalEntryNotFound(entry_id)
    return entry


def _mark_posted(entry, user):
    if entry.period_id and entry.period.is_closed:
        raise InvalidTransitionError(
            f"Cannot post into closed period {entry.period.name}")
    # Draft lines may have changed since creation; post what the lines say
    debit, credit = entry.compute_totals()
    if abs(debit - credit) > balance_tolerance():
        raise UnbalancedJournalError(debit, credit)
    entry.total_debit, entry.total_credit = debit, credit
    entry.status = JournalStatus.POSTED
    entry.posted_by = user
    entry.posted_at = timezone.now()
    entry.save()


def post_journal_entry(company, entry_id, user=None):
    with transaction.atomic():
        # Lock the row to avoid double posting
        entry = get_journal_entry(company, entry_id, for_update=True)
        if entry.status != JournalStatus.DRAFT:
            raise InvalidTransitionError("Only draft entries can be posted")
        _mark_posted(entry, user)
        log_action(action="post", instance=entry, user=user)

    logger.info("journal entry %s posted", entry.entry_number)
    return entry


def _reopen_source_orders(entry, user):
    """Orders booked by a deleted auto entry go back to pending."""
    for model in (SalesOrder, PurchaseOrder):
        for order in model.objects.for_company(entry.company_id).filter(journal_entry=entry):
            order.ledger_status = LedgerStatus.PENDING
            order.ledger_error = f"Journal entry {entry.entry_number} was deleted"
            order.journal_entry = None
            order.save(update_fields=[
                "ledger_status", "ledger_error", "journal_entry", "updated_at"])
            log_action(
                action="ledger",
                instance=order,
                user=user,
                changes={"deleted_entry": entry.entry_number},
            )
            logger.info(
                "%s %s back to pending ledger", model.__name__, order.code)


def delete_journal_entry(company, entry_id, user=None):
    with transaction.atomic():
        entry = get_journal_entry(company, entry_id, for_update=True)
        if entry.status == JournalStatus.POSTED:
            raise InvalidTransitionError("Cannot delete posted journal entry")
        if entry.status != JournalStatus.DRAFT:
            raise InvalidTransitionError(
                f"Cannot delete {entry.status} journal entry: only draft entries can be deleted"
            )
        entry.deleted_at = timezone.now()
        entry.save(update_fields=["deleted_at", "updated_at"])
        log_action(action="delete", instance=entry, user=user)
        _reopen_source_orders(entry, user)

    logger.info("journal entry %s deleted", entry.entry_number)
    return entry


def reverse_journal_entry(company, entry_id, user=None, entry_date=None,
                          description=None):
    """
    Cancel a posted entry with a posted mirror entry (debit <-> credit).

    The mirror is numbered "<original>-REV", keeps the original line order
    and points back through reversal_of. The original moves to REVERSED.
    """
    with transaction.atomic():
        original = get_journal_entry(company, entry_id, for_update=True)
        if original.status != JournalStatus.POSTED:
            raise InvalidTransitionError(
                f"Only posted entries can be reversed (entry is {original.status})"
            )

        mirrored = [
            {
                "account": line.account,
                "debit_amount": line.credit_amount,
                "credit_amount": line.debit_amount,
                "description": line.description,
                "partner_type": line.partner_type,
                "partner_id": line.partner_id,
            }
            for line in original.lines.select_related("account").order_by("line_number")
        ]
        reversal = create_journal_entry(
            company,
            mirrored,
            entry_number=f"{original.entry_number}-REV",
            entry_date=entry_date or original.entry_date,
            entry_type=original.entry_type,
            description=description or f"Reversal of {original.entry_number}",
            reference_type=original.reference_type,
            reference_id=original.reference_id,
            user=user,
        )
        reversal.reversal_of = original
        _mark_posted(reversal, user)

        original.status = JournalStatus.REVERSED
        original.save()
        log_action(
            action="reverse",
            instance=original,
            user=user,
            changes={"reversal_entry": reversal.entry_number},
        )

    logger.info(
        "journal entry %s reversed by %s",
        original.entry_number, reversal.entry_number,
    )
    return reversal


def account_balances(company, codes=None, as_of=None):
    """
    Per account code: sums of booked debits and credits.
    Drafts and deleted entries are excluded.
    """
    flt = Q(journal__status__in=BOOKED_STATUSES) & Q(journal__deleted_at__isnull=True)
    if as_of:
        flt &= Q(journal__entry_date__lte=as_of)
    qs = JournalEntryLine.objects.for_company(company).filter(flt)
    if codes:
        qs = qs.filter(account__code__in=codes)

    rows = (
        qs.values("account_id", "account__code", "account__name")
        .annotate(
            total_debit=Sum("debit_amount"),
            total_credit=Sum("credit_amount"),
        )
        .order_by("account__code")
    )
    return [
        {
            "account_id": row["account_id"],
            "code": row["account__code"],
            "name": row["account__name"],
            "total_debit": row["total_debit"] or Decimal("0.00"),
            "total_credit": row["total_credit"] or Decimal("0.00"),
            "balance": (row["total_debit"] or Decimal("0.00"))
            - (row["total_credit"] or Decimal("0.00")),
        }
        for row in rows
    ]
