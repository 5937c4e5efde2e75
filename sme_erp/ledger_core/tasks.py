import datetime
import logging
from celery import shared_task
from django.db import models, transaction
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def recompute_account_snapshots(company_id, snapshot_date=None):
    """Rebuild per-account snapshots from booked journal lines."""
    # import lazily to avoid circular imports at module import time
    from .models import (AccountBalanceSnapshot, ChartOfAccount,
                         JournalEntryLine)
    from .services.journal import BOOKED_STATUSES

    if isinstance(snapshot_date, str):
        # Celery serializes dates as ISO strings
        snapshot_date = datetime.date.fromisoformat(snapshot_date)
    snapshot_date = snapshot_date or timezone.localdate()

    # Lines of posted (and later reversed) entries up to the cut-off
    booked = JournalEntryLine.objects.filter(
        company_id=company_id,
        journal__status__in=BOOKED_STATUSES,
        journal__deleted_at__isnull=True,
        journal__entry_date__lte=snapshot_date,
    )
    totals = {
        row["account_id"]: row
        for row in booked.values("account_id").annotate(
            debit=models.Sum("debit_amount"),
            credit=models.Sum("credit_amount"),
        )
    }

    with transaction.atomic():
        # Replace the snapshot for that date
        AccountBalanceSnapshot.objects.filter(
            company_id=company_id, snapshot_date=snapshot_date
        ).delete()

        created = 0
        for account in ChartOfAccount.objects.filter(company_id=company_id).alive():
            row = totals.get(account.pk)
            if row is None:
                continue
            AccountBalanceSnapshot.objects.create(
                company_id=company_id,
                account=account,
                snapshot_date=snapshot_date,
                # If nothing was posted, Sum returns None, so fall back to 0
                debit_balance=row["debit"] or 0,
                credit_balance=row["credit"] or 0,
            )
            created += 1

    logger.info(
        "account snapshots for company %s on %s: %s rows",
        company_id, snapshot_date, created,
    )
    return created
