from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import (ChartOfAccount, JournalEntry, JournalEntryLine,
                     JournalStatus, Period, ProductBatch, StockBalance,
                     StockTransaction, StockTransactionStatus)

"""Block deletion if account has ever been used in a journal line."""


@receiver(pre_delete, sender=ChartOfAccount)
def prevent_delete_account_with_journal_lines(sender, instance, **kwargs):
    if JournalEntryLine.objects.filter(account=instance).exists():
        raise ValidationError("Cannot delete account used in journal lines.")


"""Entries are soft-deleted while draft; booked ones are never removed."""


@receiver(pre_delete, sender=JournalEntry)
def prevent_delete_booked_journal(sender, instance, **kwargs):
    if instance.status != JournalStatus.DRAFT:
        raise ValidationError(
            f"Cannot delete {instance.status} journal entry.")


"""Block deletion if period has booked journals."""


@receiver(pre_delete, sender=Period)
def prevent_delete_period_with_posted_journals(sender, instance, **kwargs):
    if JournalEntry.objects.filter(
        period=instance, status__in=[JournalStatus.POSTED, JournalStatus.REVERSED]
    ).exists():
        raise ValidationError(
            "Cannot delete a period with posted journal entries.")


"""Stock history: balances, batches and confirmed movements stay."""


@receiver(pre_delete, sender=StockBalance)
@receiver(pre_delete, sender=ProductBatch)
def prevent_delete_stock_ledger_rows(sender, instance, **kwargs):
    raise ValidationError(f"{sender.__name__} rows are never deleted.")


@receiver(pre_delete, sender=StockTransaction)
def prevent_delete_confirmed_stock_transaction(sender, instance, **kwargs):
    if instance.status == StockTransactionStatus.CONFIRMED:
        raise ValidationError("Cannot delete a confirmed stock transaction.")
