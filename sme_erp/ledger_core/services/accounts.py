import logging
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from ..exceptions import AccountNotFound
from ..models import ChartOfAccount
from .audit_helper import log_action

logger = logging.getLogger(__name__)


def find_account_by_code(company, code):
    """Exact lookup of a live account; a missing code is a hard error."""
    account = (
        ChartOfAccount.objects.for_company(company)
        .alive()
        .filter(code=code)
        .first()
    )
    if account is None:
        raise AccountNotFound(code)
    return account


def find_accounts_by_code(company, codes):
    """Resolve several codes at once, failing on the first missing one."""
    found = {
        acc.code: acc
        for acc in ChartOfAccount.objects.for_company(company)
        .alive()
        .filter(code__in=codes)
    }
    for code in codes:
        if code not in found:
            raise AccountNotFound(code)
    return found


def list_accounts(company, include_inactive=True):
    qs = ChartOfAccount.objects.for_company(company).alive().order_by("code")
    if not include_inactive:
        qs = qs.filter(is_active=True)
    return qs


def child_accounts(company, code):
    parent = find_account_by_code(company, code)
    return parent.children().order_by("code")


def deactivate_account(company, code, user=None):
    account = find_account_by_code(company, code)
    # ChartOfAccount.save refuses when the account carries journal lines
    account.is_active = False
    account.save()
    log_action(action="deactivate", instance=account, user=user)
    logger.info("account %s deactivated for %s", code, company)
    return account


@transaction.atomic
def soft_delete_account(company, code, user=None):
    account = find_account_by_code(company, code)
    if account.is_used():
        raise ValidationError(
            f"Cannot delete account {code}: it is used in journal lines")
    if account.children().exists():
        raise ValidationError(
            f"Cannot delete account {code}: it has child accounts")

    account.deleted_at = timezone.now()
    account.save(update_fields=["deleted_at", "updated_at"])
    log_action(action="delete", instance=account, user=user)
    logger.info("account %s soft-deleted for %s", code, company)
    return account
