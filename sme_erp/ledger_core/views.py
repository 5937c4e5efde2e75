import json
import logging
from functools import wraps
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST
from .forms import JournalEntryForm, line_formset_from_payload
from .services.journal import (account_balances, create_journal_entry,
                               delete_journal_entry, post_journal_entry)
from .services.stock import confirm_stock_transaction

logger = logging.getLogger(__name__)


def _entry_json(entry):
    return {
        "id": entry.pk,
        "entry_number": entry.entry_number,
        "entry_date": entry.entry_date.isoformat(),
        "entry_type": entry.entry_type,
        "status": entry.status,
        "total_debit": str(entry.total_debit),
        "total_credit": str(entry.total_credit),
        "posted_at": entry.posted_at.isoformat() if entry.posted_at else None,
        "lines": [
            {
                "line_number": line.line_number,
                "account_code": line.account.code,
                "debit_amount": str(line.debit_amount),
                "credit_amount": str(line.credit_amount),
                "description": line.description,
            }
            for line in entry.lines.select_related("account").order_by("line_number")
        ],
    }


def company_json_view(view):
    """
    Requires request.company (set by CurrentCompanyMiddleware) and maps
    ledger errors to HTTP: validation -> 400, not found -> 404.
    """
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        company = getattr(request, "company", None)
        if company is None:
            return JsonResponse({"ok": False, "error": "No active company"}, status=403)
        try:
            return view(request, company, *args, **kwargs)
        except ObjectDoesNotExist as e:
            return JsonResponse({"ok": False, "error": str(e)}, status=404)
        except ValidationError as e:
            return JsonResponse({"ok": False, "error": "; ".join(e.messages)}, status=400)
    return wrapper


@require_POST
@company_json_view
def create_journal_entry_view(request, company):
    try:
        payload = json.loads(request.body or b"{}")
    except json.JSONDecodeError:
        return JsonResponse({"ok": False, "error": "Invalid JSON"}, status=400)

    form = JournalEntryForm(payload)
    formset = line_formset_from_payload(payload.get("lines") or [], company)
    if not form.is_valid() or not formset.is_valid():
        errors = form.errors.get_json_data()
        if any(formset.errors):
            errors["lines"] = [f.errors.get_json_data() for f in formset.forms]
        if formset.non_form_errors():
            errors["lines_non_form"] = formset.non_form_errors().get_json_data()
        return JsonResponse({"ok": False, "errors": errors}, status=400)

    data = form.cleaned_data
    entry = create_journal_entry(
        company,
        formset.service_lines(),
        entry_number=data["entry_number"],
        entry_date=data["entry_date"],
        entry_type=data["entry_type"],
        description=data.get("description") or None,
        reference_type=data.get("reference_type") or None,
        reference_id=data.get("reference_id") or None,
        user=request.user,
    )
    return JsonResponse({"ok": True, "entry": _entry_json(entry)}, status=201)


@require_POST
@company_json_view
def post_journal_entry_view(request, company, entry_id):
    entry = post_journal_entry(company, entry_id, user=request.user)
    return JsonResponse({"ok": True, "entry": _entry_json(entry)})


@require_POST
@company_json_view
def delete_journal_entry_view(request, company, entry_id):
    entry = delete_journal_entry(company, entry_id, user=request.user)
    return JsonResponse({"ok": True, "id": entry.pk})


@require_GET
@company_json_view
def account_balances_view(request, company):
    codes = request.GET.getlist("code") or None
    rows = account_balances(company, codes=codes)
    return JsonResponse({
        "ok": True,
        "balances": [
            {
                "code": r["code"],
                "name": r["name"],
                "total_debit": str(r["total_debit"]),
                "total_credit": str(r["total_credit"]),
                "balance": str(r["balance"]),
            }
            for r in rows
        ],
    })


@require_POST
@company_json_view
def confirm_stock_transaction_view(request, company, transaction_id):
    txn = confirm_stock_transaction(company, transaction_id, user=request.user)
    return JsonResponse({"ok": True, "code": txn.code, "status": txn.status})
