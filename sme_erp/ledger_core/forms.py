"""
Input validation for the JSON endpoints.

Amounts are checked here (>= 0, two decimals); balance is checked by the
journal service, which is the single place that enforces it.
"""
from decimal import Decimal
from django import forms
from django.core.exceptions import ValidationError
from django.forms import BaseFormSet, formset_factory
from .models import ChartOfAccount, JournalEntryType, PartnerType


class JournalEntryForm(forms.Form):
    entry_number = forms.CharField(max_length=50)
    entry_date = forms.DateField()
    entry_type = forms.ChoiceField(
        choices=JournalEntryType.choices, required=False,
        initial=JournalEntryType.MANUAL)
    description = forms.CharField(required=False)
    reference_type = forms.CharField(max_length=50, required=False)
    reference_id = forms.CharField(max_length=64, required=False)

    def clean_entry_type(self):
        return self.cleaned_data.get("entry_type") or JournalEntryType.MANUAL


class JournalEntryLineForm(forms.Form):
    account_id = forms.ModelChoiceField(queryset=ChartOfAccount.objects.none())
    debit_amount = forms.DecimalField(
        max_digits=18, decimal_places=2, min_value=Decimal("0"),
        required=False)
    credit_amount = forms.DecimalField(
        max_digits=18, decimal_places=2, min_value=Decimal("0"),
        required=False)
    description = forms.CharField(max_length=400, required=False)
    partner_type = forms.ChoiceField(
        choices=[("", "")] + list(PartnerType.choices), required=False)
    partner_id = forms.CharField(max_length=64, required=False)

    def __init__(self, *args, company=None, **kwargs):
        super().__init__(*args, **kwargs)
        # Only the tenant's live accounts are selectable
        self.fields["account_id"].queryset = (
            ChartOfAccount.objects.for_company(company).alive()
            if company is not None
            else ChartOfAccount.objects.none()
        )

    def clean(self):
        cleaned = super().clean()
        debit = cleaned.get("debit_amount") or Decimal("0")
        credit = cleaned.get("credit_amount") or Decimal("0")
        if debit == 0 and credit == 0:
            raise ValidationError("Either debit or credit amount must be set")
        cleaned["debit_amount"] = debit
        cleaned["credit_amount"] = credit
        return cleaned


class BaseJournalEntryLineFormSet(BaseFormSet):
    def clean(self):
        if any(self.errors):
            return
        if not [f for f in self.forms if f.cleaned_data]:
            raise ValidationError("A journal entry needs at least one line")

    def service_lines(self):
        """cleaned_data in the shape create_journal_entry expects"""
        lines = []
        for form in self.forms:
            data = form.cleaned_data
            if not data:
                continue
            lines.append({
                "account": data["account_id"],
                "debit_amount": data["debit_amount"],
                "credit_amount": data["credit_amount"],
                "description": data.get("description") or None,
                "partner_type": data.get("partner_type") or None,
                "partner_id": data.get("partner_id") or None,
            })
        return lines


JournalEntryLineFormSet = formset_factory(
    JournalEntryLineForm,
    formset=BaseJournalEntryLineFormSet,
    extra=0,
)


def line_formset_from_payload(lines, company):
    """Build a bound formset from a JSON list of line dicts."""
    data = {
        "form-TOTAL_FORMS": str(len(lines)),
        "form-INITIAL_FORMS": "0",
    }
    for idx, line in enumerate(lines):
        for key, value in line.items():
            data[f"form-{idx}-{key}"] = "" if value is None else str(value)
    return JournalEntryLineFormSet(data, form_kwargs={"company": company})
