from io import StringIO

from django.core.exceptions import ValidationError
from django.core.management import CommandError, call_command
from django.test import TestCase

from ..exceptions import AccountNotFound
from ..models import AccountType, ChartOfAccount, Company
from ..services.accounts import (child_accounts, deactivate_account,
                                 find_accounts_by_code, list_accounts,
                                 soft_delete_account)
from ..services.chart_tt133 import TT133_ACCOUNTS, install_tt133_chart
from ..services.journal import create_journal_entry
from .helpers import TODAY, make_company


class ChartInstallTests(TestCase):

    def test_install_creates_every_account_once(self):
        company = make_company(with_chart=False)
        created = install_tt133_chart(company)
        self.assertEqual(len(created), len(TT133_ACCOUNTS))
        # Second run is a no-op
        self.assertEqual(install_tt133_chart(company), [])

    def test_normal_balance_follows_account_type(self):
        company = make_company()
        payable = ChartOfAccount.objects.get(company=company, code="331")
        cash = ChartOfAccount.objects.get(company=company, code="111")
        self.assertEqual(payable.account_type, AccountType.LIABILITY)
        self.assertEqual(payable.normal_balance, "credit")
        self.assertEqual(cash.normal_balance, "debit")

    def test_vat_accounts_sit_under_summary_parents(self):
        company = make_company()
        output_vat = ChartOfAccount.objects.get(company=company, code="3331")
        self.assertEqual(output_vat.parent().code, "333")
        self.assertFalse(output_vat.parent().is_detail)
        self.assertEqual(
            list(child_accounts(company, "133").values_list("code", flat=True)), ["1331"])

    def test_lookup_of_several_codes_names_the_first_missing(self):
        company = make_company(codes={"131", "511"})
        with self.assertRaises(AccountNotFound) as cm:
            find_accounts_by_code(company, ["131", "3331", "632"])
        self.assertEqual(cm.exception.code, "3331")

    def test_seed_command_is_idempotent(self):
        Company.objects.create(name="Seed Co", slug="seed-co")
        out = StringIO()

        call_command("seed_chart_of_accounts", company="seed-co", stdout=out)
        call_command("seed_chart_of_accounts", company="seed-co", stdout=out)

        self.assertEqual(
            ChartOfAccount.objects.filter(company__slug="seed-co").count(),
            len(TT133_ACCOUNTS),
        )
        self.assertIn("0 accounts created.", out.getvalue())

    def test_seed_command_unknown_company(self):
        with self.assertRaises(CommandError):
            call_command("seed_chart_of_accounts", company="nope", stdout=StringIO())


class ChartOfAccountRuleTests(TestCase):

    def setUp(self):
        self.company = make_company()

    def post_to(self, debit_code, credit_code):
        accounts = find_accounts_by_code(self.company, [debit_code, credit_code])
        return create_journal_entry(
            self.company,
            [
                {"account": accounts[debit_code], "debit_amount": 10, "credit_amount": 0},
                {"account": accounts[credit_code], "debit_amount": 0, "credit_amount": 10},
            ],
            entry_number="JE-RULE",
            entry_date=TODAY,
        )

    def test_detail_account_cannot_be_a_parent(self):
        with self.assertRaises(ValidationError):
            ChartOfAccount.objects.create(
                company=self.company, code="1111", name="Tiền Việt Nam",
                account_type=AccountType.ASSET, parent_code="111", level=2,
                is_detail=True)

    def test_parent_must_exist(self):
        with self.assertRaises(ValidationError):
            ChartOfAccount.objects.create(
                company=self.company, code="3388", name="Phải trả khác",
                account_type=AccountType.LIABILITY, parent_code="338", level=2,
                is_detail=True)

    def test_code_is_unique_within_a_company(self):
        with self.assertRaises(ValidationError):
            ChartOfAccount.objects.create(
                company=self.company, code="111", name="Trùng mã",
                account_type=AccountType.ASSET, is_detail=True)

    def test_used_account_cannot_be_deactivated_or_deleted(self):
        self.post_to("111", "511")
        with self.assertRaises(ValidationError):
            deactivate_account(self.company, "111")
        with self.assertRaises(ValidationError):
            soft_delete_account(self.company, "111")
        self.assertTrue(ChartOfAccount.objects.get(company=self.company, code="111").is_active)

    def test_inactive_account_rejects_new_lines(self):
        deactivate_account(self.company, "112")
        self.assertNotIn(
            "112",
            list(list_accounts(self.company, include_inactive=False)
                 .values_list("code", flat=True)),
        )
        with self.assertRaises(ValidationError):
            self.post_to("112", "511")

    def test_summary_with_children_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            soft_delete_account(self.company, "333")

    def test_soft_deleted_code_can_be_reused(self):
        soft_delete_account(self.company, "515")
        with self.assertRaises(AccountNotFound):
            find_accounts_by_code(self.company, ["515"])
        ChartOfAccount.objects.create(
            company=self.company, code="515", name="Doanh thu tài chính",
            account_type=AccountType.REVENUE, normal_balance="credit",
            is_detail=True)
        self.assertEqual(
            ChartOfAccount.objects.filter(company=self.company, code="515").count(), 2)
