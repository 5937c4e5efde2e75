import datetime
from decimal import Decimal

from django.test import TestCase

from ..models import AccountBalanceSnapshot
from ..services.accounts import find_account_by_code
from ..services.journal import create_journal_entry, post_journal_entry
from ..tasks import recompute_account_snapshots
from .helpers import TODAY, make_company


class AccountSnapshotTaskTests(TestCase):
    def setUp(self):
        self.company = make_company()
        self.cash = find_account_by_code(self.company, "111")
        self.revenue = find_account_by_code(self.company, "511")

    def book(self, number, amount, entry_date=TODAY, post=True):
        entry = create_journal_entry(
            self.company,
            [
                {"account": self.cash, "debit_amount": amount, "credit_amount": 0},
                {"account": self.revenue, "debit_amount": 0, "credit_amount": amount},
            ],
            entry_number=number,
            entry_date=entry_date,
        )
        if post:
            post_journal_entry(self.company, entry.pk)
        return entry

    def test_snapshot_sums_posted_lines_up_to_the_date(self):
        self.book("JE-1", Decimal("300"))
        self.book("JE-2", Decimal("200"), entry_date=TODAY - datetime.timedelta(days=3))
        self.book("JE-3", Decimal("999"), post=False)
        self.book("JE-4", Decimal("50"), entry_date=TODAY + datetime.timedelta(days=1))

        # apply() runs the task in-process, as a worker would
        created = recompute_account_snapshots.apply(
            args=(self.company.pk, TODAY.isoformat())).get()

        self.assertEqual(created, 2)
        cash = AccountBalanceSnapshot.objects.get(
            company=self.company, account=self.cash, snapshot_date=TODAY)
        self.assertEqual(cash.debit_balance, Decimal("500.00"))
        self.assertEqual(cash.credit_balance, Decimal("0.00"))
        self.assertEqual(cash.net_balance, Decimal("500.00"))
        revenue = AccountBalanceSnapshot.objects.get(
            company=self.company, account=self.revenue, snapshot_date=TODAY)
        self.assertEqual(revenue.net_balance, Decimal("-500.00"))

    def test_rerun_replaces_the_snapshot(self):
        self.book("JE-1", Decimal("300"))
        recompute_account_snapshots(self.company.pk, TODAY)
        self.book("JE-2", Decimal("100"))
        recompute_account_snapshots(self.company.pk, TODAY)

        rows = AccountBalanceSnapshot.objects.filter(
            company=self.company, snapshot_date=TODAY)
        self.assertEqual(rows.count(), 2)
        self.assertEqual(rows.get(account=self.cash).debit_balance, Decimal("400.00"))

    def test_other_company_lines_are_ignored(self):
        other = make_company(name="Other", slug="other")
        self.book("JE-1", Decimal("300"))
        self.assertEqual(recompute_account_snapshots(other.pk, TODAY), 0)
        self.assertFalse(AccountBalanceSnapshot.objects.filter(company=other).exists())
