from django.urls import path

from . import views

app_name = "ledger_core"

urlpatterns = [
    path("journal-entries/", views.create_journal_entry_view, name="journal-create"),
    path("journal-entries/<int:entry_id>/post/", views.post_journal_entry_view, name="journal-post"),
    path("journal-entries/<int:entry_id>/delete/", views.delete_journal_entry_view, name="journal-delete"),
    path("accounts/balances/", views.account_balances_view, name="account-balances"),
    path(
        "stock-transactions/<int:transaction_id>/confirm/",
        views.confirm_stock_transaction_view,
        name="stock-transaction-confirm",
    ),
]
