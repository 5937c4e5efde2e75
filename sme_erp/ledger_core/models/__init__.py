from .account import AccountType, ChartOfAccount
from .adjustment import (ADJUSTMENT_FLOW, Adjustment, AdjustmentItem,
                         AdjustmentReason, AdjustmentStatus)
from .auditlog import AuditLog
from .customer import Customer
from .entitymembership import Company, EntityMembership, User
from .journal import (JOURNAL_FLOW, JournalEntry, JournalEntryLine,
                      JournalEntryType, JournalStatus, PartnerType)
from .order import (PURCHASE_ORDER_FLOW, SALES_ORDER_FLOW, LedgerStatus,
                    PurchaseOrder, PurchaseOrderItem, PurchaseOrderStatus,
                    SalesOrder, SalesOrderItem, SalesOrderStatus)
from .period import Period
from .product import Product
from .snapshot import AccountBalanceSnapshot
from .stock import BatchStatus, ProductBatch, StockBalance
from .stock_transaction import (STOCK_TRANSACTION_FLOW, StockTransaction,
                                StockTransactionItem, StockTransactionSource,
                                StockTransactionStatus, StockTransactionType)
from .supplier import Supplier
from .warehouse import Warehouse
