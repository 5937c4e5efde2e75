from django.core.exceptions import ObjectDoesNotExist, ValidationError


# ---------- Validation / balance errors (rejected before persistence) ----------
class UnbalancedJournalError(ValidationError):
    """Raised when a JournalEntry fails double-entry balance check."""

    def __init__(self, total_debit, total_credit):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Debit ({total_debit}) must equal Credit ({total_credit})"
        )


class InsufficientStockError(ValidationError):
    """Raised when a movement would drive on-hand quantity below zero."""

    def __init__(self, product_id, warehouse_id, on_hand, requested):
        self.product_id = product_id
        self.warehouse_id = warehouse_id
        self.on_hand = on_hand
        self.requested = requested
        super().__init__(
            f"Insufficient stock quantity for product {product_id} in "
            f"warehouse {warehouse_id}: on hand {on_hand}, requested {requested}"
        )


class InsufficientBatchError(ValidationError):
    """Raised when available batches cannot cover a FIFO deduction."""

    def __init__(self, product_id, warehouse_id, remaining):
        self.product_id = product_id
        self.warehouse_id = warehouse_id
        self.remaining = remaining
        super().__init__(
            "Insufficient batch quantity for FIFO deduction: "
            f"{remaining} of product {product_id} in warehouse "
            f"{warehouse_id} not covered"
        )


# ---------- State conflicts ----------
class InvalidTransitionError(ValidationError):
    """Raised when an object is asked to leave its state illegally."""
    pass


# ---------- Not-found errors ----------
class LedgerObjectNotFound(ObjectDoesNotExist):
    pass


class AccountNotFound(LedgerObjectNotFound):
    def __init__(self, code):
        self.code = code
        super().__init__(f"Account {code} not found")


class JournalEntryNotFound(LedgerObjectNotFound):
    def __init__(self, entry_id):
        super().__init__(f"Journal Entry with ID {entry_id} not found")


class StockTransactionNotFound(LedgerObjectNotFound):
    def __init__(self, transaction_id):
        super().__init__(f"Transaction with ID {transaction_id} not found")


class WarehouseNotFound(LedgerObjectNotFound):
    def __init__(self, warehouse_id):
        super().__init__(f"Warehouse with ID {warehouse_id} not found")


class AdjustmentNotFound(LedgerObjectNotFound):
    def __init__(self, adjustment_id):
        super().__init__(f"Adjustment with ID {adjustment_id} not found")


class OrderNotFound(LedgerObjectNotFound):
    def __init__(self, kind, order_id):
        super().__init__(f"{kind} with ID {order_id} not found")


class ProductNotFound(LedgerObjectNotFound):
    def __init__(self, product_id):
        super().__init__(f"Product with ID {product_id} not found")
