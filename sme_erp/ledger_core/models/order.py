from decimal import Decimal
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from ..fsm import StateMachine
from ..managers import TenantManager
from .customer import Customer
from .entitymembership import Company
from .journal import JournalEntry
from .product import Product
from .supplier import Supplier
from .warehouse import Warehouse


class SalesOrderStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    CONFIRMED = "confirmed", "Confirmed"
    PROCESSING = "processing", "Processing"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class PurchaseOrderStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    SENT = "sent", "Sent"
    CONFIRMED = "confirmed", "Confirmed"
    RECEIVED = "received", "Received"
    CANCELLED = "cancelled", "Cancelled"


SALES_ORDER_FLOW = StateMachine(
    "sales order",
    {
        SalesOrderStatus.DRAFT: (SalesOrderStatus.CONFIRMED, SalesOrderStatus.CANCELLED),
        SalesOrderStatus.CONFIRMED: (SalesOrderStatus.PROCESSING, SalesOrderStatus.CANCELLED),
        SalesOrderStatus.PROCESSING: (SalesOrderStatus.COMPLETED, SalesOrderStatus.CANCELLED),
        SalesOrderStatus.COMPLETED: (),
        SalesOrderStatus.CANCELLED: (),
    },
)

PURCHASE_ORDER_FLOW = StateMachine(
    "purchase order",
    {
        PurchaseOrderStatus.DRAFT: (
            PurchaseOrderStatus.SENT,
            PurchaseOrderStatus.CONFIRMED,
            PurchaseOrderStatus.CANCELLED,
        ),
        PurchaseOrderStatus.SENT: (PurchaseOrderStatus.CONFIRMED, PurchaseOrderStatus.CANCELLED),
        PurchaseOrderStatus.CONFIRMED: (PurchaseOrderStatus.RECEIVED, PurchaseOrderStatus.CANCELLED),
        PurchaseOrderStatus.RECEIVED: (),
        PurchaseOrderStatus.CANCELLED: (),
    },
)


class LedgerStatus(models.TextChoices):
    NOT_APPLICABLE = "not_applicable", "Not applicable"  # not yet completed
    PENDING = "pending", "Pending"  # completed, journal entry failed
    RECORDED = "recorded", "Recorded"  # completed, journal entry created


class OrderDocument(models.Model):
    """
    Fields shared by sales and purchase orders.

    Totals are entered by the order workflow and are not recomputed here;
    total is expected to equal (subtotal - discount_amount) + tax_amount.
    """

    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    code = models.CharField(max_length=50)
    date = models.DateField()
    # Stock location whose average cost prices the order
    warehouse = models.ForeignKey(
        Warehouse, null=True, blank=True, on_delete=models.PROTECT,
        related_name="+")

    subtotal = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    tax_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(null=True, blank=True)

    # Bookkeeping outcome of completion
    ledger_status = models.CharField(
        max_length=20,
        choices=LedgerStatus.choices,
        default=LedgerStatus.NOT_APPLICABLE,
    )
    ledger_error = models.TextField(null=True, blank=True)
    journal_entry = models.OneToOneField(
        JournalEntry, null=True, blank=True, on_delete=models.SET_NULL,
        related_name="+")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True,
        on_delete=models.SET_NULL, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = TenantManager()

    # Set by subclasses
    flow = None

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.code} [{self.status}]"

    def clean(self):
        for field in ("subtotal", "discount_amount", "tax_amount", "total"):
            if getattr(self, field) < 0:
                raise ValidationError(f"{field} cannot be negative")
        if self.warehouse_id and self.warehouse.company_id != self.company_id:
            raise ValidationError("Warehouse must belong to the same company.")

    def save(self, *args, **kwargs):
        if self.pk:
            orig = type(self).objects.filter(pk=self.pk).values_list(
                "status", flat=True).first()
            if orig and orig != self.status:
                self.flow.assert_transition(orig, self.status)
        self.full_clean()
        return super().save(*args, **kwargs)

    def transition_to(self, new_status):
        self.flow.assert_transition(self.status, new_status)
        self.status = new_status
        self.save()


# ---------- Sales order ----------
class SalesOrder(OrderDocument):
    customer = models.ForeignKey(
        Customer, on_delete=models.PROTECT, related_name="sales_orders")
    status = models.CharField(
        max_length=20,
        choices=SalesOrderStatus.choices,
        default=SalesOrderStatus.DRAFT,
    )

    flow = SALES_ORDER_FLOW

    class Meta:
        db_table = "sales_orders"
        indexes = [
            models.Index(fields=["company", "status"]),
            models.Index(fields=["company", "ledger_status"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"],
                condition=models.Q(deleted_at__isnull=True),
                name="uq_company_sales_order_code",
            )
        ]

    def clean(self):
        super().clean()
        if self.customer_id and self.customer.company_id != self.company_id:
            raise ValidationError("Customer must belong to the same company.")


class SalesOrderItem(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    order = models.ForeignKey(
        SalesOrder, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT)
    quantity = models.DecimalField(max_digits=18, decimal_places=4)
    unit_price = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    line_total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    objects = TenantManager()

    class Meta:
        db_table = "sales_order_items"
        ordering = ("order", "id")

    def clean(self):
        if self.quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")
        if self.product_id and self.product.company_id != self.company_id:
            raise ValidationError("Product must belong to the same company.")

    def save(self, *args, **kwargs):
        if not self.company_id and self.order_id:
            self.company_id = self.order.company_id
        self.full_clean()
        return super().save(*args, **kwargs)


# ---------- Purchase order ----------
class PurchaseOrder(OrderDocument):
    supplier = models.ForeignKey(
        Supplier, on_delete=models.PROTECT, related_name="purchase_orders")
    status = models.CharField(
        max_length=20,
        choices=PurchaseOrderStatus.choices,
        default=PurchaseOrderStatus.DRAFT,
    )

    flow = PURCHASE_ORDER_FLOW

    class Meta:
        db_table = "purchase_orders"
        indexes = [
            models.Index(fields=["company", "status"]),
            models.Index(fields=["company", "ledger_status"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "code"],
                condition=models.Q(deleted_at__isnull=True),
                name="uq_company_purchase_order_code",
            )
        ]

    def clean(self):
        super().clean()
        if self.supplier_id and self.supplier.company_id != self.company_id:
            raise ValidationError("Supplier must belong to the same company.")


class PurchaseOrderItem(models.Model):
    company = models.ForeignKey(Company, on_delete=models.CASCADE)
    order = models.ForeignKey(
        PurchaseOrder, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(Product, on_delete=models.PROTECT)
    quantity = models.DecimalField(max_digits=18, decimal_places=4)
    unit_price = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))
    line_total = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00"))

    objects = TenantManager()

    class Meta:
        db_table = "purchase_order_items"
        ordering = ("order", "id")

    def clean(self):
        if self.quantity <= 0:
            raise ValidationError("Quantity must be greater than zero")
        if self.product_id and self.product.company_id != self.company_id:
            raise ValidationError("Product must belong to the same company.")

    def save(self, *args, **kwargs):
        if not self.company_id and self.order_id:
            self.company_id = self.order.company_id
        self.full_clean()
        return super().save(*args, **kwargs)
