import datetime
from decimal import Decimal

from ..models import (Company, Customer, EntityMembership, Product, Supplier,
                      User, Warehouse)
from ..services.chart_tt133 import install_tt133_chart
from ..services.stock import confirm_stock_transaction, create_stock_transaction

TODAY = datetime.date(2025, 9, 15)


def make_company(name="Công ty TNHH Minh Anh", slug="minh-anh", with_chart=True, codes=None):
    company = Company.objects.create(name=name, slug=slug)
    if with_chart:
        install_tt133_chart(company, codes=codes)
    return company


def make_user(company, username="ketoan", role="accountant"):
    user = User.objects.create_user(
        username=username, password="pw", default_company=company)
    EntityMembership.objects.create(user=user, company=company, role=role)
    return user


def make_warehouse(company, code="WH-HN", name="Kho Hà Nội"):
    return Warehouse.objects.create(company=company, code=code, name=name)


def make_product(company, sku="SP001", name="Bàn gỗ"):
    return Product.objects.create(company=company, sku=sku, name=name)


def make_customer(company, code="KH001", name="Cửa hàng Hoa Mai"):
    return Customer.objects.create(company=company, code=code, name=name)


def make_supplier(company, code="NCC001", name="Xưởng gỗ Bình Dương"):
    return Supplier.objects.create(company=company, code=code, name=name)


def stock_in(company, warehouse, product, quantity, unit_cost, code, user=None,
             txn_type="in"):
    """Create and confirm a one-line movement."""
    txn = create_stock_transaction(
        company,
        {"code": code, "date": TODAY, "txn_type": txn_type, "warehouse": warehouse},
        [{"product": product, "quantity": Decimal(str(quantity)),
          "unit_cost": Decimal(str(unit_cost))}],
        user=user,
    )
    return confirm_stock_transaction(company, txn.pk, user=user)


def stock_out(company, warehouse, product, quantity, code, user=None):
    txn = create_stock_transaction(
        company,
        {"code": code, "date": TODAY, "txn_type": "out", "warehouse": warehouse},
        [{"product": product, "quantity": Decimal(str(quantity))}],
        user=user,
    )
    return confirm_stock_transaction(company, txn.pk, user=user)
