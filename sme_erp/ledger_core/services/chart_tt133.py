import logging
from django.db import transaction
from ..models import AccountType, ChartOfAccount

logger = logging.getLogger(__name__)

# (code, name, type, parent_code, is_detail); parents come before children
TT133_ACCOUNTS = [
    ("111", "Tiền mặt", AccountType.ASSET, None, True),
    ("112", "Tiền gửi ngân hàng", AccountType.ASSET, None, True),
    ("131", "Phải thu của khách hàng", AccountType.ASSET, None, True),
    ("133", "Thuế GTGT được khấu trừ", AccountType.ASSET, None, False),
    ("1331", "Thuế GTGT được khấu trừ của hàng hóa, dịch vụ", AccountType.ASSET, "133", True),
    ("152", "Nguyên liệu, vật liệu", AccountType.ASSET, None, True),
    ("156", "Hàng hóa", AccountType.ASSET, None, True),
    ("211", "Tài sản cố định", AccountType.ASSET, None, True),
    ("331", "Phải trả cho người bán", AccountType.LIABILITY, None, True),
    ("333", "Thuế và các khoản phải nộp Nhà nước", AccountType.LIABILITY, None, False),
    ("3331", "Thuế giá trị gia tăng phải nộp", AccountType.LIABILITY, "333", True),
    ("334", "Phải trả người lao động", AccountType.LIABILITY, None, True),
    ("411", "Vốn đầu tư của chủ sở hữu", AccountType.EQUITY, None, True),
    ("421", "Lợi nhuận sau thuế chưa phân phối", AccountType.EQUITY, None, True),
    ("511", "Doanh thu bán hàng và cung cấp dịch vụ", AccountType.REVENUE, None, True),
    ("515", "Doanh thu hoạt động tài chính", AccountType.REVENUE, None, True),
    ("632", "Giá vốn hàng bán", AccountType.EXPENSE, None, True),
    ("642", "Chi phí quản lý kinh doanh", AccountType.EXPENSE, None, True),
    ("711", "Thu nhập khác", AccountType.REVENUE, None, True),
    ("811", "Chi phí khác", AccountType.EXPENSE, None, True),
    ("821", "Chi phí thuế thu nhập doanh nghiệp", AccountType.EXPENSE, None, True),
    ("911", "Xác định kết quả kinh doanh", AccountType.EQUITY, None, True),
]

CREDIT_NORMAL = {AccountType.LIABILITY, AccountType.EQUITY, AccountType.REVENUE}


@transaction.atomic
def install_tt133_chart(company, codes=None):
    """Create the missing TT133 accounts; existing codes are left alone."""
    existing = set(
        ChartOfAccount.objects.for_company(company).alive().values_list("code", flat=True)
    )
    created = []
    for code, name, acc_type, parent_code, is_detail in TT133_ACCOUNTS:
        if codes is not None and code not in codes:
            continue
        if code in existing:
            continue
        created.append(
            ChartOfAccount.objects.create(
                company=company,
                code=code,
                name=name,
                account_type=acc_type,
                normal_balance="credit" if acc_type in CREDIT_NORMAL else "debit",
                parent_code=parent_code,
                level=2 if parent_code else 1,
                is_detail=is_detail,
            )
        )
    logger.info("installed %s TT133 accounts for %s", len(created), company)
    return created
