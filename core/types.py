"""
타입 정의

원장, 캐시 소비자, 웹 레이어가 공유하는 핵심 Enum.
모든 Enum은 str을 상속하여 일반 문자열로 직렬화됨
"""

from enum import Enum


class EntryKind(str, Enum):
    """항목의 원장 열 (입금 / 출금)"""

    CREDIT = "credit"
    DEBIT = "debit"


class MemoStatus(str, Enum):
    """일일 현금 메모 상태"""

    DRAFT = "draft"
    POSTED = "posted"


class PaymentMethod(str, Enum):
    """결제 수단"""

    CASH = "cash"
    CHEQUE = "cheque"
    BANK_TRANSFER = "bank_transfer"
    ONLINE = "online"


class CreditCategory(str, Enum):
    """입금(credit) 카테고리"""

    CUSTOMER_PAYMENT = "customer_payment"
    SALE = "sale"
    OTHER_INCOME = "other_income"
    GENERAL = "general"


class DebitCategory(str, Enum):
    """출금(debit) 카테고리"""

    MAZDOOR = "mazdoor"
    ELECTRICITY = "electricity"
    RENT = "rent"
    TRANSPORT = "transport"
    RAW_MATERIAL = "raw_material"
    MAINTENANCE = "maintenance"
    OTHER = "other"
    SUPPLIER_PAYMENT = "supplier_payment"


class PartyKind(str, Enum):
    """거래 내역을 캐시하는 거래처 종류"""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"


# 고객(customer) 연결이 가능한 입금 카테고리
CREDIT_CATEGORIES_WITH_CUSTOMER: frozenset[str] = frozenset({
    CreditCategory.CUSTOMER_PAYMENT.value,
    CreditCategory.SALE.value,
})

# 공급처(supplier) 연결이 가능한 출금 카테고리
DEBIT_CATEGORIES_WITH_SUPPLIER: frozenset[str] = frozenset({
    DebitCategory.RAW_MATERIAL.value,
    DebitCategory.SUPPLIER_PAYMENT.value,
})

# 일꾼(mazdoor) 연결이 가능한 출금 카테고리
DEBIT_CATEGORIES_WITH_MAZDOOR: frozenset[str] = frozenset({
    DebitCategory.MAZDOOR.value,
})

# 모든 입금 항목을 선택하는 리포트용 가상 카테고리
ALL_CREDIT_CATEGORY = "credit"
