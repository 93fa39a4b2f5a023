"""
원장 항목

일일 현금 메모의 입금(credit) 또는 출금(debit) 한 줄.

``CreditEntry``와 ``DebitEntry``는 종류별로 허용된 연결만 가지며
카테고리에 따라 설정 가능한 연결이 결정됨.
허용되지 않는 조합은 ``parse_entry``가 ``ValidationError``로 거부

사용법:
```python
entry = parse_entry(EntryKind.CREDIT, {
    "name": "Cash sale",
    "amount": "1000",
    "account": "acc-1",
})
entry.amount  # Decimal("1000.00")
```
"""

import base64
import binascii
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, ClassVar, Union

from core.constants import Limits
from core.ledger.errors import ValidationError
from core.types import (
    CREDIT_CATEGORIES_WITH_CUSTOMER,
    DEBIT_CATEGORIES_WITH_MAZDOOR,
    DEBIT_CATEGORIES_WITH_SUPPLIER,
    CreditCategory,
    DebitCategory,
    EntryKind,
    PaymentMethod,
)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def round_amount(value: Any) -> Decimal:
    """소수점 2자리 반올림(half-up) Decimal로 변환

    Args:
        value: 숫자, 숫자 문자열 또는 Decimal

    Returns:
        반올림된 Decimal

    Raises:
        ValidationError: 유한한 숫자가 아님
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError("Invalid amount", {"amount": "Valid amount is required"})
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(
            "Invalid amount", {"amount": "Valid amount is required"}
        ) from e
    if not amount.is_finite():
        raise ValidationError("Invalid amount", {"amount": "Valid amount is required"})
    return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def parse_timestamp(value: Any) -> datetime | None:
    """API의 ISO 시각 문자열 파싱 (naive면 UTC로 간주)"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(
                "Invalid timestamp", {"createdAt": f"Not an ISO timestamp: {value}"}
            ) from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(value: datetime | None) -> str | None:
    """datetime → ISO 문자열 (None은 그대로)"""
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class PartyRef:
    """연결된 계좌/고객/공급처/일꾼 참조

    Attributes:
        id: 연결 대상 ID
        name: populate된 경우 표시 이름
    """

    id: str
    name: str | None = None

    @property
    def label(self) -> str:
        """이름이 있으면 이름, 없으면 ID"""
        return self.name or self.id

    @classmethod
    def parse(cls, value: Any) -> "PartyRef | None":
        """ID 문자열 또는 populate된 ``{"_id", "name"}`` 객체 허용"""
        if value is None or value == "":
            return None
        if isinstance(value, PartyRef):
            return value
        if isinstance(value, dict):
            ref_id = value.get("_id") or value.get("id")
            if not ref_id:
                return None
            return cls(id=str(ref_id), name=value.get("name"))
        return cls(id=str(value))

    def to_api(self) -> str | dict[str, str]:
        """ID 문자열 (이름이 있으면 객체)"""
        if self.name is None:
            return self.id
        return {"_id": self.id, "name": self.name}


@dataclass(frozen=True)
class _EntryBase:
    """입금/출금 공통 필드"""

    name: str
    amount: Decimal
    description: str = ""
    payment_method: str = PaymentMethod.CASH.value
    image: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    kind: ClassVar[EntryKind]

    @property
    def is_persisted(self) -> bool:
        """저장소가 ID를 부여했는지 여부"""
        return self.id is not None

    def same_structure(self, other: "LedgerEntry") -> bool:
        """ID가 없는 항목의 구조 비교"""
        return (
            self.kind == other.kind
            and self.name == other.name
            and self.amount == other.amount
            and self.description == other.description
            and self.created_at == other.created_at
        )

    def _base_api(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "amount": float(self.amount),
            "paymentMethod": self.payment_method,
        }
        if self.id is not None:
            data["_id"] = self.id
        if self.image is not None:
            data["image"] = self.image
        if self.created_at is not None:
            data["createdAt"] = format_timestamp(self.created_at)
        return data


@dataclass(frozen=True)
class CreditEntry(_EntryBase):
    """입금 항목

    Attributes:
        account: 입금 계좌 (필수)
        category: 입금 카테고리 (기본 ``general``)
        customer: 결제 고객 (customer_payment / sale 전용)
    """

    account: PartyRef | None = None
    category: str = CreditCategory.GENERAL.value
    customer: PartyRef | None = None

    kind: ClassVar[EntryKind] = EntryKind.CREDIT

    @property
    def related_party(self) -> PartyRef | None:
        """리포트의 계좌/고객 열에 표시할 대상"""
        return self.account or self.customer

    def relation_ids(self) -> dict[str, str]:
        """설정된 연결의 이름 → ID"""
        ids = {}
        if self.account is not None:
            ids["account"] = self.account.id
        if self.customer is not None:
            ids["customer"] = self.customer.id
        return ids

    def to_api(self) -> dict[str, Any]:
        """API 표현 (camelCase)"""
        data = self._base_api()
        data["category"] = self.category
        if self.account is not None:
            data["account"] = self.account.to_api()
        if self.customer is not None:
            data["customer"] = self.customer.to_api()
        return data


@dataclass(frozen=True)
class DebitEntry(_EntryBase):
    """출금 항목

    Attributes:
        category: 출금 카테고리 (필수)
        mazdoor: 지급 받은 일꾼 (mazdoor 카테고리 전용)
        supplier: 지급 받은 공급처 (raw_material / supplier_payment 전용)
    """

    category: str = DebitCategory.OTHER.value
    mazdoor: PartyRef | None = None
    supplier: PartyRef | None = None

    kind: ClassVar[EntryKind] = EntryKind.DEBIT

    @property
    def related_party(self) -> PartyRef | None:
        """리포트의 일꾼/공급처 열에 표시할 대상"""
        return self.mazdoor or self.supplier

    def relation_ids(self) -> dict[str, str]:
        """설정된 연결의 이름 → ID"""
        ids = {}
        if self.mazdoor is not None:
            ids["mazdoor"] = self.mazdoor.id
        if self.supplier is not None:
            ids["supplier"] = self.supplier.id
        return ids

    def to_api(self) -> dict[str, Any]:
        """API 표현 (camelCase)"""
        data = self._base_api()
        data["category"] = self.category
        if self.mazdoor is not None:
            data["mazdoor"] = self.mazdoor.to_api()
        if self.supplier is not None:
            data["supplier"] = self.supplier.to_api()
        return data


LedgerEntry = Union[CreditEntry, DebitEntry]


# -------------------------------------------------------------------------
# 파싱 및 검증
# -------------------------------------------------------------------------

def _validate_image(image: Any, errors: dict[str, str]) -> str | None:
    if image is None or image == "":
        return None
    if not isinstance(image, str) or not image.startswith("data:image/"):
        errors["image"] = "Please select an image file"
        return None
    header, _, payload = image.partition(",")
    if ";base64" not in header or not payload:
        errors["image"] = "Image must be base64 encoded"
        return None
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        errors["image"] = "Image must be base64 encoded"
        return None
    if len(raw) > Limits.IMAGE_MAX_BYTES:
        errors["image"] = "Image size should be less than 5MB"
        return None
    return image


def _field(data: dict[str, Any], *names: str) -> Any:
    for name in names:
        if name in data:
            return data[name]
    return None


def parse_entry(kind: EntryKind | str, data: dict[str, Any]) -> LedgerEntry:
    """원시 항목 데이터 검증 후 타입 항목 생성

    금액은 검증 전에 소수점 2자리로 반올림.
    모든 필드 오류를 하나의 ``ValidationError``로 모음

    Args:
        kind: credit 또는 debit
        data: 원시 항목 (snake_case 또는 camelCase 키)

    Returns:
        CreditEntry 또는 DebitEntry

    Raises:
        ValidationError: 유효하지 않은 필드 존재
    """
    try:
        kind = EntryKind(kind)
    except ValueError as e:
        raise ValidationError(f"Unknown entry kind: {kind}", {"kind": "Invalid kind"}) from e

    errors: dict[str, str] = {}

    raw_name = data.get("name")
    name = raw_name.strip() if isinstance(raw_name, str) else ""
    if not name:
        errors["name"] = "Name is required"
    elif len(name) > Limits.NAME_MAX_LENGTH:
        errors["name"] = f"Name must be less than {Limits.NAME_MAX_LENGTH} characters"

    raw_description = data.get("description") or ""
    description = str(raw_description).strip()
    if len(description) > Limits.DESCRIPTION_MAX_LENGTH:
        errors["description"] = (
            f"Description must be less than {Limits.DESCRIPTION_MAX_LENGTH} characters"
        )

    amount = ZERO
    try:
        amount = round_amount(data.get("amount"))
    except ValidationError as e:
        errors.update(e.fields)
    else:
        if amount <= ZERO:
            errors["amount"] = "Please enter a valid amount greater than zero"
        elif amount > Limits.AMOUNT_MAX:
            errors["amount"] = f"Amount must not exceed {Limits.AMOUNT_MAX}"

    payment_method = _field(data, "payment_method", "paymentMethod") or PaymentMethod.CASH.value
    if payment_method not in {m.value for m in PaymentMethod}:
        errors["paymentMethod"] = f"Unknown payment method: {payment_method}"

    image = _validate_image(data.get("image"), errors)

    entry_id = _field(data, "id", "_id")
    created_at = None
    try:
        created_at = parse_timestamp(_field(data, "created_at", "createdAt"))
    except ValidationError as e:
        errors.update(e.fields)

    common: dict[str, Any] = {
        "name": name,
        "amount": amount,
        "description": description,
        "payment_method": payment_method,
        "image": image,
        "id": str(entry_id) if entry_id else None,
        "created_at": created_at,
    }

    if kind == EntryKind.CREDIT:
        entry: LedgerEntry | None = _parse_credit(data, common, errors)
    else:
        entry = _parse_debit(data, common, errors)

    if errors or entry is None:
        raise ValidationError("Invalid entry", errors)
    return entry


def _parse_credit(
    data: dict[str, Any],
    common: dict[str, Any],
    errors: dict[str, str],
) -> CreditEntry | None:
    category = data.get("category") or CreditCategory.GENERAL.value
    if category not in {c.value for c in CreditCategory}:
        errors["category"] = f"Unknown credit category: {category}"

    account = PartyRef.parse(data.get("account"))
    if account is None:
        errors["account"] = "Account is required"

    customer = PartyRef.parse(data.get("customer"))
    if customer is not None and category not in CREDIT_CATEGORIES_WITH_CUSTOMER:
        errors["customer"] = f"Customer is not allowed for category {category}"

    if errors:
        return None
    return CreditEntry(account=account, category=category, customer=customer, **common)


def _parse_debit(
    data: dict[str, Any],
    common: dict[str, Any],
    errors: dict[str, str],
) -> DebitEntry | None:
    category = data.get("category")
    if not category:
        errors["category"] = "Category is required"
    elif category not in {c.value for c in DebitCategory}:
        errors["category"] = f"Unknown debit category: {category}"

    mazdoor = PartyRef.parse(data.get("mazdoor"))
    if mazdoor is not None and category not in DEBIT_CATEGORIES_WITH_MAZDOOR:
        errors["mazdoor"] = f"Mazdoor is not allowed for category {category}"

    supplier = PartyRef.parse(data.get("supplier"))
    if supplier is not None and category not in DEBIT_CATEGORIES_WITH_SUPPLIER:
        errors["supplier"] = f"Supplier is not allowed for category {category}"

    if errors:
        return None
    return DebitEntry(category=category, mazdoor=mazdoor, supplier=supplier, **common)


def apply_patch(entry: LedgerEntry, patch: dict[str, Any]) -> LedgerEntry:
    """부분 수정을 항목에 병합 후 재검증

    ID, 종류, 생성 시각은 유지

    Raises:
        ValidationError: 병합 결과가 유효하지 않음
    """
    merged = entry.to_api()
    for key, value in patch.items():
        if key in ("id", "_id", "created_at", "createdAt", "kind", "type"):
            continue
        if key == "payment_method":
            key = "paymentMethod"
        merged[key] = value
    updated = parse_entry(entry.kind, merged)
    return replace(updated, id=entry.id, created_at=entry.created_at)


def stamp_new_entry(entry: LedgerEntry, entry_id: str, now: datetime) -> LedgerEntry:
    """ID/생성 시각이 없는 항목에 부여"""
    return replace(
        entry,
        id=entry.id or entry_id,
        created_at=entry.created_at or now,
    )
