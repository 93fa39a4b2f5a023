"""
요청 스키마 (Pydantic)

일일 현금 메모 API의 형태 검사.
항목 내용은 원장 엔진이 직접 검증
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class CreateMemoRequest(BaseModel):
    """원장 하루치 생성

    ``openingBalance`` (또는 이전 키 ``previousBalance``)를 받지만
    이월 잔액은 항상 서버가 결정
    """

    date: str = Field(..., description="Calendar date (YYYY-MM-DD)")
    opening_balance: Decimal | None = Field(
        default=None, alias="openingBalance", description="Client-side opening balance"
    )
    previous_balance: Decimal | None = Field(
        default=None, alias="previousBalance", description="Older name of openingBalance"
    )
    credit_entries: list[dict[str, Any]] = Field(
        default_factory=list, alias="creditEntries", description="Credit entries"
    )
    debit_entries: list[dict[str, Any]] = Field(
        default_factory=list, alias="debitEntries", description="Debit entries"
    )
    notes: str = Field(default="", description="Notes")

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "date": "2025-01-01",
                    "openingBalance": 0,
                    "creditEntries": [
                        {"name": "Cash sale", "amount": 1000, "account": "acc-1"},
                    ],
                    "debitEntries": [],
                    "notes": "",
                },
            ]
        },
    }

    @property
    def client_opening_balance(self) -> Decimal | None:
        if self.opening_balance is not None:
            return self.opening_balance
        return self.previous_balance


class UpdateMemoRequest(BaseModel):
    """항목 및/또는 notes 일괄 교체 (일부만 가능)"""

    credit_entries: list[dict[str, Any]] | None = Field(
        default=None, alias="creditEntries", description="Replacement credit column"
    )
    debit_entries: list[dict[str, Any]] | None = Field(
        default=None, alias="debitEntries", description="Replacement debit column"
    )
    notes: str | None = Field(default=None, description="Notes")
    expected_version: int | None = Field(
        default=None, alias="expectedVersion", ge=1, description="Optimistic version check"
    )

    model_config = {"populate_by_name": True}
