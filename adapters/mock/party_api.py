"""
Mock party API

인메모리 고객/공급처 및 거래처별 거래 목록
"""

import uuid
from typing import Any

from core.ledger.errors import NotFoundError
from core.types import PartyKind


class MockPartyApi:
    """인메모리 ``IPartyApi``

    사용법:
    ```python
    api = MockPartyApi()
    customer = await api.create_party(PartyKind.CUSTOMER, {"name": "Ali Traders"})
    api.add_transaction(PartyKind.CUSTOMER, customer["_id"], {
        "type": "credit", "amount": 500, "date": "2025-01-02",
    })
    ```
    """

    def __init__(self):
        self.parties: dict[PartyKind, dict[str, dict[str, Any]]] = {
            PartyKind.CUSTOMER: {},
            PartyKind.SUPPLIER: {},
        }
        self.transactions: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[str] = []

    def _require(self, kind: PartyKind, party_id: str) -> dict[str, Any]:
        party = self.parties[PartyKind(kind)].get(party_id)
        if party is None:
            raise NotFoundError(f"{PartyKind(kind).value} {party_id} not found")
        return party

    def add_transaction(
        self,
        kind: PartyKind,
        party_id: str,
        transaction: dict[str, Any],
    ) -> None:
        """이력 행 추가 (테스트 준비용)"""
        self._require(kind, party_id)
        self.transactions.setdefault(party_id, []).append(dict(transaction))

    async def list_parties(self, kind: PartyKind, limit: int = 1000) -> list[dict[str, Any]]:
        self.calls.append("list_parties")
        return [dict(p) for p in self.parties[PartyKind(kind)].values()][:limit]

    async def get_party(self, kind: PartyKind, party_id: str) -> dict[str, Any]:
        self.calls.append("get_party")
        return dict(self._require(kind, party_id))

    async def get_party_transactions(
        self,
        kind: PartyKind,
        party_id: str,
        params: dict[str, Any],
    ) -> dict[str, Any]:
        self.calls.append("get_party_transactions")
        self._require(kind, party_id)
        rows = self.transactions.get(party_id, [])

        start = params.get("startDate")
        end = params.get("endDate")
        if start:
            rows = [r for r in rows if str(r.get("date", ""))[:10] >= start]
        if end:
            rows = [r for r in rows if str(r.get("date", ""))[:10] <= end]

        page = int(params.get("page") or 1)
        limit = int(params.get("limit") or 20)
        total = len(rows)
        offset = (page - 1) * limit
        return {
            "transactions": [dict(r) for r in rows[offset:offset + limit]],
            "pagination": {
                "page": page,
                "total": total,
                "totalPages": (total + limit - 1) // limit,
            },
        }

    async def create_party(self, kind: PartyKind, data: dict[str, Any]) -> dict[str, Any]:
        self.calls.append("create_party")
        party_id = data.get("_id") or uuid.uuid4().hex
        party = {**data, "_id": party_id}
        self.parties[PartyKind(kind)][party_id] = party
        return dict(party)

    async def update_party(
        self,
        kind: PartyKind,
        party_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        self.calls.append("update_party")
        party = self._require(kind, party_id)
        party.update({k: v for k, v in data.items() if k != "_id"})
        return dict(party)

    async def delete_party(self, kind: PartyKind, party_id: str) -> None:
        self.calls.append("delete_party")
        self._require(kind, party_id)
        del self.parties[PartyKind(kind)][party_id]
        self.transactions.pop(party_id, None)
