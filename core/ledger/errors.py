"""
원장 오류

원장 엔진의 모든 오류는 고정된 ``code``를 가지며
웹 API와 REST 클라이언트가 이를 HTTP 응답과 상호 변환함
"""

from typing import Any

from core.domain.state_machines import StateMachineError


class LedgerError(Exception):
    """일일 원장 엔진 기본 오류"""

    code: str = "LEDGER_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict[str, Any]:
        """웹 API 오류 본문"""
        return {"success": False, "code": self.code, "message": self.message}


class ValidationError(LedgerError):
    """필드 누락 또는 유효하지 않음 (변경 없음)

    Args:
        message: 오류 요약
        fields: 필드별 메시지 (필드명 -> 메시지)
    """

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, fields: dict[str, str] | None = None):
        super().__init__(message)
        self.fields = dict(fields or {})

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.fields:
            body["errors"] = self.fields
        return body


class ImmutableMemoError(LedgerError):
    """마감된 날짜에 대한 변경 시도"""

    code = "IMMUTABLE"


class NotFoundError(LedgerError):
    """날짜 또는 항목 없음"""

    code = "NOT_FOUND"


class InvalidStateTransition(LedgerError, StateMachineError):
    """존재하지 않거나 이미 마감된 날짜의 마감 시도"""

    code = "INVALID_STATE_TRANSITION"


class ConflictError(LedgerError):
    """저장된 버전 불일치 또는 이미 존재하는 날짜"""

    code = "CONFLICT"


class UpstreamFailure(LedgerError):
    """원격 API 연결 실패 또는 서버 오류

    Args:
        message: 오류 요약
        status_code: 응답을 받은 경우 HTTP 상태 코드
    """

    code = "UPSTREAM_FAILURE"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


ERRORS_BY_CODE: dict[str, type[LedgerError]] = {
    cls.code: cls
    for cls in (
        ValidationError,
        ImmutableMemoError,
        NotFoundError,
        InvalidStateTransition,
        ConflictError,
        UpstreamFailure,
    )
}
