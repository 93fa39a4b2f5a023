"""
응답 스키마 (Pydantic)

모든 일일 현금 메모 응답 형식:
``{"success": bool, "data": ..., "message": ...}``.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="Service status")
    timestamp: datetime = Field(..., description="Response time (UTC)")


class ApiResponse(BaseModel):
    """원장 응답 공통 형식"""

    success: bool = Field(default=True, description="Whether the call succeeded")
    data: dict[str, Any] | None = Field(default=None, description="Payload")
    message: str | None = Field(default=None, description="Human readable message")


class ErrorResponse(BaseModel):
    """오류 본문"""

    success: bool = Field(default=False)
    code: str = Field(..., description="Stable error code")
    message: str = Field(..., description="Human readable message")
    errors: dict[str, str] | None = Field(default=None, description="Per-field messages")
