"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import CreateMemoRequest, UpdateMemoRequest
from web.models.responses import ApiResponse, ErrorResponse, HealthResponse

__all__ = [
    # 요청
    "CreateMemoRequest",
    "UpdateMemoRequest",
    # 응답
    "ApiResponse",
    "ErrorResponse",
    "HealthResponse",
]
