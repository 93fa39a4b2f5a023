"""
원격 원장 API 어댑터 (httpx)
"""

from adapters.api.rest_client import CashMemoRestClient, error_from_response

__all__ = [
    "CashMemoRestClient",
    "error_from_response",
]
