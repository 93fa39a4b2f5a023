"""
고객 및 공급처 (캐시 디렉터리)
"""

from core.parties.directory import PartyDirectory, matches_search

__all__ = [
    "PartyDirectory",
    "matches_search",
]
