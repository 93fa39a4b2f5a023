"""
클라이언트 측 TTL 캐시

사용법:
```python
from core.cache import CacheHelpers, TTLCache

cache = TTLCache()
helpers = CacheHelpers(cache)
helpers.invalidate_memo(date(2025, 1, 1))
```
"""

from core.cache.keys import CacheHelpers, CacheKeys
from core.cache.ttl_cache import CacheEntry, TTLCache
from core.constants import CacheTTL

__all__ = [
    "TTLCache",
    "CacheEntry",
    "CacheKeys",
    "CacheHelpers",
    "CacheTTL",
]
