"""
Persisted method cache.

Stores exported method records as JSON Lines so an incremental build can
reload them without re-extracting source.
"""

from cache.method_cache import (
    CacheStats,
    decode_record,
    encode_record,
    iter_load_method_cache,
    load_method_cache,
    write_method_cache,
)

__all__ = [
    "CacheStats",
    "decode_record",
    "encode_record",
    "iter_load_method_cache",
    "load_method_cache",
    "write_method_cache",
]
