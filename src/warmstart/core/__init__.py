# SPDX-License-Identifier: MIT
"""Core cache-backed loader components.

Exports:
    token: Staleness token for a source path.
    PathCodec: Portable encoding of installation-root paths.
    CacheTable: In-memory module table with a dirty flag.
    CacheStore: Persistent store with load, flush and clear.
    CacheResolver: Serve modules from the table.
    FallbackCompiler: Resolve, compile and cache on a miss.
    LoaderChain: Ordered resolver stages.
    CacheFinder: ``sys.meta_path`` adapter for a chain.
"""

from .chain import CACHE_POSITION, FALLBACK_POSITION, CacheFinder, LoaderChain
from .codec import dump_code, load_code
from .fallback import FallbackCompiler, compile_source
from .portability import PathCodec
from .resolver import CacheResolver
from .staleness import token
from .store import CacheStore, decode_table, encode_table
from .table import CacheTable

__all__ = [
    "CACHE_POSITION",
    "FALLBACK_POSITION",
    "CacheFinder",
    "CacheResolver",
    "CacheStore",
    "CacheTable",
    "FallbackCompiler",
    "LoaderChain",
    "PathCodec",
    "compile_source",
    "decode_table",
    "dump_code",
    "encode_table",
    "load_code",
    "token",
]
