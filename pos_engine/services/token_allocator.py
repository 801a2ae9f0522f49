"""Token Allocator - kategori ve gün bazında artan kuyruk numaraları.

- Her (kategori, takvim günü) çifti için ayrı sayaç tutar
- Anahtar tarihi içerdiği için sayaç her yeni gün 1'den başlar
- Basit ödeme akışı için tarih kapsamı olmayan tek bir global sayaç da vardır;
  bu sayaç hiçbir zaman sıfırlanmaz
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional

from pos_engine.storage import KeyValueStore

logger = logging.getLogger(__name__)

GLOBAL_COUNTER_KEY = "tokenCounter"
CATEGORY_COUNTER_PREFIX = "tokenCounter_"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")


def sanitize_category(category: str) -> str:
    """[A-Za-z0-9] dışındaki her karakteri `_` ile değiştirir."""
    return _UNSAFE_CHARS.sub("_", category)


def category_counter_key(category: str, day: date) -> str:
    return f"{CATEGORY_COUNTER_PREFIX}{sanitize_category(category)}_{day.isoformat()}"


class TokenAllocator:
    """Token sayaçlarını kalıcı depo üzerinde yöneten servis."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _current(self, key: str) -> int:
        # Sayaç yoksa 0 kabul edilir
        return int(self.store.get_number(key) or 0)

    def _next(self, key: str) -> int:
        with self.store.lock(key):
            token = self._current(key) + 1
            self.store.set_number(key, token)
        return token

    # --- Kategori-gün sayacı ---

    def next_token_for_category(self, category: str, day: Optional[date] = None) -> int:
        """Kategori-gün sayacını bir artırır, kalıcı yazar ve yeni değeri döndürür."""
        key = category_counter_key(category, day or date.today())
        token = self._next(key)
        logger.debug("Token tahsis edildi: %s -> %d", key, token)
        return token

    def peek_next_token_for_category(self, category: str, day: Optional[date] = None) -> int:
        """Sayacı tüketmeden bir sonraki token numarasını döndürür."""
        return self._current(category_counter_key(category, day or date.today())) + 1

    # --- Global sayaç ---

    def next_global_token(self) -> int:
        token = self._next(GLOBAL_COUNTER_KEY)
        logger.debug("Global token tahsis edildi: %d", token)
        return token

    def peek_global_token(self) -> int:
        return self._current(GLOBAL_COUNTER_KEY) + 1
