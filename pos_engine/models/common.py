"""Modeller arasında paylaşılan zaman ve kimlik yardımcıları."""

from __future__ import annotations

import string
import time
import uuid
from typing import Optional

_BASE36 = string.digits + string.ascii_lowercase


def now_millis() -> int:
    """Epoch milisaniye cinsinden şu anki zamanı döndürür."""
    return int(time.time() * 1000)


def _random_base36(length: int = 9) -> str:
    value = uuid.uuid4().int
    chars = []
    while len(chars) < length:
        value, rem = divmod(value, 36)
        chars.append(_BASE36[rem])
    return "".join(chars)


def generate_id(prefix: str, timestamp: Optional[int] = None) -> str:
    """`<prefix>_<millis>_<base36>` biçiminde kimlik üretir (ör. order_1718000000000_k3j9x0a1b)."""
    if timestamp is None:
        timestamp = now_millis()
    return f"{prefix}_{timestamp}_{_random_base36()}"
