"""Anahtar-değer deposu - bellek içi ayna ve tipli okuma/yazma yardımcıları.

Tüm okumalar bellek içi aynadan senkron yapılır. Yazmalar önce aynayı
günceller, ardından kalıcı arka uca beklemeden iletilir.
"""

from __future__ import annotations

import json
import logging
import math
import threading
import weakref
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Kalıcı anahtar-değer deposu temel sınıfı."""

    def __init__(self) -> None:
        self._cache: dict[str, str] = {}
        self._initialized = False
        # Anahtar bazında kilitler: {key: RLock}; kullanılmayan kilit kendiliğinden düşer
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._master_lock = threading.Lock()

    # --- Arka uç ---

    @abstractmethod
    def _load_all(self) -> dict[str, str]:
        """Kalıcı arka uçtaki tüm (kapsamlı) anahtarları ham değerleriyle döndürür."""
        ...

    @abstractmethod
    def _write(self, key: str, raw: str) -> None:
        ...

    @abstractmethod
    def _remove(self, keys: list[str]) -> None:
        ...

    def initialize(self) -> None:
        """Kalıcı arka uçtaki değerleri aynaya bir kez yükler."""
        if self._initialized:
            return
        loaded = self._load_all()
        self._cache.update(loaded)
        self._initialized = True
        logger.info("Depo başlatıldı: %d anahtar yüklendi", len(loaded))

    def flush(self, timeout: Optional[float] = None) -> None:
        """Bekleyen kalıcı yazmaların bitmesini bekler."""

    def close(self) -> None:
        self.flush()

    # --- Eşzamanlı erişim kontrolü ---

    @contextmanager
    def lock(self, key: str) -> Iterator[None]:
        """Bir anahtar üzerindeki oku-değiştir-yaz işlemini serileştirir."""
        with self._master_lock:
            key_lock = self._locks.get(key)
            if key_lock is None:
                key_lock = threading.RLock()
                self._locks[key] = key_lock
        with key_lock:
            logger.debug("Kilit alındı: %s", key)
            yield

    # --- Ham string ---

    def get_string(self, key: str) -> Optional[str]:
        return self._cache.get(key)

    def set_string(self, key: str, value: str) -> None:
        self._cache[key] = value
        self._write(key, value)

    # --- Sayı ---

    def get_number(self, key: str) -> Optional[float]:
        raw = self._cache.get(key)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            pass
        try:
            parsed = float(raw)
        except ValueError:
            return None
        return None if math.isnan(parsed) else parsed

    def set_number(self, key: str, value: float) -> None:
        self.set_string(key, str(value))

    # --- Boolean ---

    def get_boolean(self, key: str) -> Optional[bool]:
        raw = self._cache.get(key)
        if raw == "true":
            return True
        if raw == "false":
            return False
        return None

    def set_boolean(self, key: str, value: bool) -> None:
        self.set_string(key, "true" if value else "false")

    # --- JSON ---

    def _deserialize(self, key: str, raw: Optional[str]) -> Any:
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Bozuk JSON verisi yok sayıldı: %s", key)
            return None

    def get_object(self, key: str) -> Optional[dict]:
        value = self._deserialize(key, self._cache.get(key))
        return value if isinstance(value, dict) else None

    def set_object(self, key: str, value: dict) -> None:
        self.set_string(key, json.dumps(value))

    def get_array(self, key: str) -> list:
        value = self._deserialize(key, self._cache.get(key))
        return value if isinstance(value, list) else []

    def set_array(self, key: str, value: list) -> None:
        self.set_string(key, json.dumps(value))

    # --- Silme ---

    def delete(self, key: str) -> None:
        self._cache.pop(key, None)
        self._remove([key])

    def clear_all(self) -> None:
        keys = list(self._cache.keys())
        self._cache.clear()
        if keys:
            self._remove(keys)

    def contains(self, key: str) -> bool:
        return key in self._cache


class InMemoryStore(KeyValueStore):
    """Kalıcı arka ucu olmayan depo (testler ve geçici oturumlar)."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        super().__init__()
        self._initial = dict(initial or {})
        self.initialize()

    def _load_all(self) -> dict[str, str]:
        return dict(self._initial)

    def _write(self, key: str, raw: str) -> None:
        pass

    def _remove(self, keys: list[str]) -> None:
        pass
