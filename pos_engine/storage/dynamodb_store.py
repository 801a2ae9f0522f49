"""DynamoDB destekli kalıcı anahtar-değer deposu.

Tablo şeması: `storage_key` (HASH, S) + `value` (S). Anahtarlar bir önek ile
kapsamlanır, böylece aynı tablo birden fazla kurulum tarafından paylaşılabilir.
Yazmalar tek işçili bir thread havuzunda gönderim sırasıyla yapılır; çağıran
taraf beklemez.

DynamoDB bir öğeyi 400 KB ile sınırlar. Bu sınıra yaklaşan değerler (ör. büyüyen
sipariş günlüğü) parçalara bölünür:
- her parça `<anahtar>#chunk:<nesil>:<sıra>` satırına yazılır
- ardından anahtarın kendi satırı `chunks` / `generation` alanlarıyla manifest
  olarak yazılır
- en son önceki neslin parçaları silinir
Manifest yazılmadan kesilen bir yazma, önceki nesli okunur bırakır.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Callable, Optional

import boto3
from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from pos_engine.storage.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "tea-shop-storage:"
DEFAULT_TABLE_NAME = "PosStorage"

# UTF-8 bayt cinsinden; 400 KB öğe sınırının altında anahtar ve öznitelikler için pay bırakır
MAX_VALUE_BYTES = 350_000
# Karakter başına en fazla 4 bayt: 80_000 karakter <= 320 KB
CHUNK_CHARS = 80_000
CHUNK_MARKER = "#chunk:"


def split_chunks(raw: str) -> list[str]:
    return [raw[i:i + CHUNK_CHARS] for i in range(0, len(raw), CHUNK_CHARS)]


class DynamoDBStore(KeyValueStore):
    """Bellek içi aynayı DynamoDB tablosuna asenkron yansıtan depo."""

    def __init__(
        self,
        table_name: str = DEFAULT_TABLE_NAME,
        key_prefix: str = STORAGE_PREFIX,
        region_name: str = "us-east-1",
        dynamodb_resource: Optional[Any] = None,
    ):
        super().__init__()
        self.table_name = table_name
        self.key_prefix = key_prefix
        self.region_name = region_name

        # AWS istemcisi - dependency injection destekli
        self.dynamodb = dynamodb_resource or boto3.resource(
            "dynamodb", region_name=region_name
        )
        self.table = self.dynamodb.Table(table_name)

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pos-store")
        self._pending: list[Future] = []
        self._pending_lock = threading.Lock()
        # Parçalı anahtarlar: {key: (nesil, parça sayısı)}; yalnızca yükleme ve işçi thread'i değiştirir
        self._chunked: dict[str, tuple[int, int]] = {}

        logger.info("DynamoDB deposu hazır: %s (önek: %s)", table_name, key_prefix)

    def _scoped_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _chunk_key(self, key: str, generation: int, index: int) -> str:
        return f"{self._scoped_key(key)}{CHUNK_MARKER}{generation}:{index}"

    # --- Yükleme ---

    def _scan_items(self) -> list[dict]:
        items: list[dict] = []
        scan_kwargs: dict[str, Any] = {
            "FilterExpression": Attr("storage_key").begins_with(self.key_prefix),
        }
        while True:
            response = self.table.scan(**scan_kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            scan_kwargs["ExclusiveStartKey"] = last_key

    def _load_all(self) -> dict[str, str]:
        """Önekle başlayan tüm kayıtları sayfalı scan ile okur; parçalı değerleri birleştirir."""
        try:
            items = self._scan_items()
        except (ClientError, BotoCoreError) as e:
            logger.error("Depo yükleme hatası [%s]: %s", self.table_name, e)
            raise

        loaded: dict[str, str] = {}
        manifests: dict[str, tuple[int, int]] = {}
        # {(key, nesil): {sıra: değer}}
        parts: dict[tuple[str, int], dict[int, str]] = {}

        for item in items:
            full_key = str(item.get("storage_key", ""))
            if not full_key.startswith(self.key_prefix):
                continue
            key = full_key[len(self.key_prefix):]
            if CHUNK_MARKER in key:
                base, _, suffix = key.rpartition(CHUNK_MARKER)
                generation, _, index = suffix.partition(":")
                try:
                    parts.setdefault((base, int(generation)), {})[int(index)] = str(item.get("value", ""))
                except ValueError:
                    logger.warning("Tanınmayan parça satırı yok sayıldı: %s", full_key)
                continue
            if "chunks" in item:
                manifests[key] = (int(item.get("generation", 0)), int(item["chunks"]))
                continue
            if item.get("value") is not None:
                loaded[key] = str(item["value"])

        for key, (generation, count) in manifests.items():
            chunk_map = parts.get((key, generation), {})
            if any(i not in chunk_map for i in range(count)):
                logger.warning(
                    "Parçalı değer eksik, anahtar yok sayıldı: %s (%d/%d parça)",
                    key, len(chunk_map), count,
                )
                continue
            loaded[key] = "".join(chunk_map[i] for i in range(count))
            self._chunked[key] = (generation, count)

        # Geçerli manifeste ait olmayan parçalar yarım kalmış yazmalardan kalır
        stale = [
            self._chunk_key(key, generation, index)
            for (key, generation), chunk_map in parts.items()
            if self._chunked.get(key, (None, 0))[0] != generation
            for index in chunk_map
        ]
        for scoped in stale:
            self._submit(self._delete_scoped, scoped)
        if stale:
            logger.info("%d artık parça satırı silinecek", len(stale))

        return loaded

    # --- Yazma ---

    def _submit(self, fn: Callable[..., None], *args: Any) -> None:
        with self._pending_lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(self._executor.submit(fn, *args))

    def _write(self, key: str, raw: str) -> None:
        self._submit(self._put_item, key, raw)

    def _remove(self, keys: list[str]) -> None:
        for key in keys:
            self._submit(self._delete_item, key)

    def _put_item(self, key: str, raw: str) -> None:
        try:
            if len(raw.encode("utf-8")) > MAX_VALUE_BYTES:
                self._put_chunked(key, raw)
                return
            self.table.put_item(Item={"storage_key": self._scoped_key(key), "value": raw})
            self._drop_chunks(key)
        except (ClientError, BotoCoreError) as e:
            logger.warning("Kalıcı yazma hatası (%s): %s", key, e)

    def _put_chunked(self, key: str, raw: str) -> None:
        previous = self._chunked.get(key)
        generation = previous[0] + 1 if previous else 1
        chunks = split_chunks(raw)
        for index, chunk in enumerate(chunks):
            self.table.put_item(
                Item={"storage_key": self._chunk_key(key, generation, index), "value": chunk}
            )
        self.table.put_item(
            Item={"storage_key": self._scoped_key(key), "chunks": len(chunks), "generation": generation}
        )
        self._drop_chunks(key)
        self._chunked[key] = (generation, len(chunks))
        logger.debug("Parçalı yazma: %s (%d parça, nesil %d)", key, len(chunks), generation)

    def _drop_chunks(self, key: str) -> None:
        previous = self._chunked.pop(key, None)
        if previous is None:
            return
        generation, count = previous
        for index in range(count):
            self._delete_scoped(self._chunk_key(key, generation, index))

    def _delete_scoped(self, scoped_key: str) -> None:
        try:
            self.table.delete_item(Key={"storage_key": scoped_key})
        except (ClientError, BotoCoreError) as e:
            logger.warning("Kalıcı silme hatası (%s): %s", scoped_key, e)

    def _delete_item(self, key: str) -> None:
        try:
            self.table.delete_item(Key={"storage_key": self._scoped_key(key)})
            self._drop_chunks(key)
        except (ClientError, BotoCoreError) as e:
            logger.warning("Kalıcı silme hatası (%s): %s", key, e)

    def flush(self, timeout: Optional[float] = None) -> None:
        with self._pending_lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)
            logger.debug("%d bekleyen yazma tamamlandı", len(pending))

    def close(self) -> None:
        self.flush()
        self._executor.shutdown(wait=True)
