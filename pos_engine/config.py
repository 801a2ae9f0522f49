"""Merkezi yapılandırma - .env dosyası ve ortam değişkenlerinden okunur.

Desteklenen değişkenler:
    POS_STORAGE_BACKEND   memory | dynamodb (varsayılan: memory)
    POS_STORAGE_TABLE     DynamoDB tablo adı (varsayılan: PosStorage)
    POS_STORAGE_PREFIX    Anahtar öneki (varsayılan: tea-shop-storage:)
    AWS_DEFAULT_REGION    AWS region (varsayılan: us-east-1)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from pos_engine.storage import (
    DEFAULT_TABLE_NAME,
    STORAGE_PREFIX,
    DynamoDBStore,
    InMemoryStore,
    KeyValueStore,
)

logger = logging.getLogger(__name__)

# Proje kökündeki .env
_DEFAULT_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

BACKEND_MEMORY = "memory"
BACKEND_DYNAMODB = "dynamodb"


@dataclass
class StoreConfig:
    backend: str = BACKEND_MEMORY
    table_name: str = DEFAULT_TABLE_NAME
    key_prefix: str = STORAGE_PREFIX
    region_name: str = "us-east-1"


def load_config(env_path: Optional[Path] = None) -> StoreConfig:
    """`.env` dosyasını yükler (mevcut değişkenleri ezmeden) ve yapılandırmayı döndürür."""
    load_dotenv(env_path or _DEFAULT_ENV_PATH, override=False)
    return StoreConfig(
        backend=os.environ.get("POS_STORAGE_BACKEND", BACKEND_MEMORY).strip().lower(),
        table_name=os.environ.get("POS_STORAGE_TABLE", DEFAULT_TABLE_NAME),
        key_prefix=os.environ.get("POS_STORAGE_PREFIX", STORAGE_PREFIX),
        region_name=os.environ.get("AWS_DEFAULT_REGION", "us-east-1"),
    )


def create_store(config: StoreConfig, dynamodb_resource: Optional[Any] = None) -> KeyValueStore:
    """Yapılandırmaya uygun depoyu oluşturur ve başlatır."""
    if config.backend == BACKEND_MEMORY:
        return InMemoryStore()
    if config.backend == BACKEND_DYNAMODB:
        store = DynamoDBStore(
            table_name=config.table_name,
            key_prefix=config.key_prefix,
            region_name=config.region_name,
            dynamodb_resource=dynamodb_resource,
        )
        store.initialize()
        return store
    raise ValueError(f"Bilinmeyen depo arka ucu: {config.backend}")
