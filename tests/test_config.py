"""Yapılandırma unit testleri."""

from unittest.mock import MagicMock

import pytest

from pos_engine.config import StoreConfig, create_store, load_config
from pos_engine.storage import DynamoDBStore, InMemoryStore

_ENV_NAMES = ("POS_STORAGE_BACKEND", "POS_STORAGE_TABLE", "POS_STORAGE_PREFIX", "AWS_DEFAULT_REGION")


@pytest.fixture
def clean_env(monkeypatch):
    # setenv + delenv: load_dotenv'in yazdığı değerler test sonunda da silinir
    for name in _ENV_NAMES:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestLoadConfig:

    def test_defaults(self, tmp_path, clean_env):
        config = load_config(tmp_path / "yok.env")
        assert config.backend == "memory"
        assert config.table_name == "PosStorage"
        assert config.key_prefix == "tea-shop-storage:"
        assert config.region_name == "us-east-1"

    def test_reads_env_file(self, tmp_path, clean_env):
        env_file = tmp_path / ".env"
        env_file.write_text("POS_STORAGE_BACKEND=DynamoDB\nPOS_STORAGE_TABLE=ShopTable\n")
        config = load_config(env_file)
        assert config.backend == "dynamodb"
        assert config.table_name == "ShopTable"

    def test_environment_wins_over_file(self, tmp_path, clean_env):
        clean_env.setenv("POS_STORAGE_TABLE", "FromEnv")
        env_file = tmp_path / ".env"
        env_file.write_text("POS_STORAGE_TABLE=FromFile\n")
        assert load_config(env_file).table_name == "FromEnv"


class TestCreateStore:

    def test_memory_backend(self):
        assert isinstance(create_store(StoreConfig()), InMemoryStore)

    def test_dynamodb_backend_initializes(self):
        resource = MagicMock()
        resource.Table.return_value.scan.return_value = {"Items": []}
        store = create_store(StoreConfig(backend="dynamodb"), dynamodb_resource=resource)
        assert isinstance(store, DynamoDBStore)
        resource.Table.assert_called_once_with("PosStorage")
        resource.Table.return_value.scan.assert_called_once()
        store.close()

    def test_unknown_backend_raises(self):
        with pytest.raises(ValueError):
            create_store(StoreConfig(backend="sqlite"))
