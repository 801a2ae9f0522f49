"""DynamoDB tablo kurulumu unit testleri."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from data_layer.infrastructure.dynamodb_setup import create_tables, delete_tables, table_definition


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "hata"}}, "DescribeTable")


class TestCreateTables:

    def test_definition_uses_storage_key(self):
        definition = table_definition("ShopTable")
        assert definition["TableName"] == "ShopTable"
        assert definition["KeySchema"] == [{"AttributeName": "storage_key", "KeyType": "HASH"}]

    def test_existing_table_skipped(self):
        client = MagicMock()
        assert create_tables(client=client) is False
        client.create_table.assert_not_called()

    def test_missing_table_created(self):
        client = MagicMock()
        client.describe_table.side_effect = _client_error("ResourceNotFoundException")
        assert create_tables(client=client) is True
        client.create_table.assert_called_once_with(**table_definition())
        client.get_waiter.return_value.wait.assert_called_once_with(TableName="PosStorage")

    def test_other_errors_propagate(self):
        client = MagicMock()
        client.describe_table.side_effect = _client_error("AccessDeniedException")
        with pytest.raises(ClientError):
            create_tables(client=client)


class TestDeleteTables:

    def test_delete(self):
        client = MagicMock()
        assert delete_tables(client=client) is True
        client.delete_table.assert_called_once_with(TableName="PosStorage")

    def test_missing_table(self):
        client = MagicMock()
        client.delete_table.side_effect = _client_error("ResourceNotFoundException")
        assert delete_tables(client=client) is False
