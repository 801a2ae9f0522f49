"""DynamoDB tablo oluşturma ve silme.

Tek tablo: PosStorage (storage_key HASH). Tüm uygulama anahtarları
(`orders`, `products`, `categories`, `settings`, token sayaçları) bu tabloda
önekli satırlar olarak tutulur.
"""
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from pos_engine.storage import DEFAULT_TABLE_NAME

REGION = "us-east-1"
BOTO_CONFIG = Config(retries={"max_attempts": 3})


def table_definition(table_name: str = DEFAULT_TABLE_NAME) -> dict:
    return {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": "storage_key", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "storage_key", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


def _client(region: str, client: Optional[Any]) -> Any:
    return client or boto3.client("dynamodb", region_name=region, config=BOTO_CONFIG)


def create_tables(region: str = REGION, table_name: str = DEFAULT_TABLE_NAME,
                  client: Optional[Any] = None) -> bool:
    """Depo tablosunu oluşturur. Tablo yeni oluşturulduysa True döner."""
    dynamodb = _client(region, client)
    try:
        dynamodb.describe_table(TableName=table_name)
        print(f"  ⏭️  {table_name} zaten mevcut, atlanıyor")
        return False
    except ClientError as e:
        if e.response["Error"]["Code"] != "ResourceNotFoundException":
            raise

    print(f"  🔨 {table_name} oluşturuluyor...")
    dynamodb.create_table(**table_definition(table_name))
    # Tablonun aktif olmasını bekle
    waiter = dynamodb.get_waiter("table_exists")
    waiter.wait(TableName=table_name)
    print(f"  ✓  {table_name} oluşturuldu")
    return True


def delete_tables(region: str = REGION, table_name: str = DEFAULT_TABLE_NAME,
                  client: Optional[Any] = None) -> bool:
    """Depo tablosunu siler (dikkatli kullan)."""
    dynamodb = _client(region, client)
    try:
        dynamodb.delete_table(TableName=table_name)
        print(f"  🗑️  {table_name} silindi")
        return True
    except ClientError:
        print(f"  ⏭️  {table_name} bulunamadı, atlanıyor")
        return False


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "--delete":
        print("🗑️  Tablo siliniyor...")
        delete_tables()
    else:
        print("🏗️  DynamoDB tablosu oluşturuluyor...\n")
        create_tables()
