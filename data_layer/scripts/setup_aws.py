"""AWS altyapısını kurar ve varsayılan kategorileri yükler.

Kullanım:
    python -m data_layer.scripts.setup_aws              # Kur ve kategorileri yükle
    python -m data_layer.scripts.setup_aws --delete     # Tabloyu sil
    python -m data_layer.scripts.setup_aws --region eu-west-1  # Farklı region
"""
import sys

from data_layer.infrastructure.dynamodb_setup import create_tables, delete_tables
from pos_engine.config import BACKEND_DYNAMODB, create_store, load_config
from pos_engine.services import build_services


def main(argv=None):
    config = load_config()
    config.backend = BACKEND_DYNAMODB
    delete_mode = False

    # Argümanları parse et
    args = sys.argv[1:] if argv is None else argv
    for i, arg in enumerate(args):
        if arg == "--delete":
            delete_mode = True
        elif arg == "--region" and i + 1 < len(args):
            config.region_name = args[i + 1]

    if delete_mode:
        print("🗑️  AWS kaynakları siliniyor...\n")
        delete_tables(config.region_name, config.table_name)
        print("\n✅ Tablo silindi!")
        return

    print("=" * 60)
    print("🚀 AWS Altyapı Kurulumu - Satış Noktası")
    print(f"   Region: {config.region_name}")
    print("=" * 60)

    print("\n📊 ADIM 1: DynamoDB Tablosu")
    print("-" * 40)
    create_tables(config.region_name, config.table_name)

    print("\n📤 ADIM 2: Varsayılan Kategoriler")
    print("-" * 40)
    store = create_store(config)
    try:
        services = build_services(store=store)
        services.catalog.initialize_default_categories()
        categories = services.catalog.get_all_categories()
    finally:
        store.close()
    print(f"  ✓  {len(categories)} kategori hazır")

    print("\n" + "=" * 60)
    print("✅ AWS altyapısı hazır!")
    print(f"   DynamoDB: {config.table_name} (önek: {config.key_prefix})")
    print("=" * 60)


if __name__ == "__main__":
    main()
