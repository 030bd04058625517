# check_db_connection.py

import sys
from pymongo import MongoClient
from agrimarket.config import settings
from agrimarket.storage import EntityStore, MongoKeyValueStore

def masked_uri() -> str:
    uri = settings.final_mongo_uri
    return uri.split('@')[-1] if '@' in uri else '...local...'

def report_store(client: MongoClient):
    """Prints how many records each marketplace collection holds."""
    store = EntityStore(MongoKeyValueStore(client[settings.db_name][settings.kv_collection]))
    print(f"--- Store '{settings.db_name}.{settings.kv_collection}' ---")
    for name, count in store.counts().items():
        print(f"{name}: {count} records")

def main() -> int:
    print(f"--- Checking MongoDB at {masked_uri()} ---")
    client = MongoClient(settings.final_mongo_uri)
    try:
        client.admin.command('ping')
    except Exception as e:
        print(f"❌ Connection failed: {e}")
        return 1

    print("✅ Connection successful!")
    report_store(client)
    return 0

if __name__ == "__main__":
    sys.exit(main())
