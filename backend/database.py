from pymongo import MongoClient, ASCENDING
from config import MONGODB_URL, DATABASE_NAME

client = MongoClient(MONGODB_URL)
db = client[DATABASE_NAME]

# 集合
profiles_collection = db["profiles"]
weight_history_collection = db["weight_history"]
protocol_checks_collection = db["protocol_checks"]


def ensure_indexes():
    """创建索引 (应用启动时调用)"""
    profiles_collection.create_index("user_id", unique=True)
    weight_history_collection.create_index(
        [("user_id", ASCENDING), ("date", ASCENDING)], unique=True
    )
    protocol_checks_collection.create_index(
        [("user_id", ASCENDING), ("check_id", ASCENDING), ("date", ASCENDING)],
        unique=True,
    )
