"""
Database module - MongoDB connection and collections.
"""
from portal.db.mongodb import (
    COLLECTIONS,
    get_collection,
    get_mongo_db,
    init_mongo_indexes,
    check_mongo_connection,
    missing_unique_indexes,
)

__all__ = [
    "COLLECTIONS",
    "get_collection",
    "get_mongo_db",
    "init_mongo_indexes",
    "check_mongo_connection",
    "missing_unique_indexes",
]
