#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB is reachable and storage is configured.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from portal.db.mongodb import check_mongo_connection
from portal.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("INTERNSHIP PORTAL - CONNECTION CHECK")
    print("=" * 50)

    # MongoDB
    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    mongo_ok = check_mongo_connection()
    print("    MongoDB: CONNECTED" if mongo_ok else "    MongoDB: FAILED")

    # Cloudinary
    print("\n[2] Checking Cloudinary configuration...")
    if settings.storage_configured:
        print(f"    Cloud: {settings.cloudinary_cloud_name}")
        print(f"    Folder: {settings.cloudinary_folder}")
        print("    Cloudinary: CONFIGURED")
    else:
        print("    Cloudinary: not configured (uploads will fail)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0 if mongo_ok else 1


if __name__ == "__main__":
    sys.exit(main())
