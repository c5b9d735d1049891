#!/usr/bin/env python3
"""
Create Admin Script

Provision an admin account (admins cannot self-register).
Usage: python scripts/create_admin.py --name "Admin" --email admin@example.com --password secret123
"""
import argparse
import getpass
import sys
sys.path.insert(0, '.')

from pymongo.errors import DuplicateKeyError

from portal.db.mongodb import init_mongo_indexes
from portal.services.user_service import UserService


def main():
    parser = argparse.ArgumentParser(description="Create a portal admin account")
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", help="Prompted for when omitted")
    parser.add_argument("--department", default="Administration")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if len(password) < 6:
        print("Password must be at least 6 characters")
        return 1

    init_mongo_indexes()
    try:
        user = UserService().create(
            name=args.name,
            email=args.email,
            password=password,
            role="admin",
            department=args.department,
        )
    except DuplicateKeyError:
        print(f"A user with email {args.email} already exists")
        return 1

    print(f"Admin created: {user['email']} ({user['_id']})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
