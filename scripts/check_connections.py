#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB is reachable and the indexes are in place.
Usage: python scripts/check_connections.py
"""
from jobportal.core.config import get_settings
from jobportal.db.mongodb import init_mongo_indexes, test_mongo_connection


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB PORTAL - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if not test_mongo_connection():
        print("    ❌ MongoDB: FAILED")
        return 1
    print("    ✅ MongoDB: CONNECTED")

    print("\n[2] Creating indexes...")
    init_mongo_indexes()
    print("    ✅ Unique keys: users.email, companies.name, applications.(job, applicant)")

    print("\n[3] Client settings...")
    print(f"    API base URL: {settings.api_base_url}")
    print(f"    CORS origins: {', '.join(settings.cors_allowed_origins)}")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
