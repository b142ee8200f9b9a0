#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify MongoDB is reachable and the collections are in place.
Usage: python scripts/test_connections.py
"""
import sys
sys.path.insert(0, '.')

from job_portal.core.config import get_settings
from job_portal.db.mongodb import MongoStore


def main():
    settings = get_settings()
    print("=" * 50)
    print("JOB PORTAL - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing MongoDB...")
    print(f"    Database: {settings.mongodb_db}")
    store = MongoStore(settings)
    if not store.ping():
        print("    ❌ MongoDB: FAILED")
        return 1
    print("    ✅ MongoDB: CONNECTED")

    print("\n[2] Checking collections...")
    print(f"    {settings.jobs_collection}: {store.jobs.estimated_document_count()} documents")
    print(f"    {settings.applications_collection}: {store.applications.estimated_document_count()} documents")

    print("\n[3] Creating indexes...")
    store.init_indexes()
    print("    ✅ Indexes ready")

    print("\n[4] Checking token secret...")
    if settings.access_token_secret == "change-this-secret":
        print("    ⚠️  ACCESS_TOKEN_SECRET is the default - set it before deploying")
    else:
        print("    ✅ ACCESS_TOKEN_SECRET configured")

    store.close()
    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
