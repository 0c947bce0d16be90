#!/usr/bin/env python3
"""
Create MongoDB indexes for all collections.

Usage:
    MONGODB_URI=mongodb://localhost:27017/job_tracker python scripts/ensure_indexes.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.config import settings  # noqa: E402
from app.db.mongo import MongoDB  # noqa: E402
from app.models import INDEXES  # noqa: E402


async def main() -> int:
    print("🔧 Ensuring MongoDB indexes")
    print("=" * 60)

    mongo = MongoDB(settings.MONGODB_URI, settings.MONGODB_DATABASE)
    try:
        # connect() pings and creates the indexes
        db = await mongo.connect()
    except Exception as e:
        print(f"❌ MongoDB connection failed: {e}")
        return 1

    try:
        for collection_name in INDEXES:
            indexes = await db[collection_name].list_indexes().to_list(length=None)
            print(f"\n📋 {collection_name}:")
            for idx in indexes:
                print(f"   - {idx['name']}: {dict(idx.get('key', {}))}")
    finally:
        await mongo.close()

    print("\n✅ Done")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
