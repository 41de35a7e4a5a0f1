import asyncio
import sys
import os

# Add backend/ to PYTHONPATH to import ironhub.*
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "backend"))

from ironhub.core.database import get_engine
from ironhub.models import Base


async def reset():
    print("Connecting to the ledger database, dropping tables...")
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        print("Tables dropped. Creating customers, quotes, payments, audit_logs, inventory...")
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()
    print("Ledger database reset.")

if __name__ == "__main__":
    asyncio.run(reset())
