import asyncio

from cryptocollection.db.migrations import create_tables, enforce_integrity_constraints


async def main():
    await create_tables()
    await enforce_integrity_constraints()
    print("✅ favorite_coins table created/verified")


if __name__ == "__main__":
    asyncio.run(main())
