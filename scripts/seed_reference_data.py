#!/usr/bin/env python3
"""Seed departments, specializations and competencies.

Run with:
    python scripts/seed_reference_data.py
"""

import asyncio

from skillmap.core.logging import setup_logging
from skillmap.infrastructure.db.seed import seed_reference_data
from skillmap.infrastructure.db.session import dispose_engine, get_session_factory


async def main() -> None:
    setup_logging()
    session_factory = get_session_factory()
    try:
        async with session_factory() as session:
            await seed_reference_data(session)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
