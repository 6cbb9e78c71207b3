"""Delete sessions whose expires_at has passed.

Expired sessions are already rejected on every request; this only reclaims
the rows. Suitable for a cron job.

Usage:
    python -m scripts.purge_expired_sessions
"""

import asyncio
import logging

from config import ApplicationConfig
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.session_manager import SessionManager
from src.depends import AsyncSessionLocal, get_token_codec


async def purge_expired_sessions() -> int:
    async with AsyncSessionLocal() as session:
        uow = SqlAlchemyUnitOfWork(session)
        manager = SessionManager(uow, get_token_codec())
        async with uow:
            count = await manager.purge_expired()
            await uow.commit()
    return count


def main():
    logging.basicConfig(level=ApplicationConfig.LOG_LEVEL.upper())
    count = asyncio.run(purge_expired_sessions())
    print(f"Purged {count} expired session(s)")


if __name__ == "__main__":
    main()
