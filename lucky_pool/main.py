from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncEngine

from lucky_pool.crud import CreateData
from lucky_pool.load_config import sweep_interval_hours
from lucky_pool.services.pool_service import PoolService

logging.basicConfig(level=logging.INFO)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

EXPIRE_JOB_ID = "expire_pools"


@asynccontextmanager
async def lifespan(
    pool_service: PoolService | None = None,
    engine: AsyncEngine | None = None,
    scheduler: AsyncIOScheduler | None = None,
):
    """Create the pool tables, expire overdue pools and keep sweeping them.
    Use this around the lifetime of the process that serves claims.
    """
    if engine is None:
        from lucky_pool.db import engine
    pool_service = pool_service or PoolService()
    scheduler = scheduler or AsyncIOScheduler()

    await CreateData.create_table(engine)
    await pool_service.expire_pools()

    # Expiry is also checked lazily on every claim; the sweep catches pools nobody touches.
    scheduler.add_job(
        pool_service.expire_pools,
        "interval",
        hours=sweep_interval_hours,
        id=EXPIRE_JOB_ID,
        replace_existing=True,
    )
    scheduler.start()
    try:
        yield scheduler
    finally:
        scheduler.shutdown()
        logging.info("Stop pool sweep")
