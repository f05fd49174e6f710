"""DB service layer for pool use cases.

- Callers should not touch DB sessions directly; they call this module.
- This layer owns session/transaction boundaries.
- Claims go through ClaimCoordinator; everything else about pools lives here.
"""

import logging
from datetime import datetime, timedelta
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import async_sessionmaker
from uuid6 import uuid7

from lucky_pool.converter import DataConverter
from lucky_pool.crud import CreateData, ReadData, UpdateData
from lucky_pool.domain.allocation import PoolStatus
from lucky_pool.domain.pool_rules import random_pool_parameters, validate_pool_request
from lucky_pool.domain.sampler import RandomOptions
from lucky_pool.load_config import max_pool_count, pool_expiry_hours, pool_fee, random_algorithm
from lucky_pool.models.schema_models import PoolSchema, PoolStatsSchema

data_converter = DataConverter()


class PoolService:
    def __init__(
        self,
        Session: async_sessionmaker | None = None,
        expiry_hours: float = pool_expiry_hours,
        max_count: int = max_pool_count,
        fee: int = pool_fee,
        options: RandomOptions | None = None,
    ):
        if Session is None:
            from lucky_pool.db import Session
        self.Session: async_sessionmaker = Session
        self.expiry_hours = expiry_hours
        self.max_count = max_count
        self.fee = fee
        self.options = options or RandomOptions(algorithm=random_algorithm)

    async def open_pool(
        self,
        creator_id: str,
        channel_id: str,
        amount: int,
        count: int,
        platform: str = "",
        now: datetime | None = None,
    ) -> PoolSchema:
        """Open a pool of ``amount`` split into ``count`` shares

        Raises:
            ValueError: amount or count cannot give every share at least 1
            RuntimeError: the pool could not be stored
        """
        validate_pool_request(amount, count, self.max_count)
        now = now or datetime.now()
        pool = PoolSchema(
            pool_id=uuid7(),
            creator_id=creator_id,
            channel_id=channel_id,
            platform=platform,
            total_amount=amount,
            total_count=count,
            remaining_amount=amount,
            remaining_count=count,
            status=PoolStatus.active.value,
            fee=self.fee,
            created_at=now,
            expires_at=now + timedelta(hours=self.expiry_hours),
        )
        async with self.Session() as session:
            success = await CreateData.create_pool_data(pool, session)
            if not success:
                raise RuntimeError("Failed to create pool data")
        logging.info(f"Pool {pool.pool_id} opened by {creator_id}: {amount} in {count} shares")
        return pool

    async def open_random_pool(
        self,
        creator_id: str,
        channel_id: str,
        seed: str,
        platform: str = "",
        now: datetime | None = None,
    ) -> PoolSchema:
        """Open a pool whose amount and count are drawn from ``seed``"""
        amount, count = random_pool_parameters(seed, options=self.options)
        return await self.open_pool(creator_id, channel_id, amount, count, platform, now)

    async def read_pool(self, pool_id: UUID) -> PoolSchema | None:
        async with self.Session() as session:
            return await ReadData.read_pool_data(pool_id, session)

    async def list_claimable_pools(self, channel_id: str, now: datetime | None = None) -> List[PoolSchema]:
        async with self.Session() as session:
            return await ReadData.read_claimable_pools_data(channel_id, now or datetime.now(), session)

    async def read_pool_stats(self, pool_id: UUID) -> PoolStatsSchema | None:
        """Pool with its claims, largest first, and the best claim"""
        async with self.Session() as session:
            pool = await ReadData.read_pool_data(pool_id, session)
        if pool is None:
            return None
        async with self.Session() as session:
            claims = await ReadData.read_claims_data(pool_id, session)
        return data_converter.convert_claims_to_stats(pool, claims)

    async def expire_pools(self, now: datetime | None = None) -> List[PoolSchema]:
        """Mark active pools past their deadline as expired.

        Unclaimed amounts are logged, not refunded.

        Returns:
            List[PoolSchema]: Pools that were expired by this sweep
        """
        now = now or datetime.now()
        expired = []
        async with self.Session() as session:
            async with session.begin():
                overdue = await ReadData.read_overdue_pools_data_no_commit(now, session)
                for pool in overdue:
                    if not await UpdateData.set_pool_status_no_commit(pool.pool_id, PoolStatus.expired, session):
                        continue
                    expired.append(pool.model_copy(update={"status": PoolStatus.expired.value}))
                    if pool.remaining_amount > 0:
                        logging.info(
                            f"Pool {pool.pool_id} expired with {pool.remaining_amount} unclaimed "
                            f"in {pool.remaining_count} shares"
                        )
        return expired
