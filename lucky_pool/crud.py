from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy import select, update, desc
from sqlalchemy.exc import IntegrityError
from typing import List
from datetime import datetime
import logging

from lucky_pool.domain.allocation import PoolStatus
from lucky_pool.models.schema_models import ClaimSchema, PoolSchema
from lucky_pool.models.schemas import Base, Claim, Pool
from uuid import UUID


class CreateData:
    @staticmethod
    async def create_table(engine: AsyncEngine) -> None:
        """Create pools and pool_claims tables if not exists"""
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except IntegrityError as e:
            logging.warning(f"Table already exists or other integrity error: {e}")

    @staticmethod
    async def create_pool_data(pool: PoolSchema, session: AsyncSession) -> bool:
        """Create a new pool

        Args:
            pool (PoolSchema): Pool with its totals, remaining amounts and deadline
            session (AsyncSession): AsyncSession object to interact with database

        Returns:
            bool: True if the pool was stored
        """
        async with session:
            try:
                new_pool = Pool(
                    pool_id=pool.pool_id,
                    creator_id=pool.creator_id,
                    channel_id=pool.channel_id,
                    platform=pool.platform,
                    total_amount=pool.total_amount,
                    total_count=pool.total_count,
                    remaining_amount=pool.remaining_amount,
                    remaining_count=pool.remaining_count,
                    status=pool.status,
                    fee=pool.fee,
                    created_at=pool.created_at,
                    expires_at=pool.expires_at,
                )
                session.add(new_pool)
                await session.commit()
                return True
            except Exception as e:
                logging.error(f"Failed to create pool data: {e}")
                return False

    @staticmethod
    async def add_claim_data_no_commit(claim: ClaimSchema, session: AsyncSession) -> None:
        """Add a claim inside the caller's transaction.

        Flushes so a duplicate (pool_id, claimant_id) raises IntegrityError here.
        """
        session.add(
            Claim(
                claim_id=claim.claim_id,
                pool_id=claim.pool_id,
                claimant_id=claim.claimant_id,
                amount=claim.amount,
                claimed_at=claim.claimed_at,
            )
        )
        await session.flush()


class ReadData:
    @staticmethod
    async def read_pool_data(pool_id: UUID, session: AsyncSession) -> PoolSchema | None:
        """Read pool data

        Args:
            pool_id (UUID): To identify the pool

        Returns:
            PoolSchema: Pool data, None if it does not exist
        """
        async with session:
            try:
                stmt = select(Pool).where(Pool.pool_id == pool_id)
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return None

                return PoolSchema.model_validate(result)
            except Exception as e:
                logging.error(f"Failed to read pool data: {e}")
                return None

    @staticmethod
    async def read_pool_data_for_update(pool_id: UUID, session: AsyncSession) -> PoolSchema | None:
        """Read pool data inside the caller's transaction, locking the row where supported"""
        stmt = select(Pool).where(Pool.pool_id == pool_id).with_for_update()
        result = await session.execute(stmt)
        result = result.scalars().first()
        if result is None:
            return None
        return PoolSchema.model_validate(result)

    @staticmethod
    async def read_claim_data(pool_id: UUID, claimant_id: str, session: AsyncSession) -> ClaimSchema | None:
        """Read the claim of one claimant inside the caller's transaction"""
        stmt = select(Claim).where(Claim.pool_id == pool_id, Claim.claimant_id == claimant_id)
        result = await session.execute(stmt)
        result = result.scalars().first()
        if result is None:
            return None
        return ClaimSchema.model_validate(result)

    @staticmethod
    async def read_claims_data(pool_id: UUID, session: AsyncSession) -> List[ClaimSchema]:
        """Read every claim of a pool in claim order

        Args:
            pool_id (UUID): To identify the pool

        Returns:
            List[ClaimSchema]: Claims of the pool, empty if there are none
        """
        async with session:
            try:
                stmt = select(Claim).where(Claim.pool_id == pool_id).order_by(Claim.claimed_at)
                result = await session.execute(stmt)
                return [ClaimSchema.model_validate(claim) for claim in result.scalars().all()]
            except Exception as e:
                logging.error(f"Failed to read claims data: {e}")
                return []

    @staticmethod
    async def read_claimable_pools_data(channel_id: str, now: datetime, session: AsyncSession) -> List[PoolSchema]:
        """Read active pools of a channel that can still be claimed, newest first

        Args:
            channel_id (str): Channel the pools were opened in
            now (datetime): Pools past their deadline at this time are skipped

        Returns:
            List[PoolSchema]: Claimable pools
        """
        async with session:
            try:
                stmt = (
                    select(Pool)
                    .where(
                        Pool.channel_id == channel_id,
                        Pool.status == PoolStatus.active.value,
                        Pool.expires_at > now,
                        Pool.remaining_count > 0,
                        Pool.remaining_amount > 0,
                    )
                    .order_by(desc(Pool.created_at))
                )
                result = await session.execute(stmt)
                return [PoolSchema.model_validate(pool) for pool in result.scalars().all()]
            except Exception as e:
                logging.error(f"Failed to read claimable pools data: {e}")
                return []

    @staticmethod
    async def read_overdue_pools_data_no_commit(now: datetime, session: AsyncSession) -> List[PoolSchema]:
        """Read active pools whose deadline is before now, inside the caller's transaction"""
        stmt = select(Pool).where(Pool.status == PoolStatus.active.value, Pool.expires_at < now)
        result = await session.execute(stmt)
        return [PoolSchema.model_validate(pool) for pool in result.scalars().all()]


class UpdateData:
    @staticmethod
    async def decrement_pool_no_commit(
        pool_id: UUID,
        expected_amount: int,
        expected_count: int,
        share: int,
        session: AsyncSession,
    ) -> bool:
        """Take one share from an active pool if it still holds the expected amounts.

        Conditional update: nothing is written when another writer changed the
        row since it was read.

        Returns:
            bool: True if exactly one row was updated
        """
        remaining_count = expected_count - 1
        status = PoolStatus.completed if remaining_count == 0 else PoolStatus.active
        stmt = (
            update(Pool)
            .where(
                Pool.pool_id == pool_id,
                Pool.status == PoolStatus.active.value,
                Pool.remaining_amount == expected_amount,
                Pool.remaining_count == expected_count,
            )
            .values(
                remaining_amount=expected_amount - share,
                remaining_count=remaining_count,
                status=status.value,
            )
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    async def set_pool_status_no_commit(pool_id: UUID, status: PoolStatus, session: AsyncSession) -> bool:
        """Move an active pool to another status inside the caller's transaction"""
        stmt = (
            update(Pool)
            .where(Pool.pool_id == pool_id, Pool.status == PoolStatus.active.value)
            .values(status=PoolStatus(status).value)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount == 1
