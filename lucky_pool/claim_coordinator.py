"""Atomic, at-most-once claims against a shared pool record.

Claims on one pool are serialized in-process by ``PoolSyncManager``. Inside the
transaction the pool decrement is a conditional update keyed on the amounts
that were read, so a writer outside this process can never make two claims
take the same share: the later one fails with ``contended`` and the caller
decides whether to try again.
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from uuid6 import uuid7

from lucky_pool.converter import DataConverter
from lucky_pool.crud import CreateData, ReadData, UpdateData
from lucky_pool.domain.allocation import PoolStatus, allocate_share
from lucky_pool.domain.generators import claim_seed
from lucky_pool.domain.sampler import RandomOptions
from lucky_pool.errors import PoolUnavailable
from lucky_pool.load_config import random_algorithm
from lucky_pool.models.dc_models import ClaimErrorModel, ClaimResultModel
from lucky_pool.models.schema_models import ClaimSchema, PoolSchema
from lucky_pool.pool_sync_manager import PoolSyncManager

data_converter = DataConverter()

UNAVAILABLE_ERRORS = {
    "expired": ClaimErrorModel.pool_expired,
    "drained": ClaimErrorModel.pool_drained,
    "not_active": ClaimErrorModel.pool_not_active,
}


class ClaimCoordinator:
    def __init__(
        self,
        Session: async_sessionmaker | None = None,
        options: RandomOptions | None = None,
        sync_manager: PoolSyncManager | None = None,
    ):
        if Session is None:
            from lucky_pool.db import Session
        self.Session: async_sessionmaker = Session
        self.options: RandomOptions = options or RandomOptions(algorithm=random_algorithm)
        self.sync_manager: PoolSyncManager = sync_manager or PoolSyncManager()

    async def try_claim(
        self,
        pool_id: UUID,
        claimant_id: str,
        now: datetime | None = None,
        seed: str | None = None,
    ) -> ClaimResultModel:
        """Claim one share of a pool for a claimant

        Args:
            pool_id (UUID): To identify the pool
            claimant_id (str): To identify the claimant
            now (datetime, optional): Attempt time, checked against the deadline. Defaults to datetime.now().
            seed (str, optional): Seed for the share draw. Defaults to pool id, claimant id and attempt time.

        Returns:
            ClaimResultModel: The amount and the updated pool, or the reason the claim was refused
        """
        now = now or datetime.now()
        async with self.sync_manager.claiming(pool_id):
            async with self.Session() as session:
                try:
                    async with session.begin():
                        return await self._claim_in_transaction(pool_id, claimant_id, now, seed, session)
                except IntegrityError:
                    logging.info(f"Claimant {claimant_id} already claimed pool {pool_id}")
                    return ClaimResultModel.failure(ClaimErrorModel.already_claimed)

    async def _claim_in_transaction(
        self,
        pool_id: UUID,
        claimant_id: str,
        now: datetime,
        seed: str | None,
        session: AsyncSession,
    ) -> ClaimResultModel:
        pool = await ReadData.read_pool_data_for_update(pool_id, session)
        if pool is None:
            return ClaimResultModel.failure(ClaimErrorModel.pool_not_found)

        if await ReadData.read_claim_data(pool_id, claimant_id, session) is not None:
            return ClaimResultModel.failure(ClaimErrorModel.already_claimed, pool)

        if seed is None:
            seed = claim_seed(pool_id, claimant_id, int(now.timestamp() * 1000))

        snapshot = data_converter.convert_poolschema_to_snapshot(pool)
        try:
            share, updated = allocate_share(snapshot, seed, now, self.options)
        except PoolUnavailable as e:
            return await self._refuse(pool, e, session)

        if not await UpdateData.decrement_pool_no_commit(
            pool_id, pool.remaining_amount, pool.remaining_count, share, session
        ):
            logging.warning(f"Pool {pool_id} changed during the claim of {claimant_id}")
            return ClaimResultModel.failure(ClaimErrorModel.contended, pool)

        claim = ClaimSchema(
            claim_id=uuid7(),
            pool_id=pool_id,
            claimant_id=claimant_id,
            amount=share,
            claimed_at=now,
        )
        await CreateData.add_claim_data_no_commit(claim, session)

        updated_pool = data_converter.apply_snapshot_to_poolschema(pool, updated)
        logging.info(
            f"Claimant {claimant_id} took {share} from pool {pool_id}, "
            f"{updated_pool.remaining_amount} left in {updated_pool.remaining_count} shares"
        )
        return ClaimResultModel.success(share, updated_pool)

    async def _refuse(self, pool: PoolSchema, error: PoolUnavailable, session: AsyncSession) -> ClaimResultModel:
        """Record the lazily detected status and return the refusal"""
        if pool.status == PoolStatus.active.value:
            new_status = None
            if error.reason == "expired":
                new_status = PoolStatus.expired
            elif error.reason == "drained":
                new_status = PoolStatus.completed
            if new_status is not None:
                await UpdateData.set_pool_status_no_commit(pool.pool_id, new_status, session)
                pool = pool.model_copy(update={"status": new_status.value})
                logging.info(f"Pool {pool.pool_id} marked {new_status.value}")
        return ClaimResultModel.failure(UNAVAILABLE_ERRORS[error.reason], pool)
