from typing import List

from lucky_pool.domain.allocation import PoolSnapshot, PoolStatus
from lucky_pool.models.schema_models import ClaimSchema, PoolSchema, PoolStatsSchema


class DataConverter:
    """This class is used to convert data between the DB models and the domain types."""

    def convert_poolschema_to_snapshot(self, pool: PoolSchema) -> PoolSnapshot:
        """Convert the PoolSchema to the PoolSnapshot the allocator works on

        Args:
            pool (PoolSchema): Pool row read from the database

        Returns:
            PoolSnapshot: Amounts, status and deadline of the pool
        """
        return PoolSnapshot(
            pool_id=pool.pool_id,
            total_amount=pool.total_amount,
            total_count=pool.total_count,
            remaining_amount=pool.remaining_amount,
            remaining_count=pool.remaining_count,
            status=pool.status,
            expires_at=pool.expires_at,
        )

    def apply_snapshot_to_poolschema(self, pool: PoolSchema, snapshot: PoolSnapshot) -> PoolSchema:
        """Copy the decremented amounts and status of a snapshot onto the PoolSchema

        Args:
            pool (PoolSchema): Pool as read before the claim
            snapshot (PoolSnapshot): Pool after the claim

        Returns:
            PoolSchema: Pool as stored after the claim
        """
        return pool.model_copy(
            update={
                "remaining_amount": snapshot.remaining_amount,
                "remaining_count": snapshot.remaining_count,
                "status": PoolStatus(snapshot.status).value,
            }
        )

    def convert_claims_to_stats(self, pool: PoolSchema, claims: List[ClaimSchema]) -> PoolStatsSchema:
        """Sort the claims of a pool by amount, largest first, and pick the best claim

        Ties keep claim order, so the earlier claimant is the best claim.
        """
        ordered = sorted(claims, key=lambda claim: (-claim.amount, claim.claimed_at))
        return PoolStatsSchema(
            pool=pool,
            claims=ordered,
            best_claim=ordered[0] if ordered else None,
        )
