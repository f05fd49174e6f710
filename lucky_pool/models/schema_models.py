from pydantic import BaseModel
from typing import List, Optional
from uuid import UUID
from datetime import datetime


class PoolSchema(BaseModel):
    pool_id: UUID
    creator_id: str
    channel_id: str
    platform: str | None = ""
    total_amount: int
    total_count: int
    remaining_amount: int
    remaining_count: int
    status: str
    fee: int = 0
    created_at: datetime
    expires_at: datetime

    class Config:
        from_attributes = True


class ClaimSchema(BaseModel):
    claim_id: UUID
    pool_id: UUID
    claimant_id: str
    amount: int
    claimed_at: datetime

    class Config:
        from_attributes = True


class PoolStatsSchema(BaseModel):
    pool: PoolSchema
    claims: List[ClaimSchema]  # largest amount first
    best_claim: Optional[ClaimSchema] = None
