from pydantic import BaseModel
from enum import Enum
from typing import Optional

from lucky_pool.models.schema_models import PoolSchema


class ClaimErrorModel(str, Enum):
    already_claimed = "already_claimed"
    pool_not_active = "pool_not_active"
    pool_expired = "pool_expired"
    pool_drained = "pool_drained"
    pool_not_found = "pool_not_found"
    contended = "contended"  # the pool row changed under the conditional update


class ClaimResultModel(BaseModel):
    """Outcome of one claim attempt: either an amount or an error, never both."""
    amount: Optional[int] = None
    error: Optional[ClaimErrorModel] = None
    pool: Optional[PoolSchema] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, amount: int, pool: PoolSchema) -> "ClaimResultModel":
        return cls(amount=amount, pool=pool)

    @classmethod
    def failure(cls, error: ClaimErrorModel, pool: Optional[PoolSchema] = None) -> "ClaimResultModel":
        return cls(error=error, pool=pool)


class DrawSummaryModel(BaseModel):
    count: int
    mean: float
    std: float
    min: float
    max: float
