from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.schema import Column, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.types import Integer, String, Uuid, DateTime
from uuid6 import uuid7
from datetime import datetime


class Base(DeclarativeBase):
    pass


class Pool(Base):
    __tablename__ = "pools"
    __table_args__ = (
        CheckConstraint("remaining_amount >= 0", name="ck_pools_remaining_amount"),
        CheckConstraint("remaining_count >= 0", name="ck_pools_remaining_count"),
    )
    pool_id = Column(Uuid, primary_key=True, default=uuid7)
    creator_id = Column(String, nullable=False)
    channel_id = Column(String, nullable=False, index=True)
    platform = Column(String, default="")
    total_amount = Column(Integer, nullable=False)
    total_count = Column(Integer, nullable=False)
    remaining_amount = Column(Integer, nullable=False)
    remaining_count = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default="active", index=True)
    fee = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)
    expires_at = Column(DateTime, nullable=False)

    claims = relationship(
        "Claim",
        back_populates="pool",
        cascade="all, delete",
    )


class Claim(Base):
    __tablename__ = "pool_claims"
    # One claim per claimant per pool.
    __table_args__ = (UniqueConstraint("pool_id", "claimant_id", name="uq_pool_claims_claimant"),)
    claim_id = Column(Uuid, primary_key=True, default=uuid7)
    pool_id = Column(Uuid, ForeignKey("pools.pool_id"), nullable=False, index=True)
    claimant_id = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    claimed_at = Column(DateTime, default=datetime.now)

    pool = relationship("Pool", back_populates="claims")
