import asyncio
from datetime import timedelta
from uuid import UUID

from lucky_pool import claim_coordinator as coordinator_module
from lucky_pool.claim_coordinator import ClaimCoordinator
from lucky_pool.crud import ReadData
from lucky_pool.models.dc_models import ClaimErrorModel
from lucky_pool.services.pool_service import PoolService


def _run(open_database, scenario):
    async def main():
        async with open_database() as (_, Session):
            return await scenario(PoolService(Session), ClaimCoordinator(Session))

    return asyncio.run(main())


def test_sequential_claims_conserve_pool(open_database, now):
    async def scenario(service, coordinator):
        pool = await service.open_pool("creator", "channel", 1000, 7, now=now)
        results = [await coordinator.try_claim(pool.pool_id, f"user{i}", now=now) for i in range(7)]
        return results, await service.read_pool(pool.pool_id), await service.read_pool_stats(pool.pool_id)

    results, pool, stats = _run(open_database, scenario)

    assert all(result.ok for result in results)
    assert sum(result.amount for result in results) == 1000
    assert all(result.amount >= 1 for result in results)
    assert (pool.remaining_amount, pool.remaining_count, pool.status) == (0, 0, "completed")
    assert results[-1].pool.status == "completed"
    assert sum(claim.amount for claim in stats.claims) == 1000


def test_concrete_scenario_with_explicit_seeds(open_database, now):
    async def scenario(service, coordinator):
        pool = await service.open_pool("creator", "channel", 100, 4, now=now)
        return [
            await coordinator.try_claim(pool.pool_id, f"user{name}", now=now, seed=f"pool42_user{name}_1700000000")
            for name in "ABCD"
        ]

    results = _run(open_database, scenario)

    assert 1 <= results[0].amount <= 50
    assert sum(result.amount for result in results) == 100


def test_second_claim_by_same_claimant_is_refused_and_pool_unchanged(open_database, now):
    async def scenario(service, coordinator):
        pool = await service.open_pool("creator", "channel", 100, 5, now=now)
        first = await coordinator.try_claim(pool.pool_id, "userA", now=now)
        before = await service.read_pool(pool.pool_id)
        second = await coordinator.try_claim(pool.pool_id, "userA", now=now + timedelta(seconds=1))
        after = await service.read_pool(pool.pool_id)
        return first, second, before, after

    first, second, before, after = _run(open_database, scenario)

    assert first.ok
    assert second.error == ClaimErrorModel.already_claimed
    assert second.amount is None
    assert before == after
    assert after.remaining_count == 4


def test_concurrent_claimants_get_exactly_the_available_shares(open_database, now):
    async def scenario(service, coordinator):
        pool = await service.open_pool("creator", "channel", 100, 4, now=now)
        results = await asyncio.gather(
            *(coordinator.try_claim(pool.pool_id, f"user{i}", now=now) for i in range(10))
        )
        return results, await service.read_pool(pool.pool_id)

    results, pool = _run(open_database, scenario)

    winners = [result for result in results if result.ok]
    assert len(winners) == 4
    assert sum(result.amount for result in winners) == 100
    assert {result.error for result in results if not result.ok} == {ClaimErrorModel.pool_drained}
    assert (pool.remaining_amount, pool.remaining_count, pool.status) == (0, 0, "completed")


def test_concurrent_duplicate_claims_have_one_winner(open_database, now):
    async def scenario(service, coordinator):
        pool = await service.open_pool("creator", "channel", 100, 5, now=now)
        results = await asyncio.gather(*(coordinator.try_claim(pool.pool_id, "userA", now=now) for _ in range(5)))
        return results, await service.read_pool(pool.pool_id)

    results, pool = _run(open_database, scenario)

    assert sum(result.ok for result in results) == 1
    assert [result.error for result in results if not result.ok] == [ClaimErrorModel.already_claimed] * 4
    assert pool.remaining_count == 4


def test_last_share_drains_pool_and_next_claim_is_refused(open_database, now):
    async def scenario(service, coordinator):
        pool = await service.open_pool("creator", "channel", 37, 1, now=now)
        last = await coordinator.try_claim(pool.pool_id, "userA", now=now)
        late = await coordinator.try_claim(pool.pool_id, "userB", now=now)
        return last, late

    last, late = _run(open_database, scenario)

    assert last.amount == 37
    assert late.error == ClaimErrorModel.pool_drained


def test_claim_after_deadline_marks_pool_expired(open_database, now):
    async def scenario(service, coordinator):
        pool = await service.open_pool("creator", "channel", 100, 4, now=now)
        result = await coordinator.try_claim(pool.pool_id, "userA", now=now + timedelta(hours=25))
        return result, await service.read_pool(pool.pool_id)

    result, pool = _run(open_database, scenario)

    assert result.error == ClaimErrorModel.pool_expired
    assert pool.status == "expired"
    assert pool.remaining_amount == 100


def test_unknown_pool(open_database, now):
    async def scenario(service, coordinator):
        await service.open_pool("creator", "channel", 100, 4, now=now)
        return await coordinator.try_claim(UUID(int=1), "userA", now=now)

    result = _run(open_database, scenario)

    assert result.error == ClaimErrorModel.pool_not_found


def test_pool_changed_by_another_writer_is_contended(open_database, now, monkeypatch):
    read_for_update = ReadData.read_pool_data_for_update

    async def stale_read(pool_id, session):
        pool = await read_for_update(pool_id, session)
        # The row as another process saw it before taking a share.
        return pool.model_copy(update={"remaining_amount": pool.remaining_amount + 10})

    async def scenario(service, coordinator):
        pool = await service.open_pool("creator", "channel", 100, 4, now=now)
        monkeypatch.setattr(coordinator_module.ReadData, "read_pool_data_for_update", staticmethod(stale_read))
        result = await coordinator.try_claim(pool.pool_id, "userA", now=now)
        monkeypatch.undo()
        return result, await service.read_pool(pool.pool_id), await service.read_pool_stats(pool.pool_id)

    result, pool, stats = _run(open_database, scenario)

    assert result.error == ClaimErrorModel.contended
    assert (pool.remaining_amount, pool.remaining_count) == (100, 4)
    assert stats.claims == []
