import logging
from asyncio import Lock
from contextlib import asynccontextmanager
from uuid import UUID


class PoolSyncManager:
    def __init__(self):
        self.locks = {}  # one Lock per pool_id
        self.waiters = {}  # tasks holding or waiting for each pool Lock
        self.lock = Lock()  # protects locks and waiters

    async def acquire(self, pool_id: UUID) -> Lock:
        """Wait for the claim lock of the specified pool_id

        Args:
            pool_id (UUID): ID to identify this pool

        Returns:
            Lock: Acquired lock, give it back with release()
        """
        async with self.lock:
            if pool_id not in self.locks:
                self.locks[pool_id] = Lock()
                self.waiters[pool_id] = 0
            self.waiters[pool_id] += 1
            pool_lock = self.locks[pool_id]
        try:
            await pool_lock.acquire()
        except BaseException:
            await self._drop_waiter(pool_id)
            raise
        return pool_lock

    async def release(self, pool_id: UUID):
        """Release the claim lock and drop it once no task is waiting

        Args:
            pool_id (UUID): ID to identify this pool
        """
        self.locks[pool_id].release()
        await self._drop_waiter(pool_id)

    @asynccontextmanager
    async def claiming(self, pool_id: UUID):
        """Hold the claim lock of the specified pool_id for the body of the block"""
        await self.acquire(pool_id)
        try:
            yield
        finally:
            await self.release(pool_id)

    async def get_waiter_count(self, pool_id: UUID) -> int:
        """Get how many claims hold or wait for the lock of the specified pool_id

        Args:
            pool_id (UUID): ID to identify this pool

        Returns:
            int: waiter count, 0 if nobody is claiming
        """
        async with self.lock:
            return self.waiters.get(pool_id, 0)

    async def _drop_waiter(self, pool_id: UUID):
        async with self.lock:
            self.waiters[pool_id] -= 1
            if self.waiters[pool_id] == 0:
                del self.locks[pool_id]
                del self.waiters[pool_id]
                logging.debug(f"Dropped claim lock of pool {pool_id}")
