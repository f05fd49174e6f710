"""Exceptions raised by the random core and the pool allocator.

Claim outcomes from the coordinator are returned as values
(see ``ClaimErrorModel``), not raised.
"""


class LuckyPoolError(Exception):
    """Base class for every error raised by lucky_pool."""


class InvalidRange(LuckyPoolError, ValueError):
    """A sampler received ``max < min``."""


class EmptyInput(LuckyPoolError, IndexError):
    """A choice was requested from an empty sequence."""


class ConfigurationError(LuckyPoolError, ValueError):
    """Unknown algorithm or bias name, or a malformed reward table."""


class PoolUnavailable(LuckyPoolError):
    """The pool is not active, its deadline has passed, or it has no shares left.

    ``reason`` is one of ``"not_active"``, ``"expired"`` or ``"drained"``.
    """

    def __init__(self, message: str, reason: str = "not_active"):
        super().__init__(message)
        self.reason = reason
