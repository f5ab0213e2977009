"""Deferred VAPID key sources and single-flight resolution."""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Generic, Optional, TypeVar, Union

from .vapid import VapidKeys

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VapidKeysProvider(ABC):
    """Interface for supplying the application server keys."""

    @abstractmethod
    async def get(self) -> VapidKeys:
        """Return the VAPID key pair."""
        ...


class StaticVapidKeysProvider(VapidKeysProvider):
    """Provider for keys already in memory."""

    def __init__(self, keys: VapidKeys) -> None:
        self._keys = keys

    async def get(self) -> VapidKeys:
        return self._keys


class Base64VapidKeysProvider(VapidKeysProvider):
    """Provider decoding base64url keys (e.g. from environment settings)."""

    def __init__(self, public_key: str, private_key: str, validate: bool = True) -> None:
        self._public_key = public_key
        self._private_key = private_key
        self._validate = validate

    async def get(self) -> VapidKeys:
        return VapidKeys.from_base64(self._public_key, self._private_key, self._validate)


class CallableVapidKeysProvider(VapidKeysProvider):
    """Provider wrapping a plain or async factory, e.g. a secrets-store lookup."""

    def __init__(self, factory: Callable[[], Union[VapidKeys, Awaitable[VapidKeys]]]) -> None:
        self._factory = factory

    async def get(self) -> VapidKeys:
        result = self._factory()
        if inspect.isawaitable(result):
            result = await result
        return result


class AsyncOnceCell(Generic[T]):
    """
    A value computed at most once, even under concurrent first access.

    The first caller starts the computation under a lock; later callers read
    the published value without waiting, or wait for the in-flight
    computation. The computation runs in its own task and is awaited through
    ``asyncio.shield``, so a cancelled waiter does not cancel it for the
    others. A failed computation is not cached.
    """

    def __init__(self) -> None:
        self._value: Optional[T] = None
        self._initialized = False
        self._lock: Optional[asyncio.Lock] = None
        self._pending: Optional["asyncio.Future[T]"] = None

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def peek(self) -> Optional[T]:
        """Return the value if already computed, without waiting."""
        return self._value if self._initialized else None

    async def get_or_init(self, factory: Callable[[], Awaitable[T]]) -> T:
        if self._initialized:
            return self._value

        if self._lock is None:
            self._lock = asyncio.Lock()

        async with self._lock:
            if self._initialized:
                return self._value

            if self._pending is None:
                self._pending = asyncio.ensure_future(self._resolve(factory))
                self._pending.add_done_callback(_consume_exception)
            pending = self._pending

            return await asyncio.shield(pending)

    async def _resolve(self, factory: Callable[[], Awaitable[T]]) -> T:
        try:
            value = await factory()
        except BaseException:
            self._pending = None
            raise

        self._value = value
        self._initialized = True
        self._pending = None
        return value


def _consume_exception(future: "asyncio.Future[T]") -> None:
    """Mark a failure as retrieved when every waiter was cancelled."""
    if not future.cancelled():
        future.exception()


class LazyVapidKeys:
    """Resolves keys from a provider once and keeps them."""

    def __init__(self, provider: VapidKeysProvider) -> None:
        self._provider = provider
        self._cell: AsyncOnceCell[VapidKeys] = AsyncOnceCell()

    async def get(self) -> VapidKeys:
        return await self._cell.get_or_init(self._load)

    async def _load(self) -> VapidKeys:
        keys = await self._provider.get()
        logger.info("Resolved VAPID keys (public key %s...)", keys.public_key_base64()[:12])
        return keys
