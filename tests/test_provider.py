"""Tests for lazy VAPID key resolution."""

import asyncio
import gc

import pytest

from webpush_crypto.provider import (
    AsyncOnceCell,
    Base64VapidKeysProvider,
    CallableVapidKeysProvider,
    LazyVapidKeys,
    StaticVapidKeysProvider,
    VapidKeysProvider,
)
from webpush_crypto.types import InvalidKeyPairError
from webpush_crypto.vapid import VapidKeys


class CountingProvider(VapidKeysProvider):
    """Provider that generates keys slowly and counts its calls."""

    def __init__(self, delay: float = 0.01) -> None:
        self.calls = 0
        self.delay = delay

    async def get(self) -> VapidKeys:
        self.calls += 1
        await asyncio.sleep(self.delay)
        return VapidKeys.generate()


class TestProviders:
    """Test the key providers."""

    def test_static(self) -> None:
        keys = VapidKeys.generate()
        assert asyncio.run(StaticVapidKeysProvider(keys).get()) is keys

    def test_base64(self) -> None:
        keys = VapidKeys.generate()
        provider = Base64VapidKeysProvider(keys.public_key_base64(), keys.private_key_base64())

        assert asyncio.run(provider.get()) == keys

    def test_base64_mismatch(self) -> None:
        keys = VapidKeys.generate()
        other = VapidKeys.generate()
        provider = Base64VapidKeysProvider(keys.public_key_base64(), other.private_key_base64())

        with pytest.raises(InvalidKeyPairError):
            asyncio.run(provider.get())

    def test_callable_sync(self) -> None:
        keys = VapidKeys.generate()
        assert asyncio.run(CallableVapidKeysProvider(lambda: keys).get()) is keys

    def test_callable_async(self) -> None:
        keys = VapidKeys.generate()

        async def load() -> VapidKeys:
            await asyncio.sleep(0)
            return keys

        assert asyncio.run(CallableVapidKeysProvider(load).get()) is keys


class TestLazyVapidKeys:
    """Test single-flight key resolution."""

    def test_concurrent_first_access(self) -> None:
        """50 concurrent callers share one provider call."""
        provider = CountingProvider()
        lazy = LazyVapidKeys(provider)

        async def run():
            return await asyncio.gather(*(lazy.get() for _ in range(50)))

        results = asyncio.run(run())

        assert provider.calls == 1
        assert len(results) == 50
        assert all(keys is results[0] for keys in results)

    def test_later_calls_reuse_value(self) -> None:
        provider = CountingProvider(delay=0)
        lazy = LazyVapidKeys(provider)

        async def run():
            first = await lazy.get()
            second = await lazy.get()
            return first, second

        first, second = asyncio.run(run())

        assert first is second
        assert provider.calls == 1


class TestAsyncOnceCell:
    """Test the single-flight cell directly."""

    def test_cancelled_waiter_does_not_cancel_computation(self) -> None:
        cell: AsyncOnceCell[str] = AsyncOnceCell()
        calls = 0

        async def run():
            release = asyncio.Event()

            async def factory() -> str:
                nonlocal calls
                calls += 1
                await release.wait()
                return "value"

            first = asyncio.ensure_future(cell.get_or_init(factory))
            await asyncio.sleep(0)
            await asyncio.sleep(0)

            first.cancel()
            with pytest.raises(asyncio.CancelledError):
                await first

            second = asyncio.ensure_future(cell.get_or_init(factory))
            await asyncio.sleep(0)
            release.set()
            return await second

        assert asyncio.run(run()) == "value"
        assert calls == 1
        assert cell.is_initialized

    def test_failure_is_not_cached(self) -> None:
        cell: AsyncOnceCell[int] = AsyncOnceCell()
        attempts = 0

        async def factory() -> int:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise RuntimeError("key store unavailable")
            return 42

        async def run():
            with pytest.raises(RuntimeError, match="unavailable"):
                await cell.get_or_init(factory)
            assert not cell.is_initialized
            return await cell.get_or_init(factory)

        assert asyncio.run(run()) == 42
        assert attempts == 2

    def test_abandoned_failure_is_retrieved(self) -> None:
        """A failure nobody waits for any more is not reported as unretrieved."""
        cell: AsyncOnceCell[int] = AsyncOnceCell()

        async def run():
            errors = []
            asyncio.get_running_loop().set_exception_handler(lambda loop, context: errors.append(context))
            release = asyncio.Event()

            async def factory() -> int:
                await release.wait()
                raise RuntimeError("key store unavailable")

            waiter = asyncio.ensure_future(cell.get_or_init(factory))
            await asyncio.sleep(0)
            await asyncio.sleep(0)

            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter

            release.set()
            for _ in range(5):
                await asyncio.sleep(0)
            gc.collect()
            await asyncio.sleep(0)
            return errors

        assert asyncio.run(run()) == []
        assert not cell.is_initialized

    def test_peek(self) -> None:
        cell: AsyncOnceCell[int] = AsyncOnceCell()
        assert cell.peek() is None

        async def factory() -> int:
            return 7

        asyncio.run(cell.get_or_init(factory))
        assert cell.peek() == 7
