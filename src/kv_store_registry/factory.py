"""The public `create_store` entry point, usable with a callback or as an awaitable."""

import asyncio
import logging
from collections.abc import Callable, Coroutine, Mapping
from typing import Any

from kv_store_registry.client import KeyValueStore
from kv_store_registry.context import StoreContext
from kv_store_registry.options import StoreOptions
from kv_store_registry.worker import resolve_store

logger = logging.getLogger(__name__)

StoreCallback = Callable[[Exception | None, KeyValueStore | None], object]

OptionsOrCallback = Mapping[str, Any] | StoreOptions | StoreCallback | None

_pending_callbacks: set["asyncio.Task[None]"] = set()


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _deliver(callback: StoreCallback, error: Exception | None, store: KeyValueStore | None) -> None:
    try:
        callback(error, store)
    except Exception:
        logger.exception("Store callback raised", extra={"resolved": store is not None})
        raise


def _callback_finished(task: "asyncio.Task[None]") -> None:
    _pending_callbacks.discard(task)

    if not task.cancelled():
        _ = task.exception()


async def _resolve_with_callback(
    uri: str, options: Mapping[str, Any] | StoreOptions | None, callback: StoreCallback, context: StoreContext | None
) -> None:
    try:
        store: KeyValueStore = await resolve_store(uri, options, context=context)
    except Exception as e:
        _deliver(callback=callback, error=e, store=None)
        return

    _deliver(callback=callback, error=None, store=store)


def create_store(
    uri: str,
    options: OptionsOrCallback = None,
    callback: StoreCallback | None = None,
    *,
    context: StoreContext | None = None,
) -> "asyncio.Task[KeyValueStore] | Coroutine[Any, Any, KeyValueStore] | None":
    """Create a KeyValueStore from a connection URI.

    With a callback, `callback(error, store)` is called exactly once and None is returned. Inside a running event
    loop the resolution is scheduled as a task, otherwise it runs to completion before `create_store` returns.
    An exception raised by the callback is logged. Without a running loop it also propagates to the caller.

    Without a callback, an awaitable is returned: a Task when called inside a running event loop, otherwise the
    coroutine itself, ready for `asyncio.run`.

    Example:
        Awaiting the result:
        >>> store = await create_store("redis://localhost:6379")
        >>> memory = await create_store("memory://", {"namespace": "app", "ttl": 60_000})

        Using a callback:
        >>> def on_store(error, store):
        ...     if error:
        ...         raise error
        >>> create_store("file://~/.cache/app", on_store)

        Passing a pre-built adapter:
        >>> store = await create_store("redis://ignored", {"store": RedisStore(url="redis://localhost:6379")})

    Args:
        uri: The connection URI.
        options: Store options, or the callback when no options are needed.
        callback: Called with `(error, store)` once the store is resolved.
        context: The registry and loader to use. Defaults to the process-wide context.
    """
    if callable(options):
        callback = options
        options = None

    if callback is not None:
        resolution = _resolve_with_callback(uri=uri, options=options, callback=callback, context=context)

        if _running_loop() is not None:
            task = asyncio.ensure_future(resolution)
            _pending_callbacks.add(task)
            task.add_done_callback(_callback_finished)
        else:
            asyncio.run(resolution)

        return None

    coroutine = resolve_store(uri, options, context=context)

    if _running_loop() is not None:
        return asyncio.ensure_future(coroutine)

    return coroutine
