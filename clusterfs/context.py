"""Context variables for cancelling remote fetches.

A caller binds a ``threading.Event`` with ``cancel_scope()``; every
remote fetch made by nodes in that context goes through ``fetch()``,
which stops waiting and raises ``Cancelled`` once the event is set.
"""

from __future__ import annotations

import concurrent.futures
import contextvars
import threading
from collections.abc import Callable
from contextlib import contextmanager
from typing import Iterator, TypeVar

import structlog

from .errors import Cancelled, ClusterFSError, RemoteFailure

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Seconds between checks of the cancel event while a fetch is in flight
POLL_INTERVAL = 0.05

# Context variable holding the cancel event of the current call, if any
current_cancel: contextvars.ContextVar[threading.Event | None] = contextvars.ContextVar(
    "clusterfs_current_cancel", default=None
)

_executor: concurrent.futures.ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def _get_executor() -> concurrent.futures.ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = concurrent.futures.ThreadPoolExecutor(
                thread_name_prefix="clusterfs-fetch"
            )
        return _executor


@contextmanager
def cancel_scope(event: threading.Event | None = None) -> Iterator[threading.Event]:
    """Bind a cancel event to every fetch made inside the block.

    Example::

        with cancel_scope() as cancel:
            threading.Timer(1.0, cancel.set).start()
            cfs.list("/v1/pods")  # raises Cancelled if still fetching at 1s
    """
    if event is None:
        event = threading.Event()
    token = current_cancel.set(event)
    try:
        yield event
    finally:
        current_cancel.reset(token)


def fetch(what: str, call: Callable[..., T], *args: object, **kwargs: object) -> T:
    """Run a remote call, honoring the bound cancel event.

    Args:
        what: Short description used in logs and error messages.
        call: The blocking remote call.

    Returns:
        Whatever ``call`` returns.

    Raises:
        Cancelled: If the bound event is set before the call completes.
        RemoteFailure: If the call raises anything that is not already a
            ClusterFSError.
    """
    event = current_cancel.get()
    if event is None:
        return _invoke(what, call, *args, **kwargs)

    if event.is_set():
        raise Cancelled(f"{what} cancelled")

    future = _get_executor().submit(_invoke, what, call, *args, **kwargs)
    while True:
        try:
            return future.result(timeout=POLL_INTERVAL)
        except concurrent.futures.TimeoutError:
            if event.is_set():
                # The worker cannot be interrupted; its result is dropped. It
                # stays busy until the call returns, so handles should bound
                # their requests (KubernetesConfig.request_timeout).
                future.cancel()
                logger.debug("fetch.cancelled", what=what)
                raise Cancelled(f"{what} cancelled") from None


def _invoke(what: str, call: Callable[..., T], *args: object, **kwargs: object) -> T:
    try:
        return call(*args, **kwargs)
    except ClusterFSError:
        raise
    except Exception as exc:
        logger.debug("fetch.failed", what=what, error=str(exc))
        raise RemoteFailure(f"{what} failed: {exc}") from exc
