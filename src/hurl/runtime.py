"""Process-wide transport subsystem.

Every :class:`~hurl.handle.TransferHandle` draws its transport from one
shared :class:`TransportRuntime`. The runtime is initialised lazily by the
first handle, exactly once per process, and torn down once at interpreter
exit (or by an explicit :func:`global_cleanup` after the last handle is
closed).

The runtime owns:

* the default TLS context, built once because loading the CA bundle is
  the expensive part of creating a client;
* the transport factory, which tests and advanced callers replace with
  :func:`set_transport_factory` (e.g. an :class:`httpx.MockTransport` or a
  proxy-aware transport).
"""

from __future__ import annotations

import atexit
import ssl
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

from hurl.exceptions import HurlError
from hurl.output import debug

TransportFactory = Callable[[], httpx.BaseTransport]


@dataclass
class TransportRuntime:
    """Shared state created by :func:`global_init`."""

    ssl_context: Optional[ssl.SSLContext]
    verify: bool = True
    live_handles: int = field(default=0)

    def make_transport(self) -> httpx.BaseTransport:
        """Build a transport for one new handle."""
        if _transport_factory is not None:
            return _transport_factory()
        if not self.verify:
            return httpx.HTTPTransport(verify=False)
        return httpx.HTTPTransport(verify=self.ssl_context)


_lock = threading.Lock()
_runtime: Optional[TransportRuntime] = None
_transport_factory: Optional[TransportFactory] = None
_init_count = 0
_atexit_registered = False


def global_init() -> TransportRuntime:
    """Initialise the transport subsystem if it is not running yet.

    Safe to call any number of times from any thread; the initialisation
    itself runs once.

    Returns:
        The shared :class:`TransportRuntime`.
    """
    global _runtime, _init_count, _atexit_registered
    with _lock:
        if _runtime is None:
            from hurl.config import get_settings

            verify = get_settings().verify_ssl
            context = ssl.create_default_context() if verify else None
            _runtime = TransportRuntime(ssl_context=context, verify=verify)
            _init_count += 1
            if not _atexit_registered:
                atexit.register(_cleanup_at_exit)
                _atexit_registered = True
            debug("transport runtime initialised")
        return _runtime


def global_cleanup() -> None:
    """Tear the transport subsystem down.

    Does nothing if it was never initialised.

    Raises:
        HurlError: If transfer handles are still open.
    """
    global _runtime
    with _lock:
        if _runtime is None:
            return
        if _runtime.live_handles:
            raise HurlError(
                f"Cannot clean up transport runtime: {_runtime.live_handles} handle(s) still open"
            )
        _runtime = None
        debug("transport runtime cleaned up")


def _cleanup_at_exit() -> None:
    global _runtime
    with _lock:
        _runtime = None


def acquire() -> TransportRuntime:
    """Register a new handle with the runtime, initialising it if needed."""
    runtime = global_init()
    with _lock:
        runtime.live_handles += 1
    return runtime


def release() -> None:
    """Unregister a handle previously registered with :func:`acquire`."""
    with _lock:
        if _runtime is not None and _runtime.live_handles > 0:
            _runtime.live_handles -= 1


def is_initialised() -> bool:
    """Whether the runtime is currently up."""
    return _runtime is not None


def init_count() -> int:
    """How many times the runtime has been initialised in this process."""
    return _init_count


def live_handles() -> int:
    """Number of handles currently registered."""
    return _runtime.live_handles if _runtime is not None else 0


def set_transport_factory(factory: Optional[TransportFactory]) -> None:
    """Install a factory that builds the transport for every new handle.

    Args:
        factory: Zero-argument callable returning an
            :class:`httpx.BaseTransport`, or ``None`` to restore the
            default HTTP(S) transport.
    """
    global _transport_factory
    _transport_factory = factory


def reset_runtime() -> None:
    """Drop all runtime state, including the init counter and factory (tests)."""
    global _runtime, _transport_factory, _init_count
    with _lock:
        _runtime = None
        _transport_factory = None
        _init_count = 0
