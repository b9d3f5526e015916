"""
Connectivity monitors: tell the offline manager when the network comes and goes.

A monitor calls on_available / on_lost from whatever thread notices the change.
"""
import itertools
import logging
import socket
import threading
from typing import Callable, Protocol

from cheapeats.core.cache_config import CONNECTIVITY_POLL_SECONDS

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class ConnectivityMonitor(Protocol):
    def register(self, on_available: Callback, on_lost: Callback) -> int:
        ...

    def unregister(self, token: int) -> None:
        ...

    def has_internet(self) -> bool:
        ...

    def is_unmetered(self) -> bool:
        ...


class _CallbackRegistry:
    """Token -> (on_available, on_lost). Shared by the monitors below."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._callbacks: dict[int, tuple[Callback, Callback]] = {}
        self._tokens = itertools.count(1)

    def register(self, on_available: Callback, on_lost: Callback) -> int:
        with self._lock:
            token = next(self._tokens)
            self._callbacks[token] = (on_available, on_lost)
        return token

    def unregister(self, token: int) -> None:
        with self._lock:
            self._callbacks.pop(token, None)

    @property
    def registration_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def notify(self, available: bool) -> None:
        with self._lock:
            callbacks = list(self._callbacks.values())
        for on_available, on_lost in callbacks:
            try:
                (on_available if available else on_lost)()
            except Exception as e:
                logger.warning("Connectivity callback failed: %s", e, exc_info=True)


class StaticConnectivityMonitor(_CallbackRegistry):
    """Connectivity set by hand. Used in tests and when the host has no way to probe."""

    def __init__(self, online: bool = True, unmetered: bool = True) -> None:
        super().__init__()
        self._online = online
        self._unmetered = unmetered

    def has_internet(self) -> bool:
        return self._online

    def is_unmetered(self) -> bool:
        return self._unmetered

    def set_unmetered(self, unmetered: bool) -> None:
        self._unmetered = unmetered

    def set_online(self, online: bool) -> None:
        """Flip state and fire callbacks on this thread."""
        changed = online != self._online
        self._online = online
        if changed:
            self.notify(online)


class SocketConnectivityMonitor(_CallbackRegistry):
    """
    Polls a TCP connect to host:port on a daemon thread every poll_seconds.
    Servers cannot see the transport type, so is_unmetered() is a setting.
    """

    def __init__(
        self,
        host: str,
        port: int,
        *,
        unmetered: bool = True,
        poll_seconds: float = CONNECTIVITY_POLL_SECONDS,
        timeout: float = 3.0,
    ) -> None:
        super().__init__()
        self._host = host
        self._port = port
        self._unmetered = unmetered
        self._poll_seconds = poll_seconds
        self._timeout = timeout
        self._online: bool | None = None
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def _probe(self) -> bool:
        try:
            with socket.create_connection((self._host, self._port), timeout=self._timeout):
                return True
        except OSError:
            return False

    def has_internet(self) -> bool:
        if self._online is None:
            self._online = self._probe()
        return self._online

    def is_unmetered(self) -> bool:
        return self._unmetered

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="connectivity_monitor", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=self._timeout + 1)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.is_set():
            online = self._probe()
            previous = self._online
            self._online = online
            if previous is not None and online != previous:
                logger.info("Connectivity changed: %s", "online" if online else "offline")
                self.notify(online)
            self._stop.wait(self._poll_seconds)
