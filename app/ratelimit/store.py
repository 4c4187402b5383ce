import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

DEFAULT_SUSPICIOUS_THRESHOLD = 50


@dataclass(frozen=True)
class WindowCounter:
    count: int
    reset_at: float


class BaseRateLimitStore(ABC):
    """Counter storage for RateLimiter.

    ``increment`` must be atomic for a key. A shared cache backend can
    implement it with an atomic increment plus expiry.
    """

    @abstractmethod
    def increment(self, key: str, window_seconds: float, now: float) -> WindowCounter:
        """Count one hit for ``key``, opening a new window if the current one ended."""
        raise NotImplementedError

    @abstractmethod
    def purge_expired(self, now: float) -> int:
        raise NotImplementedError

    @abstractmethod
    def block_ip(self, ip: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def unblock_ip(self, ip: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def is_blocked(self, ip: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def record_suspicious_activity(
        self, ip: str, threshold: int = DEFAULT_SUSPICIOUS_THRESHOLD
    ) -> bool:
        """Count one suspicious event; block the IP and return True at ``threshold``."""
        raise NotImplementedError


class InMemoryRateLimitStore(BaseRateLimitStore):
    """Process-local store.

    Counters live in this process only, so several worker or web processes
    each enforce their own limit. Deployments with more than one instance
    need a shared store.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._windows: dict[str, WindowCounter] = {}
        self._blocked: set[str] = set()
        self._suspicious: dict[str, int] = {}

    def increment(self, key: str, window_seconds: float, now: float) -> WindowCounter:
        with self._lock:
            current = self._windows.get(key)
            if current is None or current.reset_at <= now:
                current = WindowCounter(count=1, reset_at=now + window_seconds)
            else:
                current = WindowCounter(count=current.count + 1, reset_at=current.reset_at)
            self._windows[key] = current
            return current

    def purge_expired(self, now: float) -> int:
        with self._lock:
            expired = [k for k, w in self._windows.items() if w.reset_at <= now]
            for key in expired:
                del self._windows[key]
            return len(expired)

    def block_ip(self, ip: str) -> None:
        with self._lock:
            self._blocked.add(ip)

    def unblock_ip(self, ip: str) -> None:
        with self._lock:
            self._blocked.discard(ip)

    def is_blocked(self, ip: str) -> bool:
        with self._lock:
            return ip in self._blocked

    def record_suspicious_activity(
        self, ip: str, threshold: int = DEFAULT_SUSPICIOUS_THRESHOLD
    ) -> bool:
        with self._lock:
            count = self._suspicious.get(ip, 0) + 1
            self._suspicious[ip] = count
            if count >= threshold:
                self._blocked.add(ip)
                return True
            return False

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)
