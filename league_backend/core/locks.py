import threading
from contextlib import contextmanager

_registry_lock = threading.Lock()
_league_locks = {}


def get_league_lock(league_code: str) -> threading.Lock:
    with _registry_lock:
        lock = _league_locks.get(league_code)
        if lock is None:
            lock = threading.Lock()
            _league_locks[league_code] = lock
        return lock


@contextmanager
def league_lock(league_code: str):
    """Serialize standings writes for one league within this process."""
    lock = get_league_lock(league_code)
    with lock:
        yield
