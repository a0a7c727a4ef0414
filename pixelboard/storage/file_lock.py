import fcntl
import time
from typing import IO


class FileLock:
    """Exclusive ``flock`` on a sidecar file, polled until ``timeout`` seconds.

    The lock file is left in place on release; unlinking it would let a
    waiter lock an orphaned inode while a newcomer locks a fresh one.
    """

    def __init__(self, lock_file_path: str, timeout: float = 10, delay: float = 0.05):
        self.lock_file_path = lock_file_path
        self.timeout = timeout
        self.delay = delay
        self.is_locked = False
        self._lock_file: IO[str] | None = None

    def __enter__(self) -> "FileLock":
        start_time = time.monotonic()
        self._lock_file = open(self.lock_file_path, "a")
        while True:
            try:
                fcntl.flock(self._lock_file, fcntl.LOCK_EX | fcntl.LOCK_NB)
                self.is_locked = True
                return self
            except BlockingIOError:
                if time.monotonic() - start_time >= self.timeout:
                    self._lock_file.close()
                    self._lock_file = None
                    raise TimeoutError(f"Timeout occurred while waiting for lock on {self.lock_file_path}")
                time.sleep(self.delay)

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._lock_file is None:
            return
        if self.is_locked:
            fcntl.flock(self._lock_file, fcntl.LOCK_UN)
            self.is_locked = False
        self._lock_file.close()
        self._lock_file = None
