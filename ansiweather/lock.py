# ~/ansiweather/ansiweather/lock.py
# Advisory lock on a sidecar file. Readers share, writers are exclusive.
import enum
import errno
import fcntl
import logging
import os
import time
from contextlib import contextmanager

from .errors import LockError, LockTimeout

log = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


class Mode(enum.Enum):
    SHARED = fcntl.LOCK_SH
    EXCLUSIVE = fcntl.LOCK_EX


class LockHandle:
    def __init__(self, fd, mode):
        self.fd = fd
        self.mode = mode


class FileLock:
    """flock() on `path`. The file's contents are never looked at."""

    def __init__(self, path, timeout=None):
        self.path = str(path)
        self.timeout = timeout

    def acquire(self, mode):
        try:
            fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o600)
        except OSError as e:
            raise LockError(f"cannot open lock file {self.path}: {e}") from e

        try:
            self._lock(fd, mode)
        except BaseException:
            os.close(fd)
            raise
        log.debug("acquired %s lock on %s", mode.name.lower(), self.path)
        return LockHandle(fd, mode)

    def _lock(self, fd, mode):
        if self.timeout is None:
            try:
                fcntl.flock(fd, mode.value)
            except OSError as e:
                raise LockError(f"cannot lock {self.path}: {e}") from e
            return

        deadline = time.monotonic() + self.timeout
        while True:
            try:
                fcntl.flock(fd, mode.value | fcntl.LOCK_NB)
                return
            except OSError as e:
                if e.errno not in (errno.EAGAIN, errno.EACCES, errno.EWOULDBLOCK):
                    raise LockError(f"cannot lock {self.path}: {e}") from e
            if time.monotonic() >= deadline:
                raise LockTimeout(
                    f"gave up waiting {self.timeout:g}s for {mode.name.lower()} lock on {self.path}"
                )
            time.sleep(POLL_INTERVAL)

    def release(self, handle):
        try:
            fcntl.flock(handle.fd, fcntl.LOCK_UN)
        finally:
            os.close(handle.fd)

    @contextmanager
    def held(self, mode):
        handle = self.acquire(mode)
        try:
            yield handle
        finally:
            self.release(handle)
