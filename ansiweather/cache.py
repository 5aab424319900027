# ~/ansiweather/ansiweather/cache.py
"""
On-disk cache of the last good API response.

The cache is one file holding the raw response body; its mtime is the only
metadata. A sibling .lock file carries the advisory lock: each read takes it
shared, each write takes it exclusive, and neither is held any longer than
that single operation.
"""
import logging
import os
from collections import namedtuple
from pathlib import Path

from .errors import StorageError
from .lock import FileLock, Mode

log = logging.getLogger(__name__)

CACHE_DIR = Path(os.path.expanduser("~/.cache/ansiweather"))
CACHE_NAME = "conditions.json"

CacheMetadata = namedtuple("CacheMetadata", ["exists", "mtime"])


class CacheStore:
    def __init__(self, path=None, lock=None, lock_timeout=None):
        self.path = Path(path) if path else CACHE_DIR / CACHE_NAME
        self.lock_path = self.path.with_suffix(".lock")
        self.lock = lock if lock is not None else FileLock(self.lock_path, timeout=lock_timeout)

    def stat(self):
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            return CacheMetadata(False, None)
        except OSError as e:
            raise StorageError(f"cannot stat {self.path}: {e}") from e
        return CacheMetadata(True, st.st_mtime)

    def read(self):
        self._ensure_dir()
        with self.lock.held(Mode.SHARED):
            try:
                with open(self.path, "rb") as f:
                    return f.read()
            except FileNotFoundError as e:
                # removed between stat() and here
                raise StorageError(f"{self.path} disappeared before it could be read") from e
            except OSError as e:
                raise StorageError(f"cannot read {self.path}: {e}") from e

    def write(self, body):
        self._ensure_dir()
        with self.lock.held(Mode.EXCLUSIVE):
            tmp = str(self.path) + ".tmp"
            try:
                fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
                with os.fdopen(fd, "wb") as f:
                    f.write(body)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp, self.path)
            except OSError as e:
                try:
                    os.unlink(tmp)
                except OSError:
                    pass
                raise StorageError(f"cannot write {self.path}: {e}") from e
        log.debug("wrote %d bytes to %s", len(body), self.path)

    def _ensure_dir(self):
        try:
            self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"cannot create {self.path.parent}: {e}") from e
