"""Bounded on-disk blob cache for poster images.

One regular file per key under a single root directory, named by the sanitised key.
All mutations run on a single writer thread; reads go straight to disk and rely on
atomic replace so they never observe a partially written file.

Eviction is FIFO by creation time: reads never refresh an entry, and re-storing a key
counts as a fresh creation.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
import threading
import time
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Union

from moviecore.utils.text import safe_filename

_LOGGER = logging.getLogger(__name__)

# "~" never survives key sanitising, so no stored entry can carry this prefix.
_PARTIAL_PREFIX = "~partial-"

BuiltinEntries = Union[Mapping[str, bytes], Iterable[tuple[str, bytes]]]


class AssetCache:
    def __init__(
        self,
        root: Union[str, Path],
        max_entries: int = 500,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._root = Path(root)
        self._max_entries = max_entries
        self._clock = clock
        self._writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="asset-cache-writer")
        self._index_lock = threading.Lock()
        # filename -> creation timestamp, oldest first
        self._entries: OrderedDict[str, float] = OrderedDict()
        self._ensure_root()
        self._load_index()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        with self._index_lock:
            return len(self._entries)

    def keys(self) -> list[str]:
        """Sanitised keys currently tracked, oldest first."""

        with self._index_lock:
            return list(self._entries)

    def has(self, key: str) -> bool:
        try:
            return self._path_for(key).is_file()
        except OSError:
            _LOGGER.warning("Failed to stat cache entry %s", key, exc_info=True)
            return False

    def read(self, key: str) -> Optional[bytes]:
        try:
            return self._path_for(key).read_bytes()
        except FileNotFoundError:
            return None
        except OSError:
            _LOGGER.warning("Failed to read cache entry %s", key, exc_info=True)
            return None

    async def store(self, key: str, data: bytes) -> None:
        await self._submit(self._store_blocking, key, data)

    async def delete(self, key: str) -> None:
        await self._submit(self._delete_blocking, key)

    async def bootstrap(self, entries: BuiltinEntries) -> int:
        """Store each built-in entry that is not already present; returns the number written."""

        pairs = list(entries.items()) if isinstance(entries, Mapping) else list(entries)
        return await self._submit(self._bootstrap_blocking, pairs, default=0)

    def close(self) -> None:
        self._writer.shutdown(wait=True)

    async def _submit(self, func, *args, default=None):
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._writer, func, *args)
        except RuntimeError:
            # Raised by the executor once close() has run.
            _LOGGER.warning("Poster cache writer is closed; dropping %s", func.__name__)
            return default

    def _path_for(self, key: str) -> Path:
        return self._root / safe_filename(key)

    def _ensure_root(self) -> bool:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            return True
        except OSError:
            _LOGGER.warning("Failed to create cache directory %s", self._root, exc_info=True)
            return False

    def _load_index(self) -> None:
        found: list[tuple[float, str]] = []
        try:
            with os.scandir(self._root) as iterator:
                for entry in iterator:
                    if entry.name.startswith(_PARTIAL_PREFIX):
                        self._unlink_quietly(Path(entry.path))
                        continue
                    if not entry.is_file(follow_symlinks=False):
                        continue
                    stat = entry.stat(follow_symlinks=False)
                    created = getattr(stat, "st_birthtime", stat.st_mtime)
                    found.append((created, entry.name))
        except OSError:
            _LOGGER.warning("Failed to scan cache directory %s", self._root, exc_info=True)
            return

        found.sort()
        with self._index_lock:
            for created, name in found:
                self._entries[name] = created
        self._prune()

    def _store_blocking(self, key: str, data: bytes) -> None:
        if self._write_atomic(key, data):
            self._prune()

    def _bootstrap_blocking(self, pairs: list[tuple[str, bytes]]) -> int:
        written = 0
        for key, data in pairs:
            if self.has(key):
                continue
            if self._write_atomic(key, data):
                written += 1
        if written:
            self._prune()
        return written

    def _delete_blocking(self, key: str) -> None:
        name = safe_filename(key)
        if self._unlink_quietly(self._root / name):
            with self._index_lock:
                self._entries.pop(name, None)

    def _write_atomic(self, key: str, data: bytes) -> bool:
        if not self._ensure_root():
            return False
        name = safe_filename(key)
        target = self._root / name
        tmp_path: Optional[str] = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self._root, prefix=_PARTIAL_PREFIX)
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, target)
            tmp_path = None
        except OSError:
            _LOGGER.warning("Failed to write cache entry %s", key, exc_info=True)
            return False
        finally:
            if tmp_path is not None:
                self._unlink_quietly(Path(tmp_path))

        with self._index_lock:
            self._entries.pop(name, None)
            self._entries[name] = self._clock()
        return True

    def _prune(self) -> None:
        with self._index_lock:
            overflow = len(self._entries) - self._max_entries
            if overflow <= 0:
                return
            victims = list(self._entries)[:overflow]

        for name in victims:
            if self._unlink_quietly(self._root / name):
                with self._index_lock:
                    self._entries.pop(name, None)
        _LOGGER.debug("Evicted %d poster cache entries", len(victims))

    @staticmethod
    def _unlink_quietly(path: Path) -> bool:
        try:
            path.unlink(missing_ok=True)
            return True
        except OSError:
            _LOGGER.warning("Failed to delete cache entry %s", path, exc_info=True)
            return False
