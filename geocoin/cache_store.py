"""Snapshot-backed store of cache state per cell.

The CacheStore is the durable source of truth for caches. For every cell it
has seen it holds either the snapshot text of the cell's cache or a record
that the cell has no cache. Geocache objects handed out by ``get`` are
transient views: mutate them, then call ``save`` to make the change stick.

Each cell is materialized at most once. The first ``get`` runs the spawn
decision and stores the outcome; later calls restore from the stored
snapshot and never consult the generator again.
"""

from __future__ import annotations

import json

from geocoin.discrete_space import Cell
from geocoin.exceptions import CorruptSnapshotError, NoCacheError
from geocoin.geocache import CacheGenerator, Geocache, from_memento, to_memento
from geocoin.geocoin_logging import create_module_logger
from geocoin.storage import KeyValueStore, MemoryStore

__all__ = ["CacheStore"]

_geocoin_logger = create_module_logger()


class CacheStore:
    """Memento store of caches keyed by ``"i,j"``.

    Attributes:
        generator (CacheGenerator): decides spawns and initial coins
        storage (KeyValueStore): where the snapshot table is persisted
        storage_key (str): the storage key holding the snapshot table

    Notes:
        ``get``, mutate, ``save`` is a read-modify-write on one cell key.
        The store assumes a single thread of control.

    """

    def __init__(
        self,
        generator: CacheGenerator,
        storage: KeyValueStore | None = None,
        storage_key: str = "cacheData",
    ) -> None:
        """Create a store and load any persisted snapshots.

        Args:
            generator: the content generator for cells seen for the first time
            storage: durable key-value store, defaults to an in-memory one
            storage_key: key under which the snapshot table is persisted
        """
        self.generator = generator
        self.storage = storage if storage is not None else MemoryStore()
        self.storage_key = storage_key
        self._snapshots: dict[str, str | None] = {}
        # entries that are neither text nor null, kept verbatim until overwritten
        self._malformed: dict[str, object] = {}
        self.load()

    def load(self) -> None:
        """Replace the in-memory table with the persisted one."""
        self._snapshots = {}
        self._malformed = {}
        raw = self.storage.get(self.storage_key)
        if raw is None:
            return
        try:
            table = json.loads(raw)
        except ValueError as e:
            _geocoin_logger.warning(f"discarding unreadable cache table: {e}")
            return
        if not isinstance(table, dict):
            _geocoin_logger.warning("discarding cache table that is not an object")
            return

        for key, snapshot in table.items():
            if snapshot is None or isinstance(snapshot, str):
                self._snapshots[key] = snapshot
            else:
                _geocoin_logger.warning(f"snapshot for cell {key} is not text")
                self._malformed[key] = snapshot
        _geocoin_logger.debug(f"loaded {len(self)} cache snapshots")

    def flush(self) -> None:
        """Persist the whole snapshot table."""
        table = {**self._malformed, **self._snapshots}
        self.storage.set(self.storage_key, json.dumps(table))

    def get(self, cell: Cell) -> Geocache:
        """Return a live cache for the cell.

        Args:
            cell: the cell to look up

        Returns:
            Geocache: restored from the stored snapshot, or freshly generated
            and stored if the cell has never been visited

        Raises:
            NoCacheError: if the cell has no cache, or its snapshot is corrupt

        """
        key = cell.key
        if cell not in self:
            cache = self.generator.create_cache(cell)
            if cache is None:
                self._snapshots[key] = None
                raise NoCacheError(cell)
            _geocoin_logger.debug(f"spawned cache {key} with {len(cache.coins)} coins")
            self.save(cache)
            return cache

        try:
            cache = self.restore(cell)
        except CorruptSnapshotError as e:
            _geocoin_logger.warning(e.original_message)
            raise NoCacheError(cell) from e
        if cache is None:
            raise NoCacheError(cell)
        return cache

    def find(self, cell: Cell) -> Geocache | None:
        """Like ``get``, but return None where ``get`` raises NoCacheError."""
        try:
            return self.get(cell)
        except NoCacheError:
            return None

    def save(self, cache: Geocache) -> None:
        """Overwrite the snapshot of the cache's cell and persist the table."""
        self._malformed.pop(cache.key, None)
        self._snapshots[cache.key] = to_memento(cache)
        self.flush()

    def snapshot(self, cell: Cell) -> str | None:
        """Return the stored snapshot text of the cell, if any."""
        return self._snapshots.get(cell.key)

    def restore(self, cell: Cell) -> Geocache | None:
        """Rebuild a cache from the cell's stored snapshot.

        Returns None if no snapshot is stored for the cell.

        Raises:
            CorruptSnapshotError: if the stored snapshot does not decode

        """
        if cell.key in self._malformed:
            raise CorruptSnapshotError(cell.key, "snapshot is not text")
        memento = self._snapshots.get(cell.key)
        if memento is None:
            return None
        return from_memento(memento, key=cell.key)

    def reset(self) -> None:
        """Forget every cache and remove the persisted table."""
        self._snapshots.clear()
        self._malformed.clear()
        self.storage.remove(self.storage_key)

    def __contains__(self, cell: Cell) -> bool:
        """Return whether the spawn decision for the cell has been made."""
        return cell.key in self._snapshots or cell.key in self._malformed

    def __len__(self) -> int:  # noqa: D105
        return len(self._snapshots) + len(self._malformed)
