"""
Application state for the dashboards.

``AppSession`` owns the current snapshot and its provenance and is the only
place that changes them. Hand edits and fetch results go through it so that a
fetch finishing after an edit cannot overwrite that edit.
"""

from __future__ import annotations

import copy
import logging
import threading
from datetime import datetime
from typing import Callable, Optional, Tuple

from engine.models import PriceSnapshot, Provenance
from engine.overrides import FieldPath, apply_field, parse_field_path
from engine.report import Report, compute_report
from services.cache_store import CacheLoad, CacheStatus, CacheStore
from utils.gp import parse_non_negative_gp

log = logging.getLogger(__name__)

Fetcher = Callable[[], Tuple[PriceSnapshot, Provenance]]


class AppSession:
    """Current prices, their provenance and the cache they persist to."""

    def __init__(
        self,
        cache_store: CacheStore,
        snapshot: Optional[PriceSnapshot] = None,
        provenance: Optional[Provenance] = None,
    ):
        self.cache_store = cache_store
        self.snapshot = snapshot or PriceSnapshot.default()
        self.provenance = provenance or Provenance()
        self._lock = threading.Lock()
        # bumped on every hand edit; a fetch started before an edit is dropped
        self._revision = 0

    @property
    def revision(self) -> int:
        return self._revision

    def report(self, now: Optional[datetime] = None) -> Report:
        with self._lock:
            return compute_report(self.snapshot, self.provenance, now=now)

    def apply_edit(self, field: str, text: str) -> FieldPath:
        """
        Parse ``text`` as GP and set ``field``.

        Raises:
            InvalidFormat: text is not a non-negative GP amount
            UnknownField: field does not name a price
        """
        path = parse_field_path(field)
        value = parse_non_negative_gp(text)
        with self._lock:
            apply_field(self.snapshot, path, value)
            self.provenance = self.provenance.as_manual()
            self._revision += 1
        log.info("Manual override %s = %d", path, value)
        return path

    def set_manual(self, snapshot: PriceSnapshot) -> None:
        """Replace all prices with hand-entered ones."""
        with self._lock:
            self.snapshot = snapshot
            self.provenance = Provenance()
            self._revision += 1

    def begin_fetch(self) -> int:
        """Return the token to pass to :meth:`complete_fetch`."""
        with self._lock:
            return self._revision

    def complete_fetch(self, token: int, snapshot: PriceSnapshot, provenance: Provenance) -> bool:
        """
        Apply and persist a fetch result.

        Returns False, leaving state unchanged, when a hand edit happened after
        :meth:`begin_fetch` returned ``token``.
        """
        with self._lock:
            if token != self._revision:
                log.info("Discarding fetch result: prices were edited while it ran")
                return False
            self.snapshot = snapshot
            self.provenance = provenance
            try:
                self._save_locked()
            except OSError as e:
                # prices stay applied; the next save retries the write
                log.warning("Fetched prices applied but not cached: %s", e)
        return True

    def fetch(self, fetcher: Fetcher) -> bool:
        """Run ``fetcher`` in the calling thread and apply its result."""
        token = self.begin_fetch()
        snapshot, provenance = fetcher()
        return self.complete_fetch(token, snapshot, provenance)

    def load_cache(self) -> CacheLoad:
        result = self.cache_store.load_result()
        if result.status is CacheStatus.OK:
            with self._lock:
                self.snapshot = result.state.snapshot
                self.provenance = result.state.provenance
                self._revision += 1
        return result

    def save_cache(self) -> None:
        with self._lock:
            self._save_locked()

    def _save_locked(self) -> None:
        self.cache_store.save(self.snapshot, self.provenance)

    def copy_snapshot(self) -> PriceSnapshot:
        with self._lock:
            return copy.deepcopy(self.snapshot)
