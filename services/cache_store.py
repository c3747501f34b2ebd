"""JSON cache holding the last snapshot and its provenance."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from engine.models import PriceSnapshot, Provenance

log = logging.getLogger(__name__)


class CacheStatus(Enum):
    ABSENT = "absent"
    CORRUPT = "corrupt"
    OK = "ok"


@dataclass
class CachedState:
    snapshot: PriceSnapshot
    provenance: Provenance


@dataclass
class CacheLoad:
    status: CacheStatus
    state: Optional[CachedState] = None
    error: Optional[str] = None


class CacheStore:
    """Single-slot cache file. Saves replace the file atomically."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load_result(self) -> CacheLoad:
        """Load the cache and say whether it was absent, corrupt or usable."""
        if not self.path.exists():
            return CacheLoad(CacheStatus.ABSENT)
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            state = CachedState(
                snapshot=PriceSnapshot.from_dict(raw["snapshot"]),
                provenance=Provenance.from_dict(raw["provenance"]),
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            log.warning("Ignoring unreadable cache %s: %s", self.path, e)
            return CacheLoad(CacheStatus.CORRUPT, error=str(e))
        log.info("Loaded cache %s (mode=%s)", self.path, state.provenance.mode.value)
        return CacheLoad(CacheStatus.OK, state=state)

    def load(self) -> Optional[CachedState]:
        """Return the cached state, or None when there is no usable cache."""
        return self.load_result().state

    def save(self, snapshot: PriceSnapshot, provenance: Provenance) -> None:
        """Write the cache; on failure the previous file is left untouched."""
        payload = {"snapshot": snapshot.to_dict(), "provenance": provenance.to_dict()}
        data = json.dumps(payload, indent=2)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError:
            log.exception("Failed to save cache %s", self.path)
            tmp_path.unlink(missing_ok=True)
            raise
        log.info("Saved cache %s", self.path)
