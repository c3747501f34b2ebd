"""Fetch a complete price snapshot from the price API."""

from __future__ import annotations

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
import logging
import time
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from engine.models import CRAFTED_SLOTS, CraftedItemOption, PriceSnapshot, PriceTriple, Provenance
from utils.timefmt import now_utc

log = logging.getLogger(__name__)

MAX_WORKERS = 5


class FetchError(Exception):
    """One of the lookups failed; no snapshot was produced."""


def _lookups(items_cfg: Dict) -> List[Tuple[str, str, int]]:
    """Return ``(key, label, item_id)`` for the five lookups in snapshot order."""
    crafted = items_cfg.get("crafted", [])
    if len(crafted) != CRAFTED_SLOTS:
        raise FetchError(f"expected {CRAFTED_SLOTS} crafted items in config, got {len(crafted)}")
    out = [
        ("ingredient_a", items_cfg["ingredient_a"]["name"], int(items_cfg["ingredient_a"]["id"])),
        ("ingredient_b", items_cfg["ingredient_b"]["name"], int(items_cfg["ingredient_b"]["id"])),
    ]
    for i, entry in enumerate(crafted):
        out.append((f"item{i + 1}", entry["name"], int(entry["id"])))
    return out


def fetch_snapshot(
    client,
    items_cfg: Dict,
    now: Optional[datetime] = None,
) -> Tuple[PriceSnapshot, Provenance]:
    """
    Look up all five prices in parallel and build a fetched snapshot.

    The first failing lookup cancels the ones not yet started and is raised as
    :class:`FetchError`; partial results are dropped.
    """
    start = time.perf_counter()
    lookups = _lookups(items_cfg)

    pool = ThreadPoolExecutor(max_workers=MAX_WORKERS, thread_name_prefix="price-fetch")
    try:
        futures = {pool.submit(client.get_latest, item_id): (key, label) for key, label, item_id in lookups}
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)

        # report the failure of the earliest lookup in snapshot order
        for fut in futures:
            if fut in done and fut.exception() is not None:
                key, label = futures[fut]
                cause = fut.exception()
                log.warning("Price fetch failed at %s: %s", label, cause)
                raise FetchError(f"{label} fetch: {cause}") from cause

        prices: Dict[str, PriceTriple] = {futures[fut][0]: fut.result() for fut in futures}
    finally:
        # lookups still in flight finish in the background; their results are dropped
        pool.shutdown(wait=False, cancel_futures=True)

    snapshot = PriceSnapshot(
        ingredient_a=prices["ingredient_a"],
        ingredient_b=prices["ingredient_b"],
        items=[
            CraftedItemOption(name=label, item_id=item_id, price=prices[key])
            for key, label, item_id in lookups[2:]
        ],
    )
    fetched_at = now or now_utc()
    log.info("Fetched %d prices in %.2fs", len(lookups), time.perf_counter() - start)
    return snapshot, Provenance.fetched(fetched_at)
