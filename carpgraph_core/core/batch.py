from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
from typing import Iterable

from .errors import CarpGraphError
from .graph import STRICT, DecodePolicy, decode

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchResult:
    index: int
    svg: str | None
    error: CarpGraphError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def render_many(
    buffers: Iterable[bytes],
    *,
    policy: DecodePolicy = STRICT,
    background: str = "white",
    max_workers: int | None = None,
) -> list[BatchResult]:
    """Decode and render independent buffers concurrently, preserving input order."""
    items = list(buffers)
    if not items:
        return []
    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="carpgraph-render") as pool:
        futures = [
            pool.submit(_render_one, index, buffer, policy, background)
            for index, buffer in enumerate(items)
        ]
        results = [future.result() for future in futures]
    failed = sum(1 for result in results if not result.ok)
    if failed:
        LOGGER.warning("batch render finished with failures; failed=%d total=%d", failed, len(results))
    return results


def _render_one(index: int, buffer: bytes, policy: DecodePolicy, background: str) -> BatchResult:
    try:
        graph = decode(buffer, policy=policy)
    except CarpGraphError as exc:
        LOGGER.debug("batch item %d failed to decode: %s", index, exc)
        return BatchResult(index=index, svg=None, error=exc)
    return BatchResult(index=index, svg=graph.to_svg(background=background))
