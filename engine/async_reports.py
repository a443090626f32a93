import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from engine.events import Snapshot, SnapshotFeed
from engine.services import ReportService

logger = logging.getLogger(__name__)


class ReportRefresher:
    """Recomputes reports for incoming snapshots, latest request wins.

    Each ``refresh`` waits ``debounce`` seconds; if another refresh arrived
    meanwhile the older one returns ``None`` without computing anything.
    """

    def __init__(self, service: Optional[ReportService] = None, debounce: float = 0.0):
        self.service = service or ReportService()
        self.debounce = debounce
        self.latest: Optional[Dict[str, Any]] = None
        self.error: Optional[BaseException] = None
        self.pending: List[asyncio.Task] = []
        self._generation = 0

    async def refresh(self, snapshot: Snapshot, month: str, trend_months: int = 6) -> Optional[Dict[str, Any]]:
        self._generation += 1
        generation = self._generation
        await asyncio.sleep(self.debounce)
        if generation != self._generation:
            logger.debug("dropping stale refresh of snapshot %d", snapshot.version)
            return None

        report = self.service.build_snapshot(snapshot, month, trend_months)
        self.latest = report
        self.error = None
        return report

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is None:
            return
        self.error = task.exception()
        logger.error("report refresh failed: %s", self.error)

    def attach(self, feed: SnapshotFeed, month: str, trend_months: int = 6) -> Callable[[], None]:
        """Schedule a refresh on the running loop for every snapshot the feed publishes.

        A failed refresh is logged and kept in ``error`` until a later one succeeds.
        """
        loop = asyncio.get_running_loop()

        def on_snapshot(snapshot: Snapshot) -> None:
            self.pending = [t for t in self.pending if not t.done()]
            task = loop.create_task(self.refresh(snapshot, month, trend_months))
            task.add_done_callback(self._on_done)
            self.pending.append(task)

        return feed.subscribe(on_snapshot)
