"""
Client-side query policy for interactive catalog browsing.

Search-text changes are debounced before a query is issued. Every issued query
is tagged with a monotonic sequence number, and a response is only delivered
when its number is still the latest issued; slower, superseded responses are
dropped.

This is a helper for interactive clients (a UI search box or any async front
end) that sit on top of a CatalogStore; the HTTP API and the CLI issue one
query per request and do not need it.
"""
import asyncio
from typing import Callable, Optional

from storefront.core.config import get_config
from storefront.data.catalog_store import CatalogResult, CatalogStore
from storefront.data.filters import FilterSpec
from storefront.utils.logger import get_logger

logger = get_logger("data.live_search")


class RequestSequencer:
    """Hands out increasing request numbers and remembers the newest."""

    def __init__(self) -> None:
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_latest(self, seq: int) -> bool:
        return seq == self._latest


class LiveSearch:
    """
    Runs catalog queries for a presentation layer and calls ``on_results``
    with each response that is still current.

    Args:
        store: catalog store to query (its blocking calls run in a worker thread)
        on_results: callback receiving the CatalogResult to render
        debounce_seconds: quiet period before a search-text query is issued;
            defaults to ``search_debounce_ms`` from the config
    """

    def __init__(
        self,
        store: CatalogStore,
        on_results: Callable[[CatalogResult], None],
        debounce_seconds: Optional[float] = None,
    ) -> None:
        self.store = store
        self.on_results = on_results
        if debounce_seconds is None:
            debounce_seconds = get_config().search_debounce_ms / 1000
        self.debounce_seconds = debounce_seconds
        self.sequencer = RequestSequencer()
        self._pending: Optional[asyncio.Task] = None

    def search_text_changed(self, filters: FilterSpec) -> asyncio.Task:
        """Schedule a debounced query; a newer call replaces a pending one."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.ensure_future(self._debounced(filters))
        return self._pending

    async def _debounced(self, filters: FilterSpec) -> Optional[CatalogResult]:
        await asyncio.sleep(self.debounce_seconds)
        if self._pending is asyncio.current_task():
            self._pending = None
        return await self.query_now(filters)

    async def query_now(self, filters: FilterSpec) -> Optional[CatalogResult]:
        """Issue a query immediately. Returns None when the response went stale."""
        seq = self.sequencer.issue()
        result = await asyncio.to_thread(self.store.search_products, filters)
        if not self.sequencer.is_latest(seq):
            logger.debug("live_search: discarded stale response seq=%s latest=%s", seq, self.sequencer.latest)
            return None
        self.on_results(result)
        return result
