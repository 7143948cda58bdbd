"""
Layout Scheduler.

Mediates every call into the layout engine and the search index on a single
asyncio event loop:

- Layout requests are tagged with a monotonically increasing generation.
  A request runs on a later loop turn; when it finishes, its result is
  applied only if no newer request has been issued since. Superseded runs
  are not interrupted, their results are simply discarded.
- Search term changes are debounced. Each keystroke cancels the pending
  timer; an empty term clears the highlight immediately.

After a result is applied the search index is rebuilt and the highlight
manager adopts the new node set, so neither ever refers to stale nodes.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Sequence, Set, Tuple

from .config import SEARCH_DEBOUNCE_SECONDS
from .core.builder import GraphModelBuilder
from .core.types import GraphNode, JobRecord, LayoutOptions, LayoutResult
from .interaction.highlight import HighlightStateManager
from .layout.engine import LayoutEngine
from .search.index import SearchIndex

logger = logging.getLogger(__name__)


class LayoutScheduler:
    """
    Single owner of the current layout result and search index.

    Must be driven from within a running event loop.
    """

    def __init__(
        self,
        engine: Optional[LayoutEngine] = None,
        builder: Optional[GraphModelBuilder] = None,
        highlight: Optional[HighlightStateManager] = None,
        options: Optional[LayoutOptions] = None,
        debounce: float = SEARCH_DEBOUNCE_SECONDS,
    ):
        self.engine = engine or LayoutEngine()
        self.builder = builder or GraphModelBuilder()
        self.highlight = highlight or HighlightStateManager()
        self.options = options or LayoutOptions()
        self.debounce = debounce

        self._records: Tuple[JobRecord, ...] = ()
        self._request_key: Optional[Tuple[Any, ...]] = None
        self._generation = 0
        self._completed_generation = 0
        self._result: Optional[LayoutResult] = None
        self._index = SearchIndex()
        self._tasks: Set[asyncio.Task] = set()
        self._pending_search: Optional[asyncio.TimerHandle] = None
        self._listeners: List[Callable[[LayoutResult], None]] = []

    # --- State ---

    @property
    def generation(self) -> int:
        """Generation of the most recently issued layout request."""
        return self._generation

    @property
    def computing(self) -> bool:
        """True while the latest layout request has not completed."""
        return self._completed_generation < self._generation

    @property
    def searching(self) -> bool:
        """True while a debounced search is waiting to fire."""
        return self._pending_search is not None

    @property
    def result(self) -> Optional[LayoutResult]:
        return self._result

    @property
    def index(self) -> SearchIndex:
        return self._index

    def subscribe(self, listener: Callable[[LayoutResult], None]) -> None:
        """Register a callback for every applied layout result."""
        self._listeners.append(listener)

    # --- Layout ---

    def request_layout(
        self,
        records: Optional[Sequence[JobRecord]] = None,
        options: Optional[LayoutOptions] = None,
        force: bool = False,
    ) -> Optional[asyncio.Task]:
        """
        Schedule a layout for new records and/or options.

        Omitted arguments reuse the previous ones. A request equal to the
        last one (by record comparison keys and options) is skipped unless
        forced; after a failed run the next request always runs.

        Returns:
            Optional[asyncio.Task]: The scheduled run, or None when skipped.
        """
        records = tuple(records) if records is not None else self._records
        options = options or self.options

        key = (tuple(r.comparison_key() for r in records), options)
        if not force and key == self._request_key:
            logger.debug("Layout request unchanged, skipping")
            return None

        self._records = records
        self.options = options
        self._request_key = key
        self._generation += 1
        generation = self._generation

        loop = asyncio.get_running_loop()
        task = loop.create_task(self._run(generation, records, options))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug(f"Scheduled layout generation {generation} ({len(records)} jobs)")
        return task

    async def _run(
        self,
        generation: int,
        records: Tuple[JobRecord, ...],
        options: LayoutOptions,
    ) -> bool:
        try:
            model = self.builder.build(records)
            result = await self.engine.layout_async(model, options)
        except Exception:
            logger.exception(f"Layout generation {generation} failed")
            result = None
        return self.complete(generation, result)

    def complete(self, generation: int, result: Optional[LayoutResult]) -> bool:
        """
        Deliver the outcome of a layout run.

        Returns:
            bool: True if the result was applied, False if it was stale or
            missing.
        """
        if generation != self._generation:
            logger.debug(
                f"Discarding stale layout generation {generation} (latest is {self._generation})"
            )
            return False

        self._completed_generation = generation
        if result is None:
            # Only an applied result is a baseline for skipping repeats
            self._request_key = None
            return False

        self._result = result
        self._index = SearchIndex.build(result.nodes)
        self.highlight.set_nodes(result.node_ids)

        for listener in self._listeners:
            listener(result)
        return True

    def on_layout_options_changed(
        self,
        direction: Optional[str] = None,
        algorithm: Optional[str] = None,
        spacing: Optional[float] = None,
    ) -> Optional[asyncio.Task]:
        options = self.options.with_changes(
            direction=direction, algorithm=algorithm, spacing=spacing
        )
        return self.request_layout(options=options)

    async def wait_idle(self) -> None:
        """Wait until every scheduled layout run has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # --- Search ---

    def on_search_term_changed(self, text: str) -> None:
        """Debounce a raw search term; an empty term clears at once."""
        self._cancel_pending_search()
        if not text:
            self.highlight.clear_search()
            return

        loop = asyncio.get_running_loop()
        self._pending_search = loop.call_later(self.debounce, self._fire_search, text)

    def search_now(self, term: str) -> Optional[GraphNode]:
        """Resolve a term immediately and apply the highlight transition."""
        self._cancel_pending_search()
        if not term:
            self.highlight.empty_search_term()
            return None

        node = self._index.lookup(term)
        if node is None:
            logger.debug(f"No job matches '{term}'")
            self.highlight.search_no_match(term)
        else:
            self.highlight.search_matched(node.id)
        return node

    def _fire_search(self, term: str) -> None:
        self._pending_search = None
        self.search_now(term)

    def _cancel_pending_search(self) -> None:
        if self._pending_search is not None:
            self._pending_search.cancel()
            self._pending_search = None

    # --- Selection ---

    def on_node_selected(self, node_id: str) -> None:
        if self._result is None or self._result.get_node(node_id) is None:
            logger.debug(f"Ignoring selection of unknown node '{node_id}'")
            return
        self.highlight.node_selected(node_id)

    def on_edge_activated(self, edge_id: str) -> None:
        edge = self._result.get_edge(edge_id) if self._result else None
        if edge is None:
            logger.debug(f"Ignoring activation of unknown edge '{edge_id}'")
            return
        self.highlight.edge_activated(edge.id, (edge.source, edge.target))

    def on_background_activated(self) -> None:
        self.highlight.background_activated()

    def close(self) -> None:
        """Cancel any pending search timer."""
        self._cancel_pending_search()
