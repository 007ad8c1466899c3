"""Lazy child loading for tree nodes.

Per node: collapsed → loading → expanded on the first expand of a node
whose children were never fetched, collapsed ⇄ expanded otherwise. The
fetch runs as an asyncio task. Its result lands in whatever tree the
store holds when it resolves, after any children added meanwhile, or is
dropped if the node is gone.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from trellis.fetch import Fetch
from trellis.model.tree import (
    Level,
    Tree,
    append_children,
    children_of,
    find_node_by_id,
    update_node,
)

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, BaseException], None]


class TreeStore(Protocol):
    tree: Tree

    def commit(self, tree: Tree) -> bool: ...


class ExpansionCoordinator:
    """Toggles expansion and owns the in-flight child fetches."""

    def __init__(
        self,
        store: TreeStore,
        fetch: Fetch,
        timeout: float | None = 10.0,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._store = store
        self._fetch = fetch
        self.timeout = timeout
        self.on_error = on_error
        self._inflight: dict[str, asyncio.Task] = {}

    def is_loading(self, node_id: str) -> bool:
        return node_id in self._inflight

    def toggle(self, node_id: str) -> asyncio.Task | None:
        """Toggle a node, starting a fetch if its children were never loaded.

        Returns the fetch task when one is in flight for the node, else None.
        Must be called from a running event loop when a fetch may start.
        """
        tree = self._store.tree
        node = find_node_by_id(tree, node_id)
        if node is None:
            return None

        if node_id in self._inflight or node.is_loading:
            logger.debug("ignoring toggle of %s while loading", node_id)
            return self._inflight.get(node_id)

        if node.is_expanded:
            self._store.commit(update_node(tree, node_id, is_expanded=False))
            return None

        if node.has_children and not children_of(tree, node_id):
            self._store.commit(update_node(tree, node_id, is_loading=True))
            task = asyncio.get_running_loop().create_task(self._load(node_id, node.level))
            self._inflight[node_id] = task
            return task

        self._store.commit(update_node(tree, node_id, is_expanded=True))
        return None

    def _owns(self, node_id: str, task: asyncio.Task | None) -> bool:
        return task is not None and self._inflight.get(node_id) is task

    async def _load(self, node_id: str, level: Level) -> None:
        task = asyncio.current_task()
        logger.debug("fetching children of %s (level %s)", node_id, level.value)
        try:
            kids = await asyncio.wait_for(self._fetch(node_id, level), self.timeout)
        except asyncio.CancelledError:
            if self._owns(node_id, task):
                self._settle(node_id)
            raise
        except Exception as exc:
            if not self._owns(node_id, task):
                return
            logger.warning("fetching children of %s failed: %r", node_id, exc)
            self._settle(node_id)
            if self.on_error is not None:
                self.on_error(node_id, exc)
            return
        finally:
            if self._owns(node_id, task):
                del self._inflight[node_id]
                owned = True
            else:
                owned = False

        if not owned:
            logger.debug("dropping stale children for %s", node_id)
            return
        tree = self._store.tree
        if find_node_by_id(tree, node_id) is None:
            logger.info("discarding children fetched for removed node %s", node_id)
            return
        self._store.commit(append_children(tree, node_id, kids, is_expanded=True, is_loading=False))

    def _settle(self, node_id: str) -> None:
        """Clear the loading flag without touching expansion."""
        tree = self._store.tree
        node = find_node_by_id(tree, node_id)
        if node is not None and node.is_loading:
            self._store.commit(update_node(tree, node_id, is_loading=False))

    async def wait(self) -> None:
        """Wait for every in-flight fetch to settle."""
        while self._inflight:
            await asyncio.gather(*self._inflight.values(), return_exceptions=True)

    def cancel_all(self) -> None:
        """Cancel in-flight fetches; their results will never be applied."""
        cancelled = list(self._inflight.items())
        self._inflight.clear()
        for node_id, task in cancelled:
            logger.debug("cancelling fetch for %s", node_id)
            task.cancel()
            self._settle(node_id)
