"""Mock child source used as the default lazy-expansion fetch."""

import asyncio
import random
from collections.abc import Awaitable, Callable, Sequence

from trellis.model.tree import Level, TreeNode

Fetch = Callable[[str, Level], Awaitable[Sequence[TreeNode]]]


def generate_mock_children(parent_id: str, level: Level, rng: random.Random | None = None) -> list[TreeNode]:
    """Two to four children one level below ``level``, ids ``{parent_id}-{i}``."""
    next_level = level.next()
    if next_level is None:
        return []
    count = (rng or random).randint(2, 4)
    return [
        TreeNode(
            id=f"{parent_id}-{i}",
            label=f"Level {next_level.value}",
            level=next_level,
            has_children=not next_level.is_terminal,
        )
        for i in range(count)
    ]


def mock_fetch(delay: float = 0.5, rng: random.Random | None = None) -> Fetch:
    """Build a fetch that sleeps ``delay`` seconds then returns mock children."""

    async def fetch(node_id: str, level: Level) -> list[TreeNode]:
        await asyncio.sleep(delay)
        return generate_mock_children(node_id, level, rng)

    return fetch
