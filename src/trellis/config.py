"""Runtime settings."""

from dataclasses import dataclass, field

from trellis.model.board import RESERVED_COLUMNS


@dataclass
class Settings:
    """Settings shared by the CLI and the TUI.

    fetch_timeout bounds every lazy child fetch; expiry counts as a fetch
    failure. fetch_delay is the simulated latency of the mock child source.
    """

    fetch_timeout: float = 10.0
    fetch_delay: float = 0.5
    reserved_columns: tuple[str, ...] = field(default=RESERVED_COLUMNS)
    board_file: str = "board.json"
    tree_file: str = "tree.json"

    @classmethod
    def from_args(cls, args) -> "Settings":
        """Build settings from parsed CLI args, keeping defaults for missing flags."""
        settings = cls()
        for name in ("fetch_timeout", "fetch_delay", "board_file", "tree_file"):
            value = getattr(args, name, None)
            if value is not None:
                setattr(settings, name, value)
        return settings
