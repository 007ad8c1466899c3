"""Textual UI for trellis."""

from trellis.ui.app import TrellisApp

__all__ = ["TrellisApp"]
