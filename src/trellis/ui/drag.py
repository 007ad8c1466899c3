"""Drag-and-drop plumbing between Textual widgets and drag controllers.

- DraggableMixin: on dragged widgets, tells a click from the start of a drag
- DropTarget: on widgets under the pointer, turns hovers and releases into
  controller calls
- DragManager: held by the screen, owns the controller and the ghost for
  the one gesture in progress
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from textual.errors import NoWidget
from textual.geometry import Offset
from textual.widgets import Static

from trellis.drag import DragReorderController
from trellis.errors import Rejected

if TYPE_CHECKING:
    from textual.screen import Screen
    from textual.widget import Widget

logger = logging.getLogger(__name__)


class DropTarget:
    """Mixin for widgets that react to a drag passing over them."""

    def drag_over(self, controller: DragReorderController, x: int, y: int) -> bool:
        """Pointer moved over this widget. Return True to consume."""
        return False

    def try_drop(self, controller: DragReorderController, handled: bool) -> bool:
        """Pointer released over this widget. Return True if the drop was taken here."""
        return False


class DraggableMixin:
    """Mixin for widgets that can be picked up.

    Subclasses set drag_item_id and drag_label, and implement
    draggable_clicked() for click-without-drag behavior.
    """

    DRAG_THRESHOLD = 2

    drag_item_id: str
    drag_label: str

    def _init_draggable(self) -> None:
        self._drag_start_pos: Offset | None = None

    def on_mouse_down(self, event) -> None:
        if event.button != 1:
            return
        event.stop()
        self._drag_start_pos = Offset(event.screen_x, event.screen_y)
        self.capture_mouse()

    def on_mouse_move(self, event) -> None:
        if self._drag_start_pos is None:
            return
        event.stop()
        dx = abs(event.screen_x - self._drag_start_pos.x)
        dy = abs(event.screen_y - self._drag_start_pos.y)
        if dx > self.DRAG_THRESHOLD or dy > self.DRAG_THRESHOLD:
            self.release_mouse()
            start = self._drag_start_pos
            self._drag_start_pos = None
            self.screen.drag.start(self, start)

    def on_mouse_up(self, event) -> None:
        if self._drag_start_pos is None:
            return
        event.stop()
        self.release_mouse()
        self._drag_start_pos = None
        self.draggable_clicked()

    def draggable_clicked(self) -> None:
        """Called when mouse released without dragging. Override for click behavior."""


class DragGhost(Static):
    """Floating overlay following the pointer."""

    DEFAULT_CSS = """
    DragGhost {
        layer: overlay;
        height: auto;
        padding: 0 1;
        background: $primary;
    }
    """


class DragManager:
    """Runs one drag gesture at a time for a screen."""

    def __init__(self, screen: Screen, pick_up: Callable[[str], DragReorderController | None]):
        self.screen = screen
        self._pick_up = pick_up
        self.controller: DragReorderController | None = None
        self.ghost: DragGhost | None = None
        self.drag_offset = Offset(0, 0)

    @property
    def active(self) -> bool:
        return self.controller is not None and self.controller.active

    @property
    def item_id(self) -> str | None:
        if self.controller is None or self.controller.item is None:
            return None
        return self.controller.item.item_id

    def start(self, widget: Widget, mouse: Offset) -> None:
        controller = self._pick_up(widget.drag_item_id)
        if controller is None:
            return
        self.controller = controller
        widget.add_class("dragging")
        region = widget.region
        self.drag_offset = Offset(mouse.x - region.x, mouse.y - region.y)
        self.ghost = DragGhost(widget.drag_label, markup=False)
        self.ghost.styles.width = region.width
        self.ghost.styles.offset = (region.x, region.y)
        self.screen.mount(self.ghost)
        self.screen.capture_mouse()
        logger.debug("drag started for %s", widget.drag_item_id)

    def move(self, x: int, y: int) -> None:
        if not self.active:
            return
        if self.ghost is not None:
            self.ghost.styles.offset = (x - self.drag_offset.x, y - self.drag_offset.y)
        for target in self._targets_at(x, y):
            if self._guard(target.drag_over, self.controller, x, y):
                break

    def finish(self, x: int, y: int) -> None:
        if not self.active:
            self._cleanup()
            return
        handled = False
        for target in self._targets_at(x, y):
            handled = bool(self._guard(target.try_drop, self.controller, handled)) or handled
        if self.controller.active:
            self.controller.drop()
        self._cleanup()

    def cancel(self) -> None:
        if self.controller is not None:
            self.controller.cancel()
        self._cleanup()

    def _guard(self, fn, *args):
        try:
            return fn(*args)
        except Rejected as e:
            self.screen.notify(str(e), severity="error")
            return True

    def _targets_at(self, x: int, y: int) -> list[DropTarget]:
        """DropTargets under the pointer, innermost first."""
        try:
            widgets = list(self.screen.get_widgets_at(x, y))
        except NoWidget:
            return []
        for widget, _region in widgets:
            if self.ghost is not None and (widget is self.ghost or self.ghost in widget.ancestors):
                continue
            targets = []
            while widget is not None:
                if isinstance(widget, DropTarget):
                    targets.append(widget)
                widget = widget.parent
            return targets
        return []

    def _cleanup(self) -> None:
        self.screen.release_mouse()
        if self.ghost is not None:
            self.ghost.remove()
        self.ghost = None
        self.controller = None
        self.drag_offset = Offset(0, 0)
