"""
Event manager module for Letter Ocean.

Routes matplotlib mouse events onto the ocean's pointer entry points:
pressing on a letter grabs it, moving drags it (or moves the attractor when
nothing is held), releasing throws it.
"""

import logging
import time

logger = logging.getLogger(__name__)


class EventManager:
    """Connects figure mouse events to an ``Ocean``."""

    # Minimum time between pointer updates (60 FPS)
    MOUSE_DEBOUNCE_MS = 16

    def __init__(self, fig, ax, ocean, follow_pointer=False):
        """
        Args:
            fig: Matplotlib figure
            ax: Axes showing the ocean
            ocean (Ocean): Simulation receiving pointer input
            follow_pointer (bool): Move the centering pull with the pointer
        """
        self.fig = fig
        self.ax = ax
        self.ocean = ocean
        self.follow_pointer = follow_pointer
        self.last_mouse_update = 0
        self.event_count = 0
        self.connected_handlers = []

    def connect_events(self):
        """Connect press, motion and release handlers."""
        self.disconnect_events()
        canvas = self.fig.canvas
        self.connected_handlers = [
            canvas.mpl_connect('button_press_event', self._on_press),
            canvas.mpl_connect('motion_notify_event', self._on_motion),
            canvas.mpl_connect('button_release_event', self._on_release),
        ]
        logger.debug("Connected %d event handlers", len(self.connected_handlers))

    def disconnect_events(self):
        for cid in self.connected_handlers:
            self.fig.canvas.mpl_disconnect(cid)
        self.connected_handlers = []

    def _in_axes(self, event):
        return event.inaxes is self.ax and event.xdata is not None and event.ydata is not None

    def _on_press(self, event):
        if not self._in_axes(event) or getattr(event, 'button', 1) != 1:
            return
        self.event_count += 1
        letter = self.ocean.grab(event.xdata, event.ydata)
        if letter is None:
            # Clicking open water moves the attractor
            self.ocean.set_center(event.xdata, event.ydata)
        else:
            logger.debug("Grabbed %r", letter)

    def _on_motion(self, event):
        if not self._in_axes(event):
            return
        current_time = time.time() * 1000
        if current_time - self.last_mouse_update < self.MOUSE_DEBOUNCE_MS:
            return
        self.last_mouse_update = current_time
        self.event_count += 1

        if self.ocean.dragged is not None:
            self.ocean.drag_to(event.xdata, event.ydata)
        elif self.follow_pointer:
            self.ocean.set_center(event.xdata, event.ydata)

    def _on_release(self, event):
        letter = self.ocean.release()
        if letter is not None:
            self.event_count += 1
            logger.debug("Released %r with velocity %s", letter, letter.velocity)
