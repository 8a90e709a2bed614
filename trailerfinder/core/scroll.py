"""Infinite scroll trigger driven by sentinel visibility"""

from typing import Callable

from .state import ViewState


class InfiniteScrollTrigger:
    """
    Request the next discover page when the end-of-list sentinel is fully visible.

    Reports are ignored while not observing, while a committed search term
    is active, or while a fetch is loading.
    """

    def __init__(
        self,
        state: ViewState,
        on_visible: Callable[[], None],
        threshold: float = 1.0,
    ):
        self.state = state
        self.on_visible = on_visible
        self.threshold = threshold
        self.observing = False

    def observe(self):
        # Search mode suppresses pagination entirely
        if self.state.is_searching:
            return
        self.observing = True

    def unobserve(self):
        self.observing = False

    def sync(self):
        """Follow the committed term: observe in discover mode only"""
        if self.state.is_searching:
            self.unobserve()
        else:
            self.observe()

    def notify(self, intersection_ratio: float) -> bool:
        """Handle one intersection report; True when a fetch was requested"""
        if not self.observing:
            return False
        if intersection_ratio < self.threshold:
            return False
        if self.state.is_searching or self.state.is_loading:
            return False
        self.on_visible()
        return True
