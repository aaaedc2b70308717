from dataclasses import dataclass
from typing import Optional

from .controller import ViewMode


@dataclass(frozen=True)
class Batching:
    initial: int
    step: int


BATCHING = {
    ViewMode.COMFORTABLE: Batching(initial=18, step=18),
    ViewMode.COMPACT: Batching(initial=30, step=40),
}


class IncrementalListRenderer:
    # every new list bumps the generation; sentinel callbacks carry the one they were made under
    def __init__(self, view_mode=ViewMode.COMFORTABLE):
        self.view_mode = ViewMode(view_mode)
        self._items = ()
        self.visible_count = 0
        self.scroll_top = 0
        self.generation = 0

    @property
    def batching(self) -> Batching:
        return BATCHING[self.view_mode]

    def _reset(self):
        self.generation += 1
        self.visible_count = min(len(self._items), self.batching.initial)
        self.scroll_top = 0

    def show(self, items):
        # identity, not equality: a re-derived list is a new list even if it looks the same
        if items is self._items:
            return
        self._items = items
        self._reset()

    def set_view_mode(self, view_mode):
        view_mode = ViewMode(view_mode)
        if view_mode is self.view_mode:
            return
        self.view_mode = view_mode
        self._reset()

    def sentinel_token(self) -> Optional[int]:
        """Generation to attach to a sentinel observer, or None when nothing is left to reveal."""
        return self.generation if self.has_more else None

    def on_sentinel_visible(self, token):
        if token is None or token != self.generation:
            return False
        return self.load_more()

    def load_more(self):
        if not self.has_more:
            return False
        self.visible_count = min(self.visible_count + self.batching.step, len(self._items))
        return True

    @property
    def total(self) -> int:
        return len(self._items)

    @property
    def has_more(self) -> bool:
        return self.visible_count < len(self._items)

    @property
    def visible(self):
        return list(self._items[:self.visible_count])

    def footer(self) -> str:
        total = self.total
        return f"Showing {self.visible_count} of {total} task{'' if total == 1 else 's'}"
