# services/rotation.py
from __future__ import annotations

import logging
import random
from typing import List, Optional, Sequence

from typetutor.app.errors import EmptyPoolError
from typetutor.core.models import PracticeItem

logger = logging.getLogger(__name__)


class ItemRotator:
    """
    Pool of practice items for one session.

    advance() cycles forever: once the last item is passed the whole
    original pool is reshuffled and the cycle starts over at index 0.
    prev()/next() browse the fixed pool and stop at either end.
    """

    def __init__(self, items: Sequence[PracticeItem], shuffle: bool = False, rng: Optional[random.Random] = None):
        if not items:
            raise EmptyPoolError("practice pool is empty")
        self._original: tuple = tuple(items)
        self._rng = rng or random.Random()
        self._shuffle = shuffle
        self.cycle = 0
        self.reset()

    def reset(self):
        self.items: List[PracticeItem] = list(self._original)
        if self._shuffle:
            self._rng.shuffle(self.items)
        self.index = 0
        self.cycle = 0

    @property
    def current(self) -> PracticeItem:
        return self.items[self.index]

    def __len__(self) -> int:
        return len(self.items)

    @property
    def at_end(self) -> bool:
        return self.index == len(self.items) - 1

    def advance(self) -> PracticeItem:
        if self.index + 1 < len(self.items):
            self.index += 1
        else:
            self.items = list(self._original)
            self._rng.shuffle(self.items)
            self.index = 0
            self.cycle += 1
            logger.debug("pool exhausted, reshuffled (cycle %d)", self.cycle)
        return self.current

    def next(self) -> bool:
        if self.index + 1 >= len(self.items):
            return False
        self.index += 1
        return True

    def prev(self) -> bool:
        if self.index == 0:
            return False
        self.index -= 1
        return True
