"""Opaque pane handles."""

from __future__ import annotations

import itertools
from dataclasses import dataclass

_ids = itertools.count(1)


@dataclass(frozen=True)
class PaneId:
    value: int

    @classmethod
    def new(cls) -> PaneId:
        """Mint a handle no other pane in this process has."""
        return cls(next(_ids))
