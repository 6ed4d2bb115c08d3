"""
Move history for Minesweeper engine.

Keeps an append-only, most-recent-first chain of the cells
revealed during a game.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Tuple


class Action(Enum):
    """Classification of a revealed cell."""

    UNKNOWN = auto()
    NUMBER = auto()
    BOMB = auto()


@dataclass(frozen=True)
class Record:
    """A single revealed cell and what it turned out to be."""

    position: Tuple[int, int]
    action: Action

    @property
    def x(self) -> int:
        return self.position[0]

    @property
    def y(self) -> int:
        return self.position[1]


@dataclass(frozen=True)
class History:
    """
    Node of the move history linked list.

    Attributes:
        record: The move stored in this node.
        previous: Node holding the move made before this one, if any.
    """

    record: Record
    previous: Optional["History"] = None

    def __iter__(self) -> Iterator[Record]:
        """Walk the chain from this move back to the first one."""
        node: Optional[History] = self
        while node is not None:
            yield node.record
            node = node.previous

    def __len__(self) -> int:
        return sum(1 for _ in self)


def prepend(history: Optional[History], record: Record) -> History:
    """Return a new head node with record in front of history."""
    return History(record=record, previous=history)
