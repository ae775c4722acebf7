"""
Result values returned by QueueStore operations.

Every mutation returns either a success payload or a QueueFailure. Expected
conditions such as a track missing from the queue are never raised.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Union

from core.interfaces import Track


class QueueErrorKind(Enum):
    NOT_FOUND = "not_found"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    OPERATION_FAILED = "operation_failed"


class QueueFailureReason(Enum):
    """Why a queue mutation was refused."""
    NOT_FOUND = "not_found"
    ANCHOR_NOT_FOUND = "anchor_not_found"
    SOURCE_NOT_FOUND = "source_not_found"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    PIVOT_NOT_FOUND = "pivot_not_found"

    @property
    def kind(self) -> QueueErrorKind:
        if self is QueueFailureReason.INDEX_OUT_OF_RANGE:
            return QueueErrorKind.INDEX_OUT_OF_RANGE
        if self is QueueFailureReason.PIVOT_NOT_FOUND:
            return QueueErrorKind.OPERATION_FAILED
        return QueueErrorKind.NOT_FOUND


@dataclass(frozen=True)
class QueueFailure:
    reason: QueueFailureReason
    ok = False

    @property
    def kind(self) -> QueueErrorKind:
        return self.reason.kind


@dataclass(frozen=True)
class QueueModificationSuccess:
    """
    Result of append, prepend, insert_after and remove.

    Attributes:
        item: The item added to the queue, or the item removed from it
        index: Where the item now sits; for remove, where it was before removal
    """
    item: Track
    index: int
    ok = True


@dataclass(frozen=True)
class QueueReorderSuccess:
    item: Track
    index: int
    previous_index: int
    ok = True


@dataclass(frozen=True)
class QueueSetResult:
    items: List[Track] = field(default_factory=list)
    ok = True


@dataclass(frozen=True)
class QueueShuffleSuccess:
    """
    Attributes:
        pivot: The track the shuffle started after
        kept_prefix: Items up to and including the pivot, untouched
        shuffled_suffix: Items after the pivot in their new order
        all_items: kept_prefix + shuffled_suffix, the new queue
    """
    pivot: Track
    kept_prefix: List[Track]
    shuffled_suffix: List[Track]
    all_items: List[Track]
    ok = True


ModificationResult = Union[QueueModificationSuccess, QueueFailure]
ReorderResult = Union[QueueReorderSuccess, QueueFailure]
ShuffleResult = Union[QueueShuffleSuccess, QueueFailure]
