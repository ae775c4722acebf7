"""
Ordered playback queue with identity-based addressing.

All operations are coroutines serialised by a single asyncio.Lock, so a
mutation always runs to completion before the next one (or a read) starts.
Tracks are located by id, indices are derived and change with every mutation.
"""

import asyncio
import logging
import random
from typing import List, Optional, Sequence

from core.interfaces import Track
from core.results import (
    QueueFailure, QueueFailureReason, QueueModificationSuccess,
    QueueReorderSuccess, QueueSetResult, QueueShuffleSuccess,
    ModificationResult, ReorderResult, ShuffleResult,
)
from utils.constants import MESSAGES

logger = logging.getLogger(__name__)


class QueueStore:
    """
    Concurrency-safe ordered collection of tracks.

    Mutations return result values instead of raising when a track cannot be
    found. Duplicate ids are not rejected; lookups resolve to the first match.
    """

    def __init__(self, tracks: Sequence[Track] = None, rng: random.Random = None):
        self._items: List[Track] = list(tracks or [])
        self._lock = asyncio.Lock()
        self._rng = rng or random.Random()

    # Reads

    async def count(self) -> int:
        async with self._lock:
            return len(self._items)

    async def get_track(self, index: int) -> Optional[Track]:
        """Return the track at index, or None when the index is out of range."""
        async with self._lock:
            if 0 <= index < len(self._items):
                return self._items[index]
            return None

    async def index_of(self, track: Track) -> Optional[int]:
        async with self._lock:
            return self._index_of(track)

    async def snapshot(self) -> List[Track]:
        """Get a copy of the current queue."""
        async with self._lock:
            return list(self._items)

    # Mutations

    async def append(self, track: Track) -> QueueModificationSuccess:
        async with self._lock:
            self._items.append(track)
            index = len(self._items) - 1
            logger.info(f"[QUEUE] Appended {track.id} at {index} | Queue size now: {len(self._items)}")
            return QueueModificationSuccess(item=track, index=index)

    async def prepend(self, track: Track) -> QueueModificationSuccess:
        async with self._lock:
            self._items.insert(0, track)
            logger.info(f"[QUEUE] Prepended {track.id} | Queue size now: {len(self._items)}")
            return QueueModificationSuccess(item=track, index=0)

    async def insert_after(self, track: Track, anchor: Track) -> ModificationResult:
        """
        Insert a track immediately after anchor.

        Args:
            track: Track to insert
            anchor: Existing track, located by id

        Returns:
            QueueModificationSuccess with the new index, or
            QueueFailure(ANCHOR_NOT_FOUND)
        """
        async with self._lock:
            anchor_index = self._index_of(anchor)
            if anchor_index is None:
                logger.warning(f"[QUEUE] {MESSAGES['ANCHOR_NOT_FOUND'].format(anchor=anchor.id)}")
                return QueueFailure(QueueFailureReason.ANCHOR_NOT_FOUND)

            # Inserting after the last item lands at len(), which is valid
            index = anchor_index + 1
            self._items.insert(index, track)
            logger.info(f"[QUEUE] Inserted {track.id} after {anchor.id} at {index} | Queue size now: {len(self._items)}")
            return QueueModificationSuccess(item=track, index=index)

    async def remove(self, track: Track) -> ModificationResult:
        """Remove the first track matching track.id. The result carries its former index."""
        async with self._lock:
            index = self._index_of(track)
            if index is None:
                logger.warning(f"[QUEUE] {MESSAGES['TRACK_NOT_FOUND'].format(track=track.id)}")
                return QueueFailure(QueueFailureReason.NOT_FOUND)

            removed = self._items.pop(index)
            logger.info(f"[QUEUE] Removed {removed.id} from {index} | Queue size now: {len(self._items)}")
            return QueueModificationSuccess(item=removed, index=index)

    async def set_all(self, tracks: Sequence[Track]) -> QueueSetResult:
        async with self._lock:
            self._items = list(tracks)
            logger.info(f"[QUEUE] Queue replaced | Queue size now: {len(self._items)}")
            return QueueSetResult(items=list(self._items))

    async def reorder(self, track: Track, after: Track) -> ReorderResult:
        """
        Move track so that it sits immediately after `after`.

        Behaves as remove followed by insert_after in one step: the anchor is
        looked up in the queue with `track` already removed. On any failure
        the queue is restored to exactly its previous order.

        Args:
            track: Track to move, located by id
            after: Anchor track, located by id

        Returns:
            QueueReorderSuccess(item, index, previous_index) or a QueueFailure
            with SOURCE_NOT_FOUND, ANCHOR_NOT_FOUND or INDEX_OUT_OF_RANGE
        """
        async with self._lock:
            previous_index = self._index_of(track)
            if previous_index is None:
                logger.warning(f"[QUEUE] {MESSAGES['TRACK_NOT_FOUND'].format(track=track.id)}")
                return QueueFailure(QueueFailureReason.SOURCE_NOT_FOUND)

            moved = self._items.pop(previous_index)

            anchor_index = self._index_of(after)
            if anchor_index is None:
                self._items.insert(previous_index, moved)
                logger.warning(f"[QUEUE] {MESSAGES['REORDER_ROLLED_BACK'].format(track=track.id, reason='anchor not found')}")
                return QueueFailure(QueueFailureReason.ANCHOR_NOT_FOUND)

            index = anchor_index + 1
            if index > len(self._items):
                self._items.insert(previous_index, moved)
                logger.warning(f"[QUEUE] {MESSAGES['REORDER_ROLLED_BACK'].format(track=track.id, reason='index out of range')}")
                return QueueFailure(QueueFailureReason.INDEX_OUT_OF_RANGE)

            self._items.insert(index, moved)
            logger.info(f"[QUEUE] Reordered {moved.id} from {previous_index} to {index}")
            return QueueReorderSuccess(item=moved, index=index, previous_index=previous_index)

    async def shuffle_tail(self, pivot: Track) -> ShuffleResult:
        """
        Shuffle every item after pivot, leaving pivot and everything before it in place.

        Returns:
            QueueShuffleSuccess or QueueFailure(PIVOT_NOT_FOUND)
        """
        async with self._lock:
            pivot_index = self._index_of(pivot)
            if pivot_index is None:
                logger.warning(f"[QUEUE] {MESSAGES['PIVOT_NOT_FOUND'].format(track=pivot.id)}")
                return QueueFailure(QueueFailureReason.PIVOT_NOT_FOUND)

            start = pivot_index + 1
            kept = self._items[:start]
            shuffled = self._items[start:]
            self._rng.shuffle(shuffled)
            self._items = kept + shuffled

            logger.info(f"[QUEUE] Shuffled {len(shuffled)} items after {pivot.id}")
            return QueueShuffleSuccess(
                pivot=self._items[pivot_index],
                kept_prefix=list(kept),
                shuffled_suffix=list(shuffled),
                all_items=list(self._items),
            )

    # Helpers (caller holds the lock)

    def _index_of(self, track: Track) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == track.id:
                return index
        return None

    def __repr__(self):
        return f"QueueStore(length={len(self._items)})"
