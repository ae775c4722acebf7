"""
Playback state machine running on top of the QueueStore.

The controller owns the cursor (current_index), the playing/paused state,
the repeat and shuffle modes and the elapsed time of the current track. It
sends commands to the media engine and reports every change through a
ChangeNotifier. "Exhausted" (cursor past the last track) is just a value of
current_index while paused, not a separate state.
"""

import asyncio
import logging
import random
from typing import Optional, Sequence

from audio.media_engine import MediaEngine
from core.interfaces import PlayerEvent, PlayerState, RepeatMode, ShuffleMode, Track
from core.notifier import ChangeNotifier
from core.queue_store import QueueStore
from core.results import (
    ModificationResult, QueueModificationSuccess, QueueSetResult,
    ReorderResult, ShuffleResult,
)
from utils.constants import MESSAGES, RESTART_THRESHOLD_SECONDS
from utils.exceptions import MediaEngineError

logger = logging.getLogger(__name__)


class PlaybackController:
    """
    Sequential player driven by a single logical caller.

    Navigation and queue passthroughs are serialised with one asyncio.Lock so
    the cursor never races ahead of the queue mutation it depends on.

    Attributes:
        engine (MediaEngine): Receives load/play/pause/seek commands
        queue (QueueStore): The playback queue
        notifier (ChangeNotifier): Observers of player and queue changes
        current_index (int): Cursor into the queue, may be past the end
        playing_state (PlayerState): PLAYING or PAUSED
        elapsed_seconds (float): Position in the current track
        restart_threshold (float): go_to_previous selects the previous track
            while elapsed_seconds is at or below this value
    """

    def __init__(
        self,
        engine: Optional[MediaEngine] = None,
        queue: Optional[QueueStore] = None,
        notifier: Optional[ChangeNotifier] = None,
        restart_threshold: float = RESTART_THRESHOLD_SECONDS,
    ):
        self.engine = engine
        self.queue = queue or QueueStore()
        self.notifier = notifier or ChangeNotifier()
        self.restart_threshold = restart_threshold

        self.current_index = 0
        self.playing_state = PlayerState.PAUSED
        self.elapsed_seconds = 0.0

        self._repeat_mode = RepeatMode.NONE
        self._shuffle_mode = ShuffleMode.OFF
        # Engine holds an item
        self._loaded = False
        # Cursor refers to a track that was started, so queue edits must move it
        self._cursor_active = False
        self._navigation_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: dict, engine: Optional[MediaEngine] = None,
                    notifier: Optional[ChangeNotifier] = None) -> 'PlaybackController':
        """Build a controller from a dict returned by utils.config.load_config."""
        seed = config.get('shuffle_seed')
        rng = random.Random(seed) if seed is not None else None
        return cls(
            engine=engine,
            queue=QueueStore(rng=rng),
            notifier=notifier,
            restart_threshold=config.get('restart_threshold', RESTART_THRESHOLD_SECONDS),
        )

    # Modes

    @property
    def repeat_mode(self) -> RepeatMode:
        return self._repeat_mode

    @repeat_mode.setter
    def repeat_mode(self, mode: RepeatMode) -> None:
        self._repeat_mode = mode
        logger.info(f"[PLAYER] Repeat mode set to {mode.value}")
        self.notifier.emit(PlayerEvent.QUEUE_MODE_CHANGED, mode)

    @property
    def shuffle_mode(self) -> ShuffleMode:
        return self._shuffle_mode

    @shuffle_mode.setter
    def shuffle_mode(self, mode: ShuffleMode) -> None:
        self._shuffle_mode = mode
        logger.info(f"[PLAYER] Shuffle mode set to {mode.value}")
        self.notifier.emit(PlayerEvent.SHUFFLE_MODE_CHANGED, mode)

    @property
    def is_playing(self) -> bool:
        return self.playing_state is PlayerState.PLAYING

    # Playing / pausing

    async def resume(self) -> None:
        """
        Resume the engine from a paused state.
        Does nothing when no track is loaded: to start a queue call set_all()
        then play_from().
        """
        if not self._loaded:
            logger.debug("[PLAYER] Nothing loaded, resume ignored")
            return
        self._require_engine().play()
        self.playing_state = PlayerState.PLAYING

    async def pause(self) -> None:
        self._pause()

    async def play_from(self, index: int) -> bool:
        """
        Load and play the track at index.

        Returns:
            bool: False (and nothing changes) if there is no track at index
        """
        async with self._navigation_lock:
            return await self._play_from(index)

    def report_elapsed(self, seconds: float) -> None:
        """Record an elapsed-time sample taken from the engine by an external poller."""
        if seconds < 0:
            raise ValueError(f"elapsed time must be >= 0, got {seconds}")
        self.elapsed_seconds = float(seconds)
        if self.is_playing:
            self.notifier.emit(PlayerEvent.ELAPSED_TIME_CHANGED, self.elapsed_seconds)

    # Navigation

    async def advance_to_next(self) -> bool:
        async with self._navigation_lock:
            return await self._advance()

    async def go_to_previous(self) -> bool:
        """
        Go back one track if the current one just started, otherwise restart it.

        Returns:
            bool: True if the cursor moved to the previous track
        """
        async with self._navigation_lock:
            if self.elapsed_seconds <= self.restart_threshold and self.current_index > 0:
                self.current_index -= 1
                track = await self.queue.get_track(self.current_index)
                if track is not None:
                    self._load_and_play(track)
                return True

            self._seek_to_start()
            return False

    async def on_track_finished(self) -> None:
        """Handle the engine's end-of-track event according to the repeat mode."""
        async with self._navigation_lock:
            logger.debug(f"[PLAYER] Track finished at {self.current_index} ({self._repeat_mode.value})")

            if self._repeat_mode is RepeatMode.NONE:
                await self._advance()

            elif self._repeat_mode is RepeatMode.REPEAT_ALL:
                count = await self.queue.count()
                # Compared against count, not count - 1: the cursor first
                # steps past the end and wraps on the following event
                if self.current_index + 1 > count:
                    await self._play_from(0)
                else:
                    await self._advance()

            elif self._repeat_mode is RepeatMode.REPEAT_ONE:
                track = await self.queue.get_track(self.current_index)
                if track is None or not self._loaded:
                    logger.warning(f"[PLAYER] Nothing to repeat at {self.current_index}")
                    return
                self._require_engine().seek(0.0)
                self._play_now(track)

    # Queue modification

    async def append(self, track: Track) -> QueueModificationSuccess:
        async with self._navigation_lock:
            result = await self.queue.append(track)
            self.notifier.emit(PlayerEvent.ITEM_APPENDED, result.item)
            return result

    async def prepend(self, track: Track) -> QueueModificationSuccess:
        async with self._navigation_lock:
            result = await self.queue.prepend(track)
            if self._cursor_active:
                self.current_index += 1
            self.notifier.emit(PlayerEvent.ITEM_PREPENDED, result.item)
            return result

    async def insert_after(self, track: Track, anchor: Track) -> ModificationResult:
        async with self._navigation_lock:
            count = await self.queue.count()
            result = await self.queue.insert_after(track, anchor)
            if not result.ok:
                return result
            if self._cursor_active:
                # Past the end, an insert at the cursor fills it like append does
                past_end = self.current_index >= count
                if result.index < self.current_index or (result.index == self.current_index and not past_end):
                    self.current_index += 1
            self.notifier.emit(PlayerEvent.ITEM_INSERTED, result.item, result.index)
            return result

    async def remove(self, track: Track) -> ModificationResult:
        async with self._navigation_lock:
            result = await self.queue.remove(track)
            if not result.ok:
                return result
            # Removing the current track steps the cursor back so the next
            # advance plays the track that followed it
            if self._cursor_active and result.index <= self.current_index:
                self.current_index -= 1
            self.notifier.emit(PlayerEvent.ITEM_REMOVED, result.item, result.index)
            return result

    async def set_all(self, tracks: Sequence[Track]) -> QueueSetResult:
        async with self._navigation_lock:
            result = await self.queue.set_all(tracks)
            self.current_index = 0
            self._cursor_active = False
            self.notifier.emit(PlayerEvent.ITEMS_SET, result.items)
            return result

    async def reorder(self, track: Track, after: Track) -> ReorderResult:
        """Take an existing track and place it after `after`."""
        async with self._navigation_lock:
            result = await self.queue.reorder(track, after)
            if not result.ok:
                return result
            if self._cursor_active:
                self.current_index = self._follow_reorder(
                    self.current_index, result.previous_index, result.index
                )
            self.notifier.emit(PlayerEvent.ITEM_REORDERED, result.item, result.index)
            return result

    async def shuffle_tail(self, pivot: Track) -> ShuffleResult:
        """
        Shuffle the tracks after pivot, usually the one playing.
        SHUFFLE_FINISHED carries the result whether or not the shuffle happened.
        """
        async with self._navigation_lock:
            current = await self.queue.get_track(self.current_index) if self._cursor_active else None
            result = await self.queue.shuffle_tail(pivot)
            if result.ok and current is not None:
                kept = len(result.kept_prefix)
                if self.current_index >= kept:
                    for offset, item in enumerate(result.shuffled_suffix):
                        if item.id == current.id:
                            self.current_index = kept + offset
                            break
            self.notifier.emit(PlayerEvent.SHUFFLE_FINISHED, result)
            return result

    # Read-throughs

    async def number_of_items(self) -> int:
        return await self.queue.count()

    async def get_track(self, index: int) -> Optional[Track]:
        return await self.queue.get_track(index)

    async def current_track(self) -> Optional[Track]:
        return await self.queue.get_track(self.current_index)

    # Helpers

    def _require_engine(self) -> MediaEngine:
        if self.engine is None:
            raise MediaEngineError(MESSAGES['NO_ENGINE'])
        return self.engine

    async def _play_from(self, index: int) -> bool:
        track = await self.queue.get_track(index)
        if track is None:
            logger.warning(f"[PLAYER] No track at index {index}")
            return False
        self.current_index = index
        self._load_and_play(track)
        return True

    async def _advance(self) -> bool:
        self.current_index += 1
        track = await self.queue.get_track(self.current_index)
        if track is None:
            logger.info(f"[PLAYER] {MESSAGES['QUEUE_EXHAUSTED'].format(index=self.current_index)}")
            self._pause()
            return False
        self._load_and_play(track)
        return True

    def _load_and_play(self, track: Track) -> None:
        self._require_engine().load(track.resource)
        self._loaded = True
        self._cursor_active = True
        self._play_now(track)

    def _play_now(self, track: Track) -> None:
        """Start the engine, reset the elapsed time and announce the track."""
        self._require_engine().play()
        self.playing_state = PlayerState.PLAYING
        self.elapsed_seconds = 0.0
        logger.info(f"[PLAYER] Playing {track.id} at index {self.current_index}")
        self.notifier.emit(PlayerEvent.PLAYBACK_BEGAN, track, self.current_index)

    def _pause(self) -> None:
        if self._loaded:
            self._require_engine().pause()
        self.playing_state = PlayerState.PAUSED
        logger.info(f"[PLAYER] Paused at index {self.current_index}")
        self.notifier.emit(PlayerEvent.PLAYBACK_PAUSED)

    def _seek_to_start(self) -> None:
        if self._loaded:
            self._require_engine().seek(0.0)
        self.elapsed_seconds = 0.0

    @staticmethod
    def _follow_reorder(cursor: int, previous_index: int, new_index: int) -> int:
        if cursor == previous_index:
            return new_index
        if cursor > previous_index:
            cursor -= 1
        if cursor >= new_index:
            cursor += 1
        return cursor
