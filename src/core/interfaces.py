"""
Interfaces and data structures shared by the queue, the player and observers
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any

class PlayerState(Enum):
    PLAYING = "playing"
    PAUSED = "paused"

class RepeatMode(Enum):
    NONE = "none"
    REPEAT_ALL = "repeat_all"
    REPEAT_ONE = "repeat_one"

class ShuffleMode(Enum):
    OFF = "off"
    ON = "on"

@dataclass
class Track:
    """
    A track reference held by the queue.

    Only `id` is used to find a track in the queue; two Track objects with the
    same id address the same entry. `locator` and `extension` are opaque and
    only handed to the media engine.
    """
    id: str
    locator: str
    extension: str = ""
    title: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def resource(self) -> str:
        """Locator passed to MediaEngine.load()"""
        if self.extension:
            return f"{self.locator}.{self.extension}"
        return self.locator

class PlayerEvent(Enum):
    QUEUE_MODE_CHANGED = "queue_mode_changed"
    SHUFFLE_MODE_CHANGED = "shuffle_mode_changed"
    PLAYBACK_BEGAN = "playback_began"
    PLAYBACK_PAUSED = "playback_paused"
    ELAPSED_TIME_CHANGED = "elapsed_time_changed"
    ITEMS_SET = "items_set"
    ITEM_APPENDED = "item_appended"
    ITEM_PREPENDED = "item_prepended"
    ITEM_INSERTED = "item_inserted"
    ITEM_REMOVED = "item_removed"
    ITEM_REORDERED = "item_reordered"
    SHUFFLE_FINISHED = "shuffle_finished"
