"""
Boundary between the player and whatever actually renders audio.

The player only issues load/play/pause/seek commands. Decoding, file
resolution and position polling belong to the concrete engine.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

logger = logging.getLogger(__name__)


class MediaEngine(ABC):
    """Commands the player sends to the audio backend."""

    @abstractmethod
    def load(self, resource: str) -> None:
        """Replace the current item with resource, without starting playback."""

    @abstractmethod
    def play(self) -> None:
        ...

    @abstractmethod
    def pause(self) -> None:
        ...

    @abstractmethod
    def seek(self, seconds: float) -> None:
        ...


class LoggingMediaEngine(MediaEngine):
    """
    Engine that renders nothing and logs every command.
    Used for headless runs and dry runs of a queue.
    """

    def __init__(self):
        self.current_resource: Optional[str] = None
        self.is_playing = False
        self.position = 0.0

    def load(self, resource: str) -> None:
        logger.info(f"[ENGINE] load {resource}")
        self.current_resource = resource
        self.position = 0.0
        self.is_playing = False

    def play(self) -> None:
        logger.info(f"[ENGINE] play {self.current_resource}")
        self.is_playing = True

    def pause(self) -> None:
        logger.info(f"[ENGINE] pause {self.current_resource}")
        self.is_playing = False

    def seek(self, seconds: float) -> None:
        logger.info(f"[ENGINE] seek {self.current_resource} to {seconds:.2f}s")
        self.position = seconds
