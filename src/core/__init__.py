"""Playback queue, player state machine and change notifications."""
