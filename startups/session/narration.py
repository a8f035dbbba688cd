"""
Narration - Write-only sinks for human-readable match progress.

The engine pushes notices (card played, poaching results, ability
usage, substituted actions) and never reads anything back.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Protocol


class Narrator(Protocol):
    """Receives general and player-addressed notices."""

    def general(self, message: str) -> None: ...

    def tell(self, player_id: str, message: str) -> None: ...


class LoggingNarrator:
    """Emits notices as INFO records on the `startups.narration` logger."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("startups.narration")

    def general(self, message: str) -> None:
        self.logger.info("%s", message)

    def tell(self, player_id: str, message: str) -> None:
        self.logger.info("[%s] %s", player_id, message)


@dataclass
class RecordingNarrator:
    """Keeps every notice in memory. Useful in tests."""
    messages: list[str] = field(default_factory=list)
    told: dict[str, list[str]] = field(default_factory=dict)

    def general(self, message: str) -> None:
        self.messages.append(message)

    def tell(self, player_id: str, message: str) -> None:
        self.told.setdefault(player_id, []).append(message)
