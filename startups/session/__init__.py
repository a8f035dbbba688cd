"""
Session Module - Runs matches.

A session represents one match:
- Created from a validated MatchConfig
- Holds the game state and the loop driving it
- Keeps the final scores until it is ended

Sessions are EPHEMERAL: nothing is persisted.
"""

from .game_loop import GameLoop, LoopState, TurnResult
from .manager import Session, SessionManager, SessionState
from .narration import LoggingNarrator, Narrator, RecordingNarrator

__all__ = [
    "GameLoop",
    "LoopState",
    "TurnResult",
    "Session",
    "SessionManager",
    "SessionState",
    "LoggingNarrator",
    "Narrator",
    "RecordingNarrator",
]
