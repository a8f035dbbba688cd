"""
Engine Errors - Two tiers of failure.

- RuleViolation: a player broke a rule (not enough funds, card not in hand...).
  Recoverable, tagged with the offending player.
- EngineFault: a broken precondition (unknown player, empty hand...).
  Aborts the match.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for all engine errors."""
    pass


class RuleViolation(EngineError):
    """
    A player-attributable rule violation.

    The engine guarantees that no shared state was modified
    when one of these propagates out of action resolution.
    """

    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    NEIGHBOR_LACKS_RESOURCES = "NEIGHBOR_LACKS_RESOURCES"
    CARD_NOT_IN_HAND = "CARD_NOT_IN_HAND"
    CANNOT_AFFORD = "CANNOT_AFFORD"
    MAX_STAGE_REACHED = "MAX_STAGE_REACHED"

    def __init__(self, player_id: str, code: str, reason: str):
        super().__init__(f"{player_id}: {reason}")
        self.player_id = player_id
        self.code = code
        self.reason = reason


class EngineFault(EngineError):
    """Unrecoverable invariant violation."""
    pass


class DecisionTimeout(EngineError):
    """A decision source did not answer in time."""

    def __init__(self, player_id: str, timeout: float | None = None):
        super().__init__(f"No decision from {player_id} within {timeout}s")
        self.player_id = player_id
        self.timeout = timeout
