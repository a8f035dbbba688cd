"""
Pydantic Schemas - Match configuration and score reports.

MatchConfig validates what a caller asks for before any state is
built; ScoreReport is the serializable form of a match result.

Environment overrides (MatchConfig.from_env):
- STARTUPS_PLAYERS: comma separated player ids
- STARTUPS_SEED: integer seed
- STARTUPS_POLICY: random or first
- STARTUPS_DECISION_TIMEOUT: seconds
"""

import os
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .engine_core.state import VictoryType


MIN_PLAYERS = 3
MAX_PLAYERS = 7


class PolicyName(str, Enum):
    """Bot policies available for automated players."""
    RANDOM = "random"
    FIRST = "first"


class MatchConfig(BaseModel):
    """Request to run one bot-only match."""
    player_ids: list[str] = Field(
        default_factory=lambda: ["alice", "bob", "carol"],
        min_length=MIN_PLAYERS,
        max_length=MAX_PLAYERS,
        description="Seated players, 3 to 7 unique ids",
    )
    seed: int = Field(0, description="Seed for every random draw of the match")
    policy: PolicyName = PolicyName.RANDOM
    decision_timeout: Optional[float] = Field(None, gt=0, description="Seconds per decision")
    parallel_decisions: bool = False

    @field_validator("player_ids")
    @classmethod
    def _unique_ids(cls, player_ids: list[str]) -> list[str]:
        if any(not pid.strip() for pid in player_ids):
            raise ValueError("player ids must not be blank")
        if len(set(player_ids)) != len(player_ids):
            raise ValueError("player ids must be unique")
        return player_ids

    @classmethod
    def from_env(cls, **overrides) -> "MatchConfig":
        """Build a config from STARTUPS_* variables, then explicit overrides."""
        values: dict = {}
        players = os.getenv("STARTUPS_PLAYERS")
        if players:
            values["player_ids"] = [pid.strip() for pid in players.split(",")]
        seed = os.getenv("STARTUPS_SEED")
        if seed:
            values["seed"] = seed
        policy = os.getenv("STARTUPS_POLICY")
        if policy:
            values["policy"] = policy
        timeout = os.getenv("STARTUPS_DECISION_TIMEOUT")
        if timeout:
            values["decision_timeout"] = timeout
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class PlayerScore(BaseModel):
    """Points of one player, by victory category."""
    player_id: str
    categories: dict[str, int] = Field(default_factory=dict)
    total: int = 0


class ScoreReport(BaseModel):
    """Final result of a match, best total first."""
    seed: int
    players: list[PlayerScore] = Field(default_factory=list)
    winners: list[str] = Field(default_factory=list)

    @classmethod
    def from_scores(cls, seed: int, scores: dict[str, dict[VictoryType, int]]) -> "ScoreReport":
        players = [
            PlayerScore(
                player_id=pid,
                categories={category.value: points for category, points in score.items()},
                total=sum(score.values()),
            )
            for pid, score in scores.items()
        ]
        players.sort(key=lambda p: (-p.total, p.player_id))
        best = players[0].total if players else 0
        return cls(
            seed=seed,
            players=players,
            winners=[p.player_id for p in players if p.total == best],
        )
