"""
Engine Core - Deterministic turn resolution and scoring.

The engine is the runtime that:
1. Holds the GameState
2. Resolves exchanges and card plays
3. Resolves each player's revealed decision
4. Compares poaching strength at the end of each age
5. Aggregates victory points
"""

from .state import (
    Age,
    Card,
    CardType,
    Company,
    CompanyProfile,
    CompanyStage,
    Cost,
    GameState,
    Neighbor,
    PlayerState,
    PoachingOutcome,
    Resource,
    ResearchType,
    Side,
    VictoryType,
)
from .errors import DecisionTimeout, EngineError, EngineFault, RuleViolation
from .rng import Rng
from .action import ActionOutcome, ActionType, AddMap, Decision, Exchange, PlayerAction, make_exchange
from .exchange import market_snapshot, resolve_exchange
from .reducer import play_card, resolve_action
from .poaching import resolve_poaching
from .scoring import victory_points
from .action_generator import ActionGenerator, legal_actions

__all__ = [
    "Age",
    "Card",
    "CardType",
    "Company",
    "CompanyProfile",
    "CompanyStage",
    "Cost",
    "GameState",
    "Neighbor",
    "PlayerState",
    "PoachingOutcome",
    "Resource",
    "ResearchType",
    "Side",
    "VictoryType",
    "DecisionTimeout",
    "EngineError",
    "EngineFault",
    "RuleViolation",
    "Rng",
    "ActionOutcome",
    "ActionType",
    "AddMap",
    "Decision",
    "Exchange",
    "PlayerAction",
    "make_exchange",
    "market_snapshot",
    "resolve_exchange",
    "play_card",
    "resolve_action",
    "resolve_poaching",
    "victory_points",
    "ActionGenerator",
    "legal_actions",
]
