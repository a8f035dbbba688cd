"""
Card Effects - The closed set of effects a card can carry.

Effects are immutable values attached to cards. A player's capabilities
are never stored: they are queried from the cards the player owns, so
adding or removing a card can never leave a stale capability behind.

Conditions describe how many times a GainFunding or AddVictory effect
triggers. They are evaluated against the whole table in scoring.py.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .state import (
    Age,
    CardType,
    Neighbor,
    OutcomeKind,
    PlayerState,
    Resource,
    ResearchType,
    Sharing,
    VictoryType,
)


class Target(Enum):
    """Whose cards a condition looks at."""
    OWN = "own"
    LEFT = "left"
    RIGHT = "right"


OWN = frozenset({Target.OWN})
NEIGHBORS = frozenset({Target.LEFT, Target.RIGHT})
EVERYONE = OWN | NEIGHBORS


# ============================================================================
# Conditions
# ============================================================================

@dataclass(frozen=True)
class HappensOnce:
    pass


@dataclass(frozen=True)
class PerCard:
    """Once per card of the given types owned by the targets."""
    targets: frozenset[Target]
    card_types: frozenset[CardType]


@dataclass(frozen=True)
class ByPoachingResult:
    """Once per poaching outcome of the given kinds held by the targets."""
    targets: frozenset[Target]
    kinds: frozenset[OutcomeKind]


@dataclass(frozen=True)
class ByCompanyStage:
    """Once per company stage built by the targets."""
    targets: frozenset[Target]


Condition = Union[HappensOnce, PerCard, ByPoachingResult, ByCompanyStage]

HAPPENS_ONCE = HappensOnce()


# ============================================================================
# Effects
# ============================================================================

@dataclass(frozen=True)
class ProvideResource:
    resource: Resource
    amount: int = 1
    sharing: Sharing = Sharing.SHARED


@dataclass(frozen=True)
class ResourceChoice:
    """One unit of any of the listed resources."""
    resources: frozenset[Resource]
    sharing: Sharing = Sharing.SHARED


@dataclass(frozen=True)
class CheaperExchange:
    """Buy the listed resources from the listed neighbors for 1 instead of 2."""
    neighbors: frozenset[Neighbor]
    resources: frozenset[Resource]


@dataclass(frozen=True)
class GainFunding:
    amount: int
    condition: Condition = HAPPENS_ONCE


@dataclass(frozen=True)
class AddVictory:
    category: VictoryType
    points: int
    condition: Condition = HAPPENS_ONCE


@dataclass(frozen=True)
class Research:
    research_type: ResearchType


@dataclass(frozen=True)
class ScientificJoker:
    """Counts as whichever research type scores best."""
    pass


@dataclass(frozen=True)
class Poaching:
    strength: int


@dataclass(frozen=True)
class Opportunity:
    """One free build during the given age."""
    age: Age


@dataclass(frozen=True)
class CopyCommunity:
    pass


@dataclass(frozen=True)
class Recycling:
    pass


@dataclass(frozen=True)
class Efficiency:
    """Grants the bonus 7th turn of each age."""
    pass


Effect = Union[
    ProvideResource,
    ResourceChoice,
    CheaperExchange,
    GainFunding,
    AddVictory,
    Research,
    ScientificJoker,
    Poaching,
    Opportunity,
    CopyCommunity,
    Recycling,
    Efficiency,
]


# ============================================================================
# Capability queries
# ============================================================================

def effects_of_type(player: PlayerState, effect_type: type) -> list:
    """All active effects of one variant."""
    return [e for e in player.effects if isinstance(e, effect_type)]


def has_effect(player: PlayerState, effect_type: type) -> bool:
    return any(isinstance(e, effect_type) for e in player.effects)


def poaching_strength(player: PlayerState) -> int:
    return sum(e.strength for e in effects_of_type(player, Poaching))


def opportunity_ages(player: PlayerState) -> set[Age]:
    """Ages for which the player still holds an unspent Opportunity."""
    granted = {e.age for e in effects_of_type(player, Opportunity)}
    return granted - player.used_opportunities


def free_construction(player: PlayerState) -> set[str]:
    """Names of the cards the player may build without paying."""
    return {name for card in player.cards for name in card.free_cards}


def research_types(player: PlayerState) -> list[ResearchType]:
    return [e.research_type for e in effects_of_type(player, Research)]


def scientific_jokers(player: PlayerState) -> int:
    return len(effects_of_type(player, ScientificJoker))
