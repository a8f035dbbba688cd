"""
Action System - Player actions, exchanges, payouts and outcomes.

Every turn, each participating player reveals one Decision:
1. A PlayerAction (play a card, drop it, or use it to build a company stage)
2. An Exchange (resources bought from the left and right neighbors)

Resolving a decision yields an ActionOutcome whose funding deltas are
collected in an AddMap and applied later, all at once.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from .state import Card, Neighbor, Resource, parse_resources


class ActionType(Enum):
    """What a player does with the card they picked."""
    PLAY = "play"
    DROP = "drop"
    BUILD_COMPANY = "build_company"


@dataclass(frozen=True)
class PlayerAction:
    """
    A chosen action on a card from the hand.

    For BUILD_COMPANY the card is only the marker spent on the
    stage; the card actually played is the next company stage card.
    """
    action_type: ActionType
    card: Card

    @classmethod
    def play(cls, card: Card) -> PlayerAction:
        """Factory for play action."""
        return cls(action_type=ActionType.PLAY, card=card)

    @classmethod
    def drop(cls, card: Card) -> PlayerAction:
        """Factory for drop action."""
        return cls(action_type=ActionType.DROP, card=card)

    @classmethod
    def build_company(cls, card: Card) -> PlayerAction:
        """Factory for company stage action."""
        return cls(action_type=ActionType.BUILD_COMPANY, card=card)

    def __str__(self) -> str:
        return f"{self.action_type.value} {self.card.name}"


# Neighbor direction -> resources requested from that neighbor
Exchange = dict[Neighbor, Counter]


def make_exchange(left: str = "", right: str = "") -> Exchange:
    """Build an exchange from resource letters, e.g. make_exchange(left="DM")."""
    exchange: Exchange = {}
    if left:
        exchange[Neighbor.LEFT] = Counter(parse_resources(left))
    if right:
        exchange[Neighbor.RIGHT] = Counter(parse_resources(right))
    return exchange


def exchange_resources(exchange: Exchange) -> Counter:
    total: Counter[Resource] = Counter()
    for request in exchange.values():
        total.update(request)
    return total


@dataclass(frozen=True)
class Decision:
    """A revealed decision: an action paired with an exchange."""
    action: PlayerAction
    exchange: Exchange = field(default_factory=dict, hash=False, compare=True)
    explanation: str = field(default="", compare=False)


@dataclass
class AddMap:
    """
    Deferred funding deltas, player id -> amount.

    Merging sums the deltas, so the order in which payouts are
    collected never matters.
    """
    deltas: dict[str, int] = field(default_factory=dict)

    @classmethod
    def single(cls, player_id: str, amount: int) -> AddMap:
        return cls(deltas={player_id: amount})

    @classmethod
    def merge_all(cls, maps: Iterable[AddMap]) -> AddMap:
        merged = cls()
        for m in maps:
            merged = merged + m
        return merged

    def __add__(self, other: AddMap) -> AddMap:
        merged = dict(self.deltas)
        for player_id, amount in other.deltas.items():
            merged[player_id] = merged.get(player_id, 0) + amount
        return AddMap(deltas=merged)

    def get(self, player_id: str) -> int:
        return self.deltas.get(player_id, 0)

    def items(self):
        return sorted(self.deltas.items())


@dataclass
class ActionOutcome:
    """
    Result of resolving one player's decision.

    Contains:
    - The hand left after the chosen card was removed
    - Funding deltas from exchanges and the action reward
    - The card that was actually played (None for a drop)
    """
    hand: list[Card]
    payout: AddMap
    played: Card | None = None
