"""
Game State - Players, cards and the shared match state.

Design principles:
- One GameState per match, mutated in place by the engine
- PlayerState entries are created at setup and never removed
- Cards are immutable values shared with the catalog, never copied
- Capabilities are derived from owned cards on demand, never cached
"""

from __future__ import annotations
from collections import Counter
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import TYPE_CHECKING, Any

from .errors import EngineFault

if TYPE_CHECKING:
    from .rng import Rng
    from ..games.startups.catalog import Catalog


STARTING_FUNDS = 3
DROP_REWARD = 3
HAND_SIZE = 7
TURNS_PER_AGE = 7


class Age(IntEnum):
    """The three sequential ages of a match."""
    AGE1 = 1
    AGE2 = 2
    AGE3 = 3


class Resource(Enum):
    """Resources produced by cards, keyed by their one-letter code."""
    DEVELOPMENT = "D"
    OPERATIONS = "O"
    MARKETING = "M"
    FINANCE = "F"
    YOUTHFULNESS = "Y"
    VISION = "V"
    ADOPTION = "A"


BASE_RESOURCES = frozenset({
    Resource.DEVELOPMENT,
    Resource.OPERATIONS,
    Resource.MARKETING,
    Resource.FINANCE,
})
ADVANCED_RESOURCES = frozenset({
    Resource.YOUTHFULNESS,
    Resource.VISION,
    Resource.ADOPTION,
})


def parse_resources(codes: str) -> tuple[Resource, ...]:
    """Parse a string of resource letters ("DDM") into resources."""
    try:
        return tuple(Resource(code) for code in codes)
    except ValueError as e:
        raise ValueError(f"Unknown resource code in {codes!r}") from e


def resource_key(resources: Counter) -> tuple[Resource, ...]:
    """Canonical, hashable form of a resource multiset."""
    return tuple(sorted(resources.elements(), key=lambda r: r.value))


class CardType(Enum):
    """Card categories, used for capability gating and scoring."""
    BASE_RESOURCE = "base_resource"
    ADVANCED_RESOURCE = "advanced_resource"
    INFRASTRUCTURE = "infrastructure"
    RESEARCH = "research"
    COMMERCIAL = "commercial"
    HEAD_HUNTING = "head_hunting"
    COMMUNITY = "community"


class ResearchType(Enum):
    SCALING = "scaling"
    PROGRAMMING = "programming"
    CUSTOM_SOLUTION = "custom_solution"


class VictoryType(Enum):
    """Categories victory points are grouped by."""
    POACHING = "poaching"
    FUNDING = "funding"
    RESEARCH = "research"
    INFRASTRUCTURE = "infrastructure"
    COMMERCIAL = "commercial"
    COMMUNITY = "community"
    COMPANY = "company"


class Neighbor(Enum):
    LEFT = "left"
    RIGHT = "right"


class Side(Enum):
    A = "A"
    B = "B"


class Company(Enum):
    FACEBOOK = "Facebook"
    TWITTER = "Twitter"
    APPLE = "Apple"
    GOOGLE = "Google"
    YAHOO = "Yahoo"
    AMAZON = "Amazon"
    MICROSOFT = "Microsoft"


class CompanyStage(IntEnum):
    """Ordinal progress through a company's build sequence."""
    PROJECT = 0
    STAGE1 = 1
    STAGE2 = 2
    STAGE3 = 3
    STAGE4 = 4

    @property
    def next(self) -> CompanyStage:
        return CompanyStage(self + 1)


class Sharing(Enum):
    """Whether a produced resource can be bought by neighbors."""
    SHARED = "shared"
    PERSONAL = "personal"


class OutcomeKind(Enum):
    DEFEAT = "defeat"
    VICTORY = "victory"


@dataclass(frozen=True)
class CompanyProfile:
    """A company and the side of its board, assigned once at setup."""
    company: Company
    side: Side

    def __str__(self) -> str:
        return f"{self.company.value} ({self.side.value})"


@dataclass(frozen=True)
class PoachingOutcome:
    """Result of one end-of-age comparison against one neighbor."""
    kind: OutcomeKind
    age: Age | None = None

    @classmethod
    def defeat(cls) -> PoachingOutcome:
        return cls(kind=OutcomeKind.DEFEAT)

    @classmethod
    def victory(cls, age: Age) -> PoachingOutcome:
        return cls(kind=OutcomeKind.VICTORY, age=age)

    @property
    def points(self) -> int:
        if self.kind == OutcomeKind.DEFEAT:
            return -1
        return {Age.AGE1: 1, Age.AGE2: 3, Age.AGE3: 5}[self.age]

    def __str__(self) -> str:
        if self.kind == OutcomeKind.DEFEAT:
            return "defeat"
        return f"victory (age {int(self.age)})"


@dataclass(frozen=True)
class Cost:
    """Resource multiset plus a funding amount."""
    resources: tuple[Resource, ...] = ()
    funding: int = 0

    @classmethod
    def of(cls, codes: str = "", funding: int = 0) -> Cost:
        return cls(resources=parse_resources(codes), funding=funding)

    @property
    def needs(self) -> Counter:
        return Counter(self.resources)


@dataclass(frozen=True)
class Card:
    """
    An immutable card value.

    Company stage cards have no age, no type and no player requirement.
    `free_cards` lists the names this card lets its owner build for free.
    """
    name: str
    age: Age | None
    card_type: CardType | None
    min_players: int | None
    cost: Cost = Cost()
    effects: tuple[Any, ...] = ()
    free_cards: tuple[str, ...] = ()

    @property
    def is_company_card(self) -> bool:
        return self.card_type is None

    def __deepcopy__(self, memo) -> Card:
        # Cards are shared by reference, even inside state snapshots
        return self

    def __str__(self) -> str:
        return self.name


@dataclass
class PlayerState:
    """
    Mutable record of one seated player.

    `cards` holds every card the player owns, in the order they were added.
    `neighborhood` is (left, right) and is fixed at setup.
    """
    player_id: str
    company_profile: CompanyProfile | None = None
    company_stage: CompanyStage = CompanyStage.PROJECT
    cards: list[Card] = field(default_factory=list)
    funds: int = 0
    neighborhood: tuple[str, str] | None = None
    poaching_results: list[PoachingOutcome] = field(default_factory=list)

    # Ages whose Opportunity has already been spent
    used_opportunities: set[Age] = field(default_factory=set)

    def neighbor(self, direction: Neighbor) -> str:
        """Get the id of the neighbor in the given direction."""
        if self.neighborhood is None:
            raise EngineFault(f"{self.player_id} has no neighbors assigned")
        left, right = self.neighborhood
        return left if direction == Neighbor.LEFT else right

    @property
    def effects(self) -> list[Any]:
        """Active capability set: every effect of every owned card."""
        return [effect for card in self.cards for effect in card.effects]

    def count_cards(self, card_types) -> int:
        return sum(1 for card in self.cards if card.card_type in card_types)


@dataclass
class GameState:
    """
    Complete match state.

    Owns the RNG, the player map and the discard pile. The catalog
    is a read-only collaborator carried along for convenience.
    """
    catalog: Catalog
    rng: Rng
    player_map: dict[str, PlayerState] = field(default_factory=dict)
    discard_pile: list[Card] = field(default_factory=list)

    @classmethod
    def create(cls, player_ids: list[str], catalog: Catalog, rng: Rng) -> GameState:
        """Create a state with one blank entry per seated player."""
        if len(set(player_ids)) != len(player_ids):
            raise EngineFault(f"Duplicate player ids: {player_ids}")
        return cls(
            catalog=catalog,
            rng=rng,
            player_map={pid: PlayerState(player_id=pid) for pid in player_ids},
        )

    @property
    def player_ids(self) -> list[str]:
        """Player ids in the fixed resolution order."""
        return sorted(self.player_map)

    @property
    def num_players(self) -> int:
        return len(self.player_map)

    def get_player(self, player_id: str) -> PlayerState:
        """Get player by id. An unknown id is an engine fault."""
        try:
            return self.player_map[player_id]
        except KeyError:
            raise EngineFault(f"Could not retrieve player {player_id!r} state") from None

    def neighbor_of(self, player_id: str, direction: Neighbor) -> PlayerState:
        return self.get_player(self.get_player(player_id).neighbor(direction))

    def clone(self) -> GameState:
        """Deep copy the state (cards and catalog stay shared)."""
        return deepcopy(self)
