"""
Catalog - Read-only provider of cards and company profiles.

The engine only queries the catalog; it never mutates it. Tests build
small catalogs of their own to exercise specific situations.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ...engine_core.errors import EngineFault
from ...engine_core.state import Age, Card, Company, CompanyProfile, CompanyStage
from .cards import ALL_CARDS, COMMUNITY_CARDS
from .companies import build_company_cards


@dataclass
class Catalog:
    """
    Static game content.

    `companies` maps a profile to its stage cards, starting at PROJECT.
    """
    cards: list[Card] = field(default_factory=list)
    communities: list[Card] = field(default_factory=list)
    companies: dict[CompanyProfile, list[Card]] = field(default_factory=dict)

    def age_cards(self, age: Age, player_count: int) -> list[Card]:
        """Cards of an age that are eligible for the table size."""
        return [
            card for card in self.cards
            if card.age == age
            and card.min_players is not None
            and card.min_players <= player_count
        ]

    def available_companies(self) -> list[Company]:
        """Companies with at least one profile, in declaration order."""
        return list(dict.fromkeys(profile.company for profile in self.companies))

    def stage_cards(self, profile: CompanyProfile) -> list[Card]:
        try:
            return self.companies[profile]
        except KeyError:
            raise EngineFault(f"Unknown company profile: {profile}") from None

    def stage_card(self, profile: CompanyProfile, stage: CompanyStage) -> Card:
        cards = self.stage_cards(profile)
        if stage >= len(cards):
            raise EngineFault(f"{profile} has no {stage.name} stage")
        return cards[stage]

    def max_stage(self, profile: CompanyProfile) -> CompanyStage:
        return CompanyStage(len(self.stage_cards(profile)) - 1)

    def __deepcopy__(self, memo) -> Catalog:
        # Read-only; state snapshots share it
        return self


def default_catalog() -> Catalog:
    """The full card set and the seven companies."""
    return Catalog(
        cards=list(ALL_CARDS),
        communities=list(COMMUNITY_CARDS),
        companies=build_company_cards(),
    )
