"""
Pytest fixtures for Startups tests.
"""

import pytest

from ..engine_core.rng import Rng
from ..engine_core.state import (
    STARTING_FUNDS,
    Age,
    Card,
    CardType,
    Company,
    CompanyProfile,
    CompanyStage,
    Cost,
    GameState,
    Side,
)
from ..games.startups.catalog import Catalog, default_catalog
from ..session.narration import RecordingNarrator


def make_card(
    name: str,
    card_type: CardType | None = CardType.COMMERCIAL,
    cost: str = "",
    funding: int = 0,
    effects=(),
    free=(),
    age: Age | None = Age.AGE1,
) -> Card:
    """Build a one-off card for a test."""
    return Card(
        name=name,
        age=age,
        card_type=card_type,
        min_players=3,
        cost=Cost.of(cost, funding),
        effects=tuple(effects),
        free_cards=tuple(free),
    )


def seat(state: GameState, player_id: str, profile: CompanyProfile, left: str, right: str):
    """Give a player a company, its project card and starting funds."""
    player = state.get_player(player_id)
    player.company_profile = profile
    player.company_stage = CompanyStage.PROJECT
    player.cards = [state.catalog.stage_card(profile, CompanyStage.PROJECT)]
    player.funds = STARTING_FUNDS
    player.neighborhood = (left, right)
    return player


@pytest.fixture
def catalog() -> Catalog:
    """The full game content."""
    return default_catalog()


@pytest.fixture
def three_player_state(catalog: Catalog) -> GameState:
    """
    Three seated players with fixed companies.

    alice (Facebook A, makes F): left bob, right carol
    bob (Twitter A, makes Y): left carol, right alice
    carol (Apple A, makes V): left alice, right bob
    """
    state = GameState.create(["alice", "bob", "carol"], catalog, Rng(1))
    seat(state, "alice", CompanyProfile(Company.FACEBOOK, Side.A), left="bob", right="carol")
    seat(state, "bob", CompanyProfile(Company.TWITTER, Side.A), left="carol", right="alice")
    seat(state, "carol", CompanyProfile(Company.APPLE, Side.A), left="alice", right="bob")
    return state


@pytest.fixture
def two_player_state(catalog: Catalog) -> GameState:
    """Two players who are each other's left and right neighbor."""
    state = GameState.create(["alice", "bob"], catalog, Rng(2))
    seat(state, "alice", CompanyProfile(Company.GOOGLE, Side.A), left="bob", right="bob")
    seat(state, "bob", CompanyProfile(Company.MICROSOFT, Side.A), left="alice", right="alice")
    return state


@pytest.fixture
def narrator() -> RecordingNarrator:
    return RecordingNarrator()
