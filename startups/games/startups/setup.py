"""
Startups Game Setup - Creates the initial game state and deals hands.

This module handles:
- Seating players in a random neighbor cycle
- Assigning a random company and side to each player
- Starting cards and funds
- Dealing the 7-card hands of each age

Every random draw goes through the state's Rng, so setup and dealing
are reproducible from the seed.
"""

from __future__ import annotations

from ...engine_core.errors import EngineFault
from ...engine_core.rng import Rng
from ...engine_core.state import (
    HAND_SIZE,
    STARTING_FUNDS,
    Age,
    Card,
    CompanyProfile,
    CompanyStage,
    GameState,
    Side,
)
from .catalog import Catalog, default_catalog


def init_game(state: GameState) -> None:
    """
    Initialize an existing player map.

    Ensures:
    - every player owns the project card of their company
    - every player has a left and a right neighbor, forming one cycle
    - every player starts with the same funds
    """
    catalog = state.catalog
    companies = catalog.available_companies()
    if len(companies) < state.num_players:
        raise EngineFault(
            f"{state.num_players} players but only {len(companies)} companies available"
        )

    state.discard_pile.clear()
    seating = state.rng.shuffle(state.player_ids)
    companies = state.rng.shuffle(companies)
    count = len(seating)

    for index, (player_id, company) in enumerate(zip(seating, companies)):
        left = seating[(index + 1) % count]
        right = seating[(index - 1) % count]
        side = Side.A if state.rng.draw(2) == 0 else Side.B
        profile = CompanyProfile(company, side)

        player = state.get_player(player_id)
        player.company_profile = profile
        player.company_stage = CompanyStage.PROJECT
        player.cards = [catalog.stage_card(profile, CompanyStage.PROJECT)]
        player.funds = STARTING_FUNDS
        player.neighborhood = (left, right)
        player.poaching_results = []
        player.used_opportunities = set()


def deal_cards(state: GameState, age: Age) -> dict[str, list[Card]]:
    """
    Shuffle the cards of an age and deal 7 to each player.

    In the last age, player count + 2 community cards join the pool.
    Cards beyond 7 per player stay undealt.
    """
    player_ids = state.player_ids
    count = len(player_ids)

    pool = state.catalog.age_cards(age, count)
    if age == Age.AGE3:
        communities = state.rng.shuffle(state.catalog.communities)[:count + 2]
        pool = communities + pool

    if len(pool) < HAND_SIZE * count:
        raise EngineFault(
            f"Not enough cards for age {int(age)}. "
            f"Required: {HAND_SIZE * count}, Found: {len(pool)}"
        )

    shuffled = state.rng.shuffle(pool)
    return {
        player_id: shuffled[index * HAND_SIZE:(index + 1) * HAND_SIZE]
        for index, player_id in enumerate(player_ids)
    }


def create_game_state(
    player_ids: list[str],
    seed: int | None = None,
    catalog: Catalog | None = None,
) -> GameState:
    """
    Create a state with one blank entry per player.

    Args:
        player_ids: Ids of the seated players
        seed: Seed for deterministic shuffling
        catalog: Game content (creates default if not provided)

    Returns:
        GameState awaiting init_game
    """
    return GameState.create(
        player_ids=list(player_ids),
        catalog=catalog or default_catalog(),
        rng=Rng(seed),
    )


def setup_startups_game(
    player_ids: list[str],
    seed: int | None = None,
    catalog: Catalog | None = None,
) -> GameState:
    """Create and initialize a state, ready for the first age."""
    state = create_game_state(player_ids, seed, catalog)
    init_game(state)
    return state
