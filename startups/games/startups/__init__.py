"""
Startups - The card-drafting economic game.

Players run a company through three ages, drafting cards, trading
resources with their neighbors and scoring from funding, research
and poaching.

This module contains:
- Card catalog for the three ages and the community cards
- Company profiles (7 companies, 2 sides each)
- Catalog provider
- Game setup and dealing
"""

from .catalog import Catalog, default_catalog
from .cards import ALL_CARDS, COMMUNITY_CARDS, get_card_by_name
from .companies import build_company_cards
from .setup import create_game_state, deal_cards, init_game, setup_startups_game

__all__ = [
    "Catalog",
    "default_catalog",
    "ALL_CARDS",
    "COMMUNITY_CARDS",
    "get_card_by_name",
    "build_company_cards",
    "create_game_state",
    "deal_cards",
    "init_game",
    "setup_startups_game",
]
