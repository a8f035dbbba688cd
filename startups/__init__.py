"""
Startups - Rules engine for a card-drafting economic game.

Players each run a company through three ages: drafting cards,
buying resources from their neighbors and scoring victory points from
funding, research and poaching. The engine provides:
- State management and seeded setup
- Simultaneous turn resolution
- Legal action generation
- Bot decision sources
- Final scoring
"""

__version__ = "0.1.0"
