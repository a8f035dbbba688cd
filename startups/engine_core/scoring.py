"""
Scoring - Card yields and final victory points.

Final score per player, grouped by VictoryType:
1. Poaching outcomes (-1 per defeat, 1/3/5 per victory by age)
2. Funds, one point per 3
3. Research, from the research table
4. Every card's AddVictory effects, scaled by their condition
"""

from __future__ import annotations
from collections import Counter

from .effects import (
    AddVictory,
    ByCompanyStage,
    ByPoachingResult,
    Condition,
    GainFunding,
    HappensOnce,
    PerCard,
    Target,
    research_types,
    scientific_jokers,
)
from .errors import EngineFault
from .state import Card, GameState, Neighbor, PlayerState, ResearchType, VictoryType

SET_BONUS = 7


def research_score(types: list[ResearchType], jokers: int) -> int:
    """
    Research points: the square of each type count, plus 7 per full set.

    Each joker is assigned to whichever type gives the best total.
    """
    counts = Counter(types)
    if jokers <= 0:
        values = [counts[t] for t in ResearchType]
        return sum(v * v for v in values) + SET_BONUS * min(values)
    return max(
        research_score(types + [research_type], jokers - 1)
        for research_type in ResearchType
    )


def _targeted_players(state: GameState, player: PlayerState, targets) -> list[PlayerState]:
    players = []
    if Target.OWN in targets:
        players.append(player)
    if Target.LEFT in targets:
        players.append(state.get_player(player.neighbor(Neighbor.LEFT)))
    if Target.RIGHT in targets:
        players.append(state.get_player(player.neighbor(Neighbor.RIGHT)))
    return players


def condition_matches(condition: Condition, player: PlayerState, state: GameState) -> int:
    """How many times a condition currently triggers for a player."""
    if isinstance(condition, HappensOnce):
        return 1
    if isinstance(condition, PerCard):
        return sum(
            p.count_cards(condition.card_types)
            for p in _targeted_players(state, player, condition.targets)
        )
    if isinstance(condition, ByPoachingResult):
        return sum(
            1
            for p in _targeted_players(state, player, condition.targets)
            for outcome in p.poaching_results
            if outcome.kind in condition.kinds
        )
    if isinstance(condition, ByCompanyStage):
        return sum(
            int(p.company_stage)
            for p in _targeted_players(state, player, condition.targets)
        )
    raise EngineFault(f"Unknown condition: {condition!r}")


def card_funding(state: GameState, player_id: str, card: Card) -> int:
    """Funding a card yields when played, against the current state."""
    player = state.get_player(player_id)
    return sum(
        effect.amount * condition_matches(effect.condition, player, state)
        for effect in card.effects
        if isinstance(effect, GainFunding)
    )


def card_victory(state: GameState, player_id: str, card: Card) -> list[tuple[VictoryType, int]]:
    """Victory points a card grants at the end of the game."""
    player = state.get_player(player_id)
    return [
        (effect.category, effect.points * condition_matches(effect.condition, player, state))
        for effect in card.effects
        if isinstance(effect, AddVictory)
    ]


def player_score(state: GameState, player_id: str) -> dict[VictoryType, int]:
    player = state.get_player(player_id)
    contributions = [
        (VictoryType.POACHING, sum(o.points for o in player.poaching_results)),
        (VictoryType.FUNDING, player.funds // 3),
        (VictoryType.RESEARCH, research_score(research_types(player), scientific_jokers(player))),
    ]
    for card in player.cards:
        contributions.extend(card_victory(state, player_id, card))

    score: dict[VictoryType, int] = {}
    for category, points in contributions:
        score[category] = score.get(category, 0) + points
    return score


def victory_points(state: GameState) -> dict[str, dict[VictoryType, int]]:
    """The terminal result of a match: player id -> category -> points."""
    return {pid: player_score(state, pid) for pid in state.player_ids}


def total_points(score: dict[VictoryType, int]) -> int:
    return sum(score.values())
