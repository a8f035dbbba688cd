"""End-of-age poaching comparison."""

from __future__ import annotations

from .effects import poaching_strength
from .state import Age, GameState, PoachingOutcome


def resolve_poaching(age: Age, state: GameState) -> dict[str, list[PoachingOutcome]]:
    """
    Compare every player's poaching strength with both neighbors.

    Weaker than a neighbor is a defeat, stronger is a victory for this
    age, a tie records nothing. Outcomes are returned, not applied.
    """
    strengths = {pid: poaching_strength(p) for pid, p in state.player_map.items()}
    outcomes: dict[str, list[PoachingOutcome]] = {}

    for pid in state.player_ids:
        player = state.get_player(pid)
        own = strengths[pid]
        results = []
        for neighbor_id in player.neighborhood:
            other = strengths[neighbor_id]
            if other > own:
                results.append(PoachingOutcome.defeat())
            elif other < own:
                results.append(PoachingOutcome.victory(age))
        outcomes[pid] = results

    return outcomes
