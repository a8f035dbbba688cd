"""
Action Generator - Enumerates legal decisions for a hand.

Used by:
1. Bots to pick a move
2. Tests, to check what the engine will accept

Design: generates fully specified Decisions, exchange included.
Exchanges are planned greedily (cheapest neighbor first), so a card
may be playable in ways the generator does not find.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass

from .action import Decision, Exchange, PlayerAction
from .effects import free_construction, opportunity_ages
from .exchange import Market, available_resources, can_supply, exchange_cost, market_snapshot
from .state import Age, Card, GameState, Neighbor, PlayerState, resource_key


@dataclass
class ActionGenerator:
    """
    Generates legal decisions for one player.

    Stateless: the market is captured once per turn by the caller
    or computed from the state.
    """
    state: GameState
    market: Market | None = None

    def __post_init__(self):
        if self.market is None:
            self.market = market_snapshot(self.state)

    def generate(self, player_id: str, hand: list[Card], age: Age) -> list[Decision]:
        """
        All decisions found for the hand, in hand order.

        For each card: play it, use it for a company stage, drop it.
        Dropping is always legal.
        """
        player = self.state.get_player(player_id)
        decisions: list[Decision] = []

        stage_card = self._next_stage_card(player)

        for card in hand:
            exchange = self.payment_for(player, card, age)
            if exchange is not None:
                decisions.append(Decision(PlayerAction.play(card), exchange))

            if stage_card is not None:
                exchange = self.payment_for(player, stage_card, age)
                if exchange is not None:
                    decisions.append(Decision(PlayerAction.build_company(card), exchange))

            decisions.append(Decision(PlayerAction.drop(card)))

        return decisions

    def payment_for(self, player: PlayerState, card: Card, age: Age) -> Exchange | None:
        """
        An exchange that lets the player build the card, or None.

        Mirrors the play precedence: paying first, then free
        construction, then an unspent Opportunity.
        """
        budget = player.funds - card.cost.funding
        if budget >= 0:
            exchange = self.plan_exchange(player, card.cost.needs, budget)
            if exchange is not None:
                return exchange
        if card.name in free_construction(player):
            return {}
        if age in opportunity_ages(player) and card.card_type is not None:
            return {}
        return None

    def plan_exchange(self, player: PlayerState, needs: Counter, budget: int) -> Exchange | None:
        """Cheapest exchange found covering what the player cannot produce."""
        best: Exchange | None = None
        best_cost = budget + 1

        for own in available_resources(player):
            missing = needs - own
            if not missing:
                return {}
            planned = self._buy(player, missing)
            if planned is None:
                continue
            exchange, cost = planned
            if cost < best_cost:
                best, best_cost = exchange, cost

        return best

    def _buy(self, player: PlayerState, missing: Counter) -> tuple[Exchange, int] | None:
        requests = {Neighbor.LEFT: Counter(), Neighbor.RIGHT: Counter()}
        total = 0

        for resource in resource_key(missing):
            directions = sorted(
                (Neighbor.LEFT, Neighbor.RIGHT),
                key=lambda d: exchange_cost(player, d, resource),
            )
            for direction in directions:
                attempt = requests[direction] + Counter({resource: 1})
                offers = self.market.get(player.neighbor(direction), [])
                if can_supply(offers, attempt):
                    requests[direction] = attempt
                    total += exchange_cost(player, direction, resource)
                    break
            else:
                return None

        exchange = {d: request for d, request in requests.items() if request}
        return exchange, total

    def _next_stage_card(self, player: PlayerState) -> Card | None:
        profile = player.company_profile
        if profile is None or player.company_stage >= self.state.catalog.max_stage(profile):
            return None
        return self.state.catalog.stage_card(profile, player.company_stage.next)


def legal_actions(
    state: GameState,
    player_id: str,
    hand: list[Card],
    age: Age,
    market: Market | None = None,
) -> list[Decision]:
    """Convenience function to generate legal decisions."""
    return ActionGenerator(state, market).generate(player_id, hand, age)
