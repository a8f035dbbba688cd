"""
Resource availability and neighbor exchanges.

Exchanges are priced per resource unit and paid immediately by the
requester. The neighbor's income is only recorded (as an AddMap) and
applied once every player's action of the turn has been resolved, so a
player can never spend money a neighbor has not actually received yet.
"""

from __future__ import annotations
import logging
from collections import Counter

from .action import AddMap, Exchange
from .effects import CheaperExchange, ProvideResource, ResourceChoice
from .errors import RuleViolation
from .state import GameState, Neighbor, PlayerState, Resource, Sharing, resource_key

logger = logging.getLogger(__name__)

DEFAULT_EXCHANGE_COST = 2
CHEAP_EXCHANGE_COST = 1

# Player id -> resource multisets the player can offer to neighbors
Market = dict[str, list[Counter]]


def available_resources(player: PlayerState, exchange_only: bool = False) -> list[Counter]:
    """
    Every resource multiset the player can produce this turn.

    Choice effects multiply the options. With exchange_only, personal
    resources are left out (they cannot be sold).
    """
    options: set[tuple[Resource, ...]] = {()}
    for effect in player.effects:
        if not isinstance(effect, (ProvideResource, ResourceChoice)):
            continue
        if exchange_only and effect.sharing != Sharing.SHARED:
            continue
        if isinstance(effect, ProvideResource):
            produced = [(effect.resource,) * effect.amount]
        else:
            produced = [(r,) for r in effect.resources]
        options = {
            resource_key(Counter(option + extra))
            for option in options
            for extra in produced
        }
    return [Counter(option) for option in sorted(options, key=_option_order)]


def _option_order(option: tuple[Resource, ...]) -> tuple[str, ...]:
    return tuple(r.value for r in option)


def is_subset(request: Counter, offer: Counter) -> bool:
    return all(offer[resource] >= count for resource, count in request.items() if count > 0)


def can_supply(options: list[Counter], request: Counter) -> bool:
    return any(is_subset(request, option) for option in options)


def exchange_cost(requester: PlayerState, direction: Neighbor, resource: Resource) -> int:
    """Price of one unit bought from the neighbor in the given direction."""
    for effect in requester.effects:
        if (
            isinstance(effect, CheaperExchange)
            and direction in effect.neighbors
            and resource in effect.resources
        ):
            return CHEAP_EXCHANGE_COST
    return DEFAULT_EXCHANGE_COST


def request_cost(requester: PlayerState, direction: Neighbor, request: Counter) -> int:
    return sum(
        exchange_cost(requester, direction, resource) * count
        for resource, count in request.items()
        if count > 0
    )


def market_snapshot(state: GameState) -> Market:
    """What each player can sell, captured before a turn is resolved."""
    return {
        pid: available_resources(player, exchange_only=True)
        for pid, player in state.player_map.items()
    }


def resolve_exchange(
    state: GameState,
    player_id: str,
    exchange: Exchange,
    market: Market | None = None,
) -> tuple[Counter, AddMap]:
    """
    Resolve a player's exchange request.

    Every direction is checked before anything is debited. On success
    the requester pays at once and the neighbors' credits are returned.

    Returns (granted resources, deferred neighbor credits).
    """
    player = state.get_player(player_id)
    if market is None:
        market = market_snapshot(state)

    granted: Counter[Resource] = Counter()
    payout = AddMap()
    total_cost = 0

    for direction in (Neighbor.LEFT, Neighbor.RIGHT):
        request = +Counter(exchange.get(direction, Counter()))
        if not request:
            continue

        neighbor_id = player.neighbor(direction)
        cost = request_cost(player, direction, request)
        if total_cost + cost > player.funds:
            raise RuleViolation(
                player_id,
                RuleViolation.INSUFFICIENT_FUNDS,
                "tried to perform an exchange without enough funding",
            )
        if not can_supply(market.get(neighbor_id, []), request):
            raise RuleViolation(
                player_id,
                RuleViolation.NEIGHBOR_LACKS_RESOURCES,
                f"neighbor {neighbor_id} doesn't have enough resources",
            )

        total_cost += cost
        granted.update(request)
        payout = payout + AddMap.single(neighbor_id, cost)

    if total_cost:
        player.funds -= total_cost
        logger.debug("%s paid %d for exchanged resources", player_id, total_cost)

    return granted, payout
