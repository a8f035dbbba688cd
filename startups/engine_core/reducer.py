"""
Reducer - Resolves one player's revealed decision.

The reducer is the single point where a player's action mutates state.

Design principles:
- Validates before applying
- A RuleViolation leaves the acting player and the discard pile untouched
- Funding earned by the action is returned, not applied (see AddMap)
"""

from __future__ import annotations
import logging
from collections import Counter
from contextlib import contextmanager
from typing import Iterator

from .action import ActionOutcome, ActionType, AddMap, Decision
from .effects import free_construction, opportunity_ages
from .errors import EngineFault, RuleViolation
from .exchange import Market, available_resources, is_subset, resolve_exchange
from .state import DROP_REWARD, Age, Card, GameState, PlayerState

logger = logging.getLogger(__name__)


def is_affordable(player: PlayerState, extra_resources: Counter, card: Card) -> bool:
    """Whether owned plus exchanged resources cover the card's resource cost."""
    needs = card.cost.needs
    if not needs:
        return True
    return any(
        is_subset(needs, own + extra_resources)
        for own in available_resources(player)
    )


def play_card(
    state: GameState,
    age: Age,
    player_id: str,
    extra_resources: Counter,
    card: Card,
) -> None:
    """
    Add a card to a player's cards, paying for it if needed.

    Precedence:
    1. Enough funds and resources: pay the funding cost
    2. Free construction granted by an owned card
    3. Unspent Opportunity for this age (typed cards only): spend it
    4. Otherwise the player cannot afford the card
    """
    player = state.get_player(player_id)
    funding_cost = card.cost.funding

    if funding_cost <= player.funds and is_affordable(player, extra_resources, card):
        player.funds -= funding_cost
    elif card.name in free_construction(player):
        logger.debug("%s builds %s for free", player_id, card.name)
    elif age in opportunity_ages(player) and card.card_type is not None:
        player.used_opportunities.add(age)
        logger.debug("%s spends the age %d opportunity on %s", player_id, age, card.name)
    else:
        raise RuleViolation(
            player_id,
            RuleViolation.CANNOT_AFFORD,
            f"tried to play {card.name} without the resources for it",
        )

    player.cards.append(card)


@contextmanager
def _rollback_on_violation(state: GameState, player: PlayerState) -> Iterator[None]:
    """Restore the acting player and the discard pile if a rule is broken."""
    funds = player.funds
    cards = list(player.cards)
    stage = player.company_stage
    used = set(player.used_opportunities)
    discard = list(state.discard_pile)
    try:
        yield
    except RuleViolation:
        player.funds = funds
        player.cards = cards
        player.company_stage = stage
        player.used_opportunities = used
        state.discard_pile[:] = discard
        raise


def resolve_action(
    state: GameState,
    age: Age,
    player_id: str,
    hand: list[Card],
    decision: Decision,
    market: Market | None = None,
) -> ActionOutcome:
    """
    Resolve a revealed (action, exchange) pair against a player's hand.

    Returns the new hand, the funding deltas earned by this action and
    the card actually played (the company stage card for BUILD_COMPANY,
    None for a drop).
    """
    if not hand:
        raise EngineFault(f"Empty hand reached action resolution for {player_id}")

    player = state.get_player(player_id)
    action = decision.action
    card = action.card

    if card not in hand:
        raise RuleViolation(
            player_id,
            RuleViolation.CARD_NOT_IN_HAND,
            f"tried to play a card that was not in the hand: {card.name}",
        )

    new_hand = list(hand)
    new_hand.remove(card)

    reward = 0
    played: Card | None = None

    with _rollback_on_violation(state, player):
        extra_resources, payout = resolve_exchange(state, player_id, decision.exchange, market)

        if action.action_type == ActionType.DROP:
            state.discard_pile.append(card)
            reward = DROP_REWARD

        elif action.action_type == ActionType.PLAY:
            play_card(state, age, player_id, extra_resources, card)
            played = card

        elif action.action_type == ActionType.BUILD_COMPANY:
            profile = player.company_profile
            current = player.company_stage
            if current >= state.catalog.max_stage(profile):
                raise RuleViolation(
                    player_id,
                    RuleViolation.MAX_STAGE_REACHED,
                    "tried to increase the company stage beyond the limit",
                )
            next_stage = current.next
            stage_card = state.catalog.stage_card(profile, next_stage)
            play_card(state, age, player_id, extra_resources, stage_card)
            player.company_stage = next_stage
            played = stage_card

        else:
            raise EngineFault(f"Unknown action type: {action.action_type}")

    logger.debug("%s resolved %s", player_id, action)
    return ActionOutcome(
        hand=new_hand,
        payout=payout + AddMap.single(player_id, reward),
        played=played,
    )
