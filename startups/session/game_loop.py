"""
Game Loop - Drives a match from setup to final scores.

The loop:
1. Initialize companies, seating and funds
2. For each age: deal, play 7 turns, rotate hands, resolve poaching
3. Resolve Copy Community
4. Compute victory points

Each turn is simultaneous: every decision is collected before any of
them is resolved, and resolution happens in sorted player id order.
"""

from __future__ import annotations
import logging
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core.action import AddMap, Decision, PlayerAction
from ..engine_core.effects import CopyCommunity, Efficiency, Recycling, has_effect
from ..engine_core.errors import DecisionTimeout, EngineError, EngineFault, RuleViolation
from ..engine_core.exchange import market_snapshot
from ..engine_core.poaching import resolve_poaching
from ..engine_core.reducer import resolve_action
from ..engine_core.scoring import card_funding, victory_points
from ..engine_core.state import (
    TURNS_PER_AGE,
    Age,
    Card,
    CardType,
    GameState,
    Neighbor,
    VictoryType,
    resource_key,
)
from ..games.startups.setup import deal_cards, init_game
from .narration import LoggingNarrator, Narrator

if TYPE_CHECKING:
    from ..bots.policy import DecisionSource

logger = logging.getLogger(__name__)

Hands = dict[str, list[Card]]


class LoopState(Enum):
    """State of the game loop."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    GAME_OVER = "game_over"
    ABORTED = "aborted"


@dataclass
class TurnResult:
    """
    Record of one resolved turn.

    `decisions` holds what was actually resolved, forced drops
    included. `forced` maps a player to the reason their decision
    was replaced.
    """
    age: Age
    turn: int
    decisions: dict[str, Decision] = field(default_factory=dict)
    forced: dict[str, str] = field(default_factory=dict)
    recycled: dict[str, Card] = field(default_factory=dict)


class GameLoop:
    """
    The match driver.

    Usage:
        state = create_game_state(["alice", "bob", "carol"], seed=7)
        loop = GameLoop(state, sources={pid: FirstLegalPolicy() for pid in state.player_ids})
        scores = loop.play_game()

    The timeout only applies when decisions are collected on worker
    threads (parallel mode, or whenever a timeout is set).
    """

    def __init__(
        self,
        state: GameState,
        sources: dict[str, DecisionSource],
        narrator: Narrator | None = None,
        decision_timeout: float | None = None,
        parallel_decisions: bool = False,
    ):
        missing = set(state.player_ids) - set(sources)
        if missing:
            raise EngineFault(f"No decision source for: {sorted(missing)}")
        self.state = state
        self.sources = sources
        self.narrator = narrator or LoggingNarrator()
        self.decision_timeout = decision_timeout
        self.parallel_decisions = parallel_decisions
        self.loop_state = LoopState.NOT_STARTED
        self.history: list[TurnResult] = []
        # Timed-out decide() calls still running, by player
        self._pending: dict[str, Future] = {}

    # ------------------------------------------------------------------
    # Decision collection
    # ------------------------------------------------------------------

    def collect_decisions(self, age: Age, turn: int, hands: Hands) -> dict[str, Decision | None]:
        """
        Ask every player in `hands` for a decision before resolving any.

        A player whose source timed out maps to None.
        """
        for player_id, hand in hands.items():
            if not hand:
                raise EngineFault(f"Empty hand reached decision collection for {player_id}")

        if self.parallel_decisions or self.decision_timeout is not None:
            return self._collect_concurrently(age, turn, hands)

        return {
            player_id: self._ask(age, turn, player_id, hand, self.state.clone())
            for player_id, hand in sorted(hands.items())
        }

    def _ask(self, age: Age, turn: int, player_id: str, hand: list[Card], snapshot: GameState) -> Decision:
        try:
            decision = self.sources[player_id].decide(age, turn, player_id, list(hand), snapshot)
        except EngineError:
            raise
        except Exception as e:
            raise EngineFault(f"Decision source for {player_id} failed: {e!r}") from e
        if not isinstance(decision, Decision):
            raise EngineFault(f"Decision source for {player_id} returned {decision!r}")
        return decision

    def _collect_concurrently(self, age: Age, turn: int, hands: Hands) -> dict[str, Decision | None]:
        """
        Fan the requests out to worker threads and join with the timeout.

        A call that times out keeps running in the background; its
        player is not asked again until it has returned, so a source
        never serves two requests for the same player at once. Once a
        timeout fires, the match is no longer reproducible from its seed.
        """
        executor = ThreadPoolExecutor(max_workers=max(len(hands), 1))
        try:
            futures: dict[str, Future] = {}
            for player_id, hand in sorted(hands.items()):
                previous = self._pending.get(player_id)
                if previous is not None and not previous.done():
                    logger.warning("%s is still deciding a previous turn", player_id)
                    continue
                self._pending.pop(player_id, None)
                futures[player_id] = executor.submit(
                    self._ask, age, turn, player_id, hand, self.state.clone()
                )
            wait(futures.values(), timeout=self.decision_timeout)

            decisions: dict[str, Decision | None] = {pid: None for pid in hands}
            for player_id, future in futures.items():
                if future.done():
                    decisions[player_id] = future.result()
                else:
                    logger.warning("%s did not decide within %ss", player_id, self.decision_timeout)
                    self._pending[player_id] = future
            return decisions
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _revealed(self, decisions: dict[str, Decision | None], player_id: str) -> Decision:
        if player_id not in decisions:
            raise EngineFault(f"No decision was collected for {player_id}")
        decision = decisions[player_id]
        if decision is None:
            raise DecisionTimeout(player_id, self.decision_timeout)
        return decision

    # ------------------------------------------------------------------
    # Turn
    # ------------------------------------------------------------------

    def play_turn(self, age: Age, turn: int, hands: Hands) -> Hands:
        """
        Play one turn and return the hands left afterwards.

        On the 7th turn only Efficiency holders play; everyone else
        keeps their hand untouched.
        """
        state = self.state
        if turn == TURNS_PER_AGE:
            playing = {
                pid: hand for pid, hand in hands.items()
                if has_effect(state.get_player(pid), Efficiency)
            }
        else:
            playing = dict(hands)

        result = TurnResult(age=age, turn=turn)
        decisions = self.collect_decisions(age, turn, playing)
        unexpected = set(decisions) - set(playing)
        if unexpected:
            raise EngineFault(f"Decisions for players who were not asked: {sorted(unexpected)}")
        market = market_snapshot(state)

        new_hands = dict(hands)
        payouts: list[AddMap] = []
        played: dict[str, Card] = {}

        for player_id in sorted(playing):
            hand = playing[player_id]
            try:
                decision = self._revealed(decisions, player_id)
            except DecisionTimeout as timeout:
                self.narrator.tell(player_id, "You did not decide in time.")
                decision = self._forced_drop(result, player_id, hand, None, str(timeout))
            try:
                outcome = resolve_action(state, age, player_id, hand, decision, market)
            except RuleViolation as violation:
                self.narrator.tell(player_id, f"Your action was rejected: {violation.reason}")
                logger.warning("Rule violation by %s (%s): %s", player_id, violation.code, violation.reason)
                decision = self._forced_drop(result, player_id, hand, decision.action.card, violation.reason)
                outcome = resolve_action(state, age, player_id, hand, decision, market)

            result.decisions[player_id] = decision
            new_hands[player_id] = outcome.hand
            payouts.append(outcome.payout)
            if outcome.played is not None:
                played[player_id] = outcome.played

        # Exchange credits and drop rewards first, card yields second
        for player_id, amount in AddMap.merge_all(payouts).items():
            state.get_player(player_id).funds += amount
        yields = {pid: card_funding(state, pid, card) for pid, card in played.items()}
        for player_id, amount in sorted(yields.items()):
            state.get_player(player_id).funds += amount

        self._recap(age, turn, result)
        self._resolve_recycling(age, played, result)

        self.history.append(result)
        return new_hands

    def _forced_drop(
        self,
        result: TurnResult,
        player_id: str,
        hand: list[Card],
        chosen: Card | None,
        reason: str,
    ) -> Decision:
        card = chosen if chosen in hand else hand[0]
        self.narrator.tell(player_id, f"{card.name} is dropped instead")
        logger.warning("Forcing %s to drop %s", player_id, card.name)
        result.forced[player_id] = reason
        return Decision(PlayerAction.drop(card), {}, "forced drop")

    def _resolve_recycling(self, age: Age, played: dict[str, Card], result: TurnResult) -> None:
        """
        Let owners of a just-played Recycling card take a discarded card.

        The discard pile is read as it stands right now, so cards
        discarded at the end of this age are not offered.
        """
        state = self.state
        for player_id in sorted(played):
            if not any(isinstance(e, Recycling) for e in played[player_id].effects):
                continue
            if not state.discard_pile:
                self.narrator.tell(player_id, "The discard pile was empty, you can't recycle.")
                continue

            self.narrator.general(f"{player_id} is going to use their recycle ability.")
            options = list(state.discard_pile)
            card = self.sources[player_id].choose_card(
                age, player_id, options, "Choose a card to recycle (play for free)", state.clone()
            )
            if card not in options:
                raise EngineFault(f"{player_id} recycled a card that is not in the discard pile")
            state.discard_pile.remove(card)
            state.get_player(player_id).cards.append(card)
            result.recycled[player_id] = card
            self.narrator.general(f"{player_id} recycled {card.name}")

    def _recap(self, age: Age, turn: int, result: TurnResult) -> None:
        lines = [f"Age {int(age)}, turn {turn}:"]
        for player_id, decision in sorted(result.decisions.items()):
            line = f"  {player_id}: {decision.action}"
            bought = [
                f"{''.join(r.value for r in resource_key(request))} from {direction.value}"
                for direction, request in sorted(decision.exchange.items(), key=lambda item: item[0].value)
                if request
            ]
            if bought:
                line += f" (bought {', '.join(bought)})"
            lines.append(line)
        self.narrator.general("\n".join(lines))

    # ------------------------------------------------------------------
    # Ages
    # ------------------------------------------------------------------

    def rotate_hands(self, age: Age, hands: Hands) -> Hands:
        """
        Pass hands one seat over.

        Each player receives the hand of their left neighbor in the
        second age and of their right neighbor otherwise.
        """
        direction = Neighbor.LEFT if age == Age.AGE2 else Neighbor.RIGHT
        return {
            player_id: hands.get(self.state.get_player(player_id).neighbor(direction), [])
            for player_id in hands
        }

    def play_age(self, age: Age) -> None:
        """Deal, play the 7 turns, discard leftovers and resolve poaching."""
        hands = deal_cards(self.state, age)
        for turn in range(1, TURNS_PER_AGE + 1):
            hands = self.play_turn(age, turn, hands)
            # The last two cards of an age are not passed on
            if turn < TURNS_PER_AGE - 1:
                hands = self.rotate_hands(age, hands)

        for player_id in sorted(hands):
            self.state.discard_pile.extend(hands[player_id])

        outcomes = resolve_poaching(age, self.state)
        lines = []
        for player_id, results in sorted(outcomes.items()):
            self.state.get_player(player_id).poaching_results.extend(results)
            if results:
                lines.append(
                    f"{player_id} received the following poaching tokens: "
                    + ", ".join(str(r) for r in results)
                )
        if lines:
            self.narrator.general("\n".join(lines))

    def check_copy_community(self) -> None:
        """
        Let CopyCommunity owners copy a community card of a neighbor.

        Candidates are gathered for every owner before anyone copies,
        so a copied card is never itself offered for copying.
        """
        state = self.state
        candidates: dict[str, list[Card]] = {}
        for player_id in state.player_ids:
            player = state.get_player(player_id)
            if not has_effect(player, CopyCommunity):
                continue
            candidates[player_id] = [
                card
                for direction in (Neighbor.LEFT, Neighbor.RIGHT)
                for card in state.neighbor_of(player_id, direction).cards
                if card.card_type == CardType.COMMUNITY
            ]

        for player_id, options in candidates.items():
            if not options:
                self.narrator.tell(
                    player_id,
                    "There were no community cards bought by your neighbors. "
                    "You can't use your copy capacity.",
                )
                continue

            self.narrator.general(f"{player_id} is going to use their community copy ability.")
            card = self.sources[player_id].choose_card(
                Age.AGE3, player_id, options, "Which community would you like to copy?", state.clone()
            )
            if card not in options:
                raise EngineFault(f"{player_id} copied a card their neighbors do not own")
            state.get_player(player_id).cards.append(card)
            self.narrator.general(f"{player_id} copied {card.name}")

    def play_game(self) -> dict[str, dict[VictoryType, int]]:
        """
        Run a whole match on an uninitialized state.

        Returns:
            player id -> victory category -> points
        """
        self.loop_state = LoopState.PLAYING
        try:
            init_game(self.state)
            self.narrator.general(
                "Companies: " + ", ".join(
                    f"{pid} runs {self.state.get_player(pid).company_profile}"
                    for pid in self.state.player_ids
                )
            )
            for age in Age:
                logger.debug("Starting age %d", age)
                self.play_age(age)
            self.check_copy_community()
            scores = victory_points(self.state)
        except Exception:
            self.loop_state = LoopState.ABORTED
            raise
        self.loop_state = LoopState.GAME_OVER
        return scores
