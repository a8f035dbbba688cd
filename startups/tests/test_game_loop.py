"""
Tests for turn orchestration.

Tests:
- Simultaneous decision collection
- Two-phase payouts
- Turn 7 participation and hand rotation
- Forced drops on violations and timeouts
- Recycling and Copy Community
"""

import threading

import pytest

from ..bots import Decision, DecisionSource, FirstLegalPolicy, ScriptedPolicy
from ..engine_core.action import PlayerAction, make_exchange
from ..engine_core.effects import (
    CopyCommunity,
    Efficiency,
    GainFunding,
    Poaching,
    Recycling,
)
from ..engine_core.errors import EngineFault, RuleViolation
from ..engine_core.state import Age, CardType, Neighbor, OutcomeKind
from ..games.startups.setup import setup_startups_game
from ..session.game_loop import GameLoop
from .conftest import make_card


class DropFirst(DecisionSource):
    """Always drops the first card; remembers the funds it was shown."""

    def __init__(self):
        self.seen_funds = []

    def decide(self, age, turn, player_id, hand, state):
        self.seen_funds.append({pid: p.funds for pid, p in state.player_map.items()})
        state.get_player(player_id).funds = 999
        return Decision(PlayerAction.drop(hand[0]))

    def choose_card(self, age, player_id, options, prompt, state):
        return options[0]


class Stalling(DecisionSource):
    """Never answers until released."""

    def __init__(self):
        self.release = threading.Event()
        self.calls = []

    def decide(self, age, turn, player_id, hand, state):
        self.calls.append((turn, player_id))
        self.release.wait(5)
        return Decision(PlayerAction.play(hand[0]))

    def choose_card(self, age, player_id, options, prompt, state):
        return options[0]


class HandRecorder(DecisionSource):
    """Drops the first card; remembers every hand it was shown."""

    def __init__(self):
        self.hands = {}

    def decide(self, age, turn, player_id, hand, state):
        self.hands[(turn, player_id)] = list(hand)
        return Decision(PlayerAction.drop(hand[0]))

    def choose_card(self, age, player_id, options, prompt, state):
        return options[0]


class ExtraDecision(GameLoop):
    """Reports a decision for carol whoever was asked."""

    def collect_decisions(self, age, turn, hands):
        decisions = super().collect_decisions(age, turn, hands)
        decisions["carol"] = Decision(PlayerAction.drop(make_card("carol card")))
        return decisions


def loop_for(state, source, narrator=None, **kwargs):
    return GameLoop(state, {pid: source for pid in state.player_ids}, narrator, **kwargs)


class TestDecisionCollection:
    """Tests for the collect-then-resolve barrier."""

    def test_sources_see_pre_turn_snapshot(self, three_player_state):
        """Every source sees the same funds, and cannot change the real state."""
        state = three_player_state
        source = DropFirst()
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}

        loop_for(state, source).play_turn(Age.AGE1, 1, hands)

        assert len(source.seen_funds) == 3
        assert all(seen == {"alice": 3, "bob": 3, "carol": 3} for seen in source.seen_funds)
        assert all(state.get_player(pid).funds == 6 for pid in state.player_ids)

    def test_missing_source_is_fault(self, three_player_state):
        with pytest.raises(EngineFault):
            GameLoop(three_player_state, {"alice": FirstLegalPolicy()})

    def test_parallel_collection_matches_sequential(self, three_player_state):
        """Thread fan-out does not change the result."""
        state = three_player_state
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        loop = loop_for(state, FirstLegalPolicy(), parallel_decisions=True)

        new_hands = loop.play_turn(Age.AGE1, 1, hands)

        assert all(hand == [] for hand in new_hands.values())
        assert sorted(loop.history[-1].decisions) == ["alice", "bob", "carol"]

    def test_decision_for_player_not_asked_is_fault(self, three_player_state):
        """Only players who were asked may have a decision resolved."""
        state = three_player_state
        hands = {pid: [make_card(f"{pid} card")] for pid in ("alice", "bob")}
        loop = ExtraDecision(state, {pid: FirstLegalPolicy() for pid in state.player_ids})

        with pytest.raises(EngineFault):
            loop.play_turn(Age.AGE1, 1, hands)

        assert state.discard_pile == []
        assert all(len(state.get_player(pid).cards) == 1 for pid in state.player_ids)


class TestPayouts:
    """Tests for the two payout phases."""

    def test_exchange_credit_and_drop_reward_applied_after_turn(self, three_player_state):
        """Drop rewards and exchange credits land at the end of the turn."""
        state = three_player_state
        needs_y = make_card("Code Review", cost="Y")
        bob_card, carol_card = make_card("Bob card"), make_card("Carol card")
        script = {
            (1, 1, "alice"): Decision(PlayerAction.play(needs_y), make_exchange(left="Y")),
            (1, 1, "bob"): Decision(PlayerAction.drop(bob_card)),
            (1, 1, "carol"): Decision(PlayerAction.drop(carol_card)),
        }
        hands = {"alice": [needs_y], "bob": [bob_card], "carol": [carol_card]}

        loop_for(state, ScriptedPolicy(script)).play_turn(Age.AGE1, 1, hands)

        assert state.get_player("alice").funds == 1
        assert state.get_player("bob").funds == 3 + 3 + 2
        assert state.get_player("carol").funds == 6

    def test_card_funding_applied(self, three_player_state):
        """A played card's funding yield is added after resolution."""
        state = three_player_state
        bootstrapping = make_card("Bootstrapping", effects=[GainFunding(5)])
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        hands["alice"] = [bootstrapping]
        script = {(1, 1, "alice"): Decision(PlayerAction.play(bootstrapping))}

        loop_for(state, ScriptedPolicy(script)).play_turn(Age.AGE1, 1, hands)

        assert state.get_player("alice").funds == 8


class TestTurnSeven:
    """Tests for the Efficiency turn."""

    def test_only_efficiency_holder_plays(self, two_player_state):
        """Only the Efficiency holder is asked on turn 7."""
        state = two_player_state
        state.get_player("alice").cards.append(make_card("Google stage", card_type=None, effects=[Efficiency()]))
        alice_card, bob_card = make_card("Last A"), make_card("Last B")
        policy = ScriptedPolicy()

        hands = loop_for(state, policy).play_turn(Age.AGE1, 7, {"alice": [alice_card], "bob": [bob_card]})

        assert policy.requests == [(1, 7, "alice")]
        assert hands["alice"] == []
        assert hands["bob"] == [bob_card]

    def test_nobody_plays_without_efficiency(self, three_player_state):
        state = three_player_state
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        policy = ScriptedPolicy()

        new_hands = loop_for(state, policy).play_turn(Age.AGE1, 7, hands)

        assert policy.requests == []
        assert new_hands == hands


class TestRotateHands:
    """Tests for hand rotation."""

    def test_second_age_takes_left_neighbor_hand(self, two_player_state):
        """In age 2 each player takes the left neighbor's hand."""
        x, y = make_card("x"), make_card("y")
        loop = loop_for(two_player_state, FirstLegalPolicy())
        assert loop.rotate_hands(Age.AGE2, {"alice": [x], "bob": [y]}) == {"alice": [y], "bob": [x]}

    @pytest.mark.parametrize("age,expected_from", [
        (Age.AGE1, {"alice": "carol", "bob": "alice", "carol": "bob"}),
        (Age.AGE2, {"alice": "bob", "bob": "carol", "carol": "alice"}),
        (Age.AGE3, {"alice": "carol", "bob": "alice", "carol": "bob"}),
    ])
    def test_rotation_direction(self, three_player_state, age, expected_from):
        """Ages 1 and 3 take from the right neighbor, age 2 from the left."""
        hands = {pid: [make_card(pid)] for pid in three_player_state.player_ids}
        rotated = loop_for(three_player_state, FirstLegalPolicy()).rotate_hands(age, hands)
        assert {pid: hand[0].name for pid, hand in rotated.items()} == expected_from

    def test_rotation_keeps_every_hand(self, three_player_state):
        """Rotation only relabels hands."""
        hands = {pid: [make_card(f"{pid}{i}") for i in range(3)] for pid in three_player_state.player_ids}
        rotated = loop_for(three_player_state, FirstLegalPolicy()).rotate_hands(Age.AGE1, hands)
        assert sorted(map(tuple, rotated.values()), key=str) == sorted(map(tuple, hands.values()), key=str)


class TestForcedDrop:
    """Tests for the substitute action."""

    def test_rule_violation_becomes_drop(self, three_player_state, narrator):
        """An unaffordable play is replaced by dropping that card."""
        state = three_player_state
        data_center = make_card("Data Center", cost="OOO")
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        hands["alice"] = [data_center]
        script = {(1, 1, "alice"): Decision(PlayerAction.play(data_center))}
        loop = loop_for(state, ScriptedPolicy(script), narrator)

        new_hands = loop.play_turn(Age.AGE1, 1, hands)

        assert new_hands["alice"] == []
        assert data_center in state.discard_pile
        assert state.get_player("alice").funds == 6
        assert "alice" in loop.history[-1].forced
        assert narrator.told["alice"]

    def test_card_not_in_hand_drops_first_card(self, three_player_state):
        """Cheating drops the first card of the real hand."""
        state = three_player_state
        real, fake = make_card("Real"), make_card("Fake")
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        hands["alice"] = [real]
        script = {(1, 1, "alice"): Decision(PlayerAction.play(fake))}

        loop_for(state, ScriptedPolicy(script)).play_turn(Age.AGE1, 1, hands)

        assert state.discard_pile[0] == real

    def test_timeout_becomes_drop(self, three_player_state):
        """A source that does not answer in time has its first card dropped."""
        state = three_player_state
        source = Stalling()
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        loop = loop_for(state, source, decision_timeout=0.05)
        try:
            loop.play_turn(Age.AGE1, 1, hands)
        finally:
            source.release.set()

        assert len(state.discard_pile) == 3
        forced = loop.history[-1].forced
        assert set(forced) == {"alice", "bob", "carol"}
        assert all(reason.startswith(f"No decision from {pid}") for pid, reason in forced.items())

    def test_stalled_source_not_asked_again(self, three_player_state):
        """A player whose earlier call is still running is not asked twice."""
        state = three_player_state
        source = Stalling()
        loop = loop_for(state, source, decision_timeout=0.05)
        try:
            for turn in (1, 2):
                hands = {pid: [make_card(f"{pid} card {turn}")] for pid in state.player_ids}
                loop.play_turn(Age.AGE1, turn, hands)
        finally:
            source.release.set()

        asked = [pid for _, pid in source.calls]
        assert len(asked) == len(set(asked))
        assert set(loop.history[-1].forced) == {"alice", "bob", "carol"}
        assert len(state.discard_pile) == 6


class TestRecycling:
    """Tests for the Recycling ability."""

    def test_recycle_takes_card_from_discard(self, three_player_state):
        """The recycler adds the chosen discarded card to their cards."""
        state = three_player_state
        old = make_card("Old card")
        state.discard_pile.append(old)
        recycler = make_card("Amazon stage", card_type=None, effects=[Recycling()])
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        hands["alice"] = [recycler]
        script = {(1, 1, "alice"): Decision(PlayerAction.play(recycler))}
        policy = ScriptedPolicy(script, choices={(1, "alice"): "Old card"})

        loop_for(state, policy).play_turn(Age.AGE1, 1, hands)

        assert old in state.get_player("alice").cards
        assert old not in state.discard_pile

    def test_recycle_sees_cards_dropped_this_turn(self, three_player_state):
        """Cards dropped earlier in the same turn can be recycled."""
        state = three_player_state
        recycler = make_card("Amazon stage", card_type=None, effects=[Recycling()])
        bob_card = make_card("Bob card")
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        hands["alice"], hands["bob"] = [recycler], [bob_card]
        script = {
            (1, 1, "alice"): Decision(PlayerAction.play(recycler)),
            (1, 1, "bob"): Decision(PlayerAction.drop(bob_card)),
        }
        policy = ScriptedPolicy(script, choices={(1, "alice"): "Bob card"})

        loop_for(state, policy).play_turn(Age.AGE1, 1, hands)

        assert bob_card in state.get_player("alice").cards

    def test_recycle_on_empty_discard_is_noop(self, three_player_state, narrator):
        """Nothing to recycle only produces a notice."""
        state = three_player_state
        recycler = make_card("Amazon stage", card_type=None, effects=[Recycling()])
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        hands["alice"] = [recycler]
        script = {(1, 1, pid): Decision(PlayerAction.play(hands[pid][0])) for pid in state.player_ids}

        loop_for(state, ScriptedPolicy(script), narrator).play_turn(Age.AGE1, 1, hands)

        assert state.get_player("alice").cards[-1] == recycler
        assert any("discard pile was empty" in m for m in narrator.told["alice"])


class TestCopyCommunity:
    """Tests for the Copy Community ability."""

    def test_copy_neighbor_community(self, three_player_state):
        """The copier adds a neighbor's community card to their own."""
        state = three_player_state
        club = make_card("Insider Club", card_type=CardType.COMMUNITY, age=Age.AGE3)
        state.get_player("alice").cards.append(make_card("Yahoo stage", card_type=None, effects=[CopyCommunity()]))
        state.get_player("bob").cards.append(club)

        loop_for(state, FirstLegalPolicy()).check_copy_community()

        assert club in state.get_player("alice").cards
        assert club in state.get_player("bob").cards

    def test_copy_without_candidates_is_noop(self, three_player_state, narrator):
        state = three_player_state
        alice = state.get_player("alice")
        alice.cards.append(make_card("Yahoo stage", card_type=None, effects=[CopyCommunity()]))
        before = list(alice.cards)

        loop_for(state, FirstLegalPolicy(), narrator).check_copy_community()

        assert alice.cards == before
        assert narrator.told["alice"]


class TestPlayAge:
    """Tests for a whole age."""

    def test_all_dropped_cards_reach_discard(self):
        """With everyone dropping, the whole deal ends in the discard pile."""
        state = setup_startups_game(["a", "b", "c"], seed=3)
        source = DropFirst()
        loop = loop_for(state, source)

        loop.play_age(Age.AGE1)

        assert len(state.discard_pile) == 21
        assert all(state.get_player(pid).funds == 3 + 6 * 3 for pid in state.player_ids)
        assert len(loop.history) == 7

    def test_hands_pass_after_turns_one_to_five_only(self):
        """Turn 6 gets the neighbor's turn 5 leftover; turn 7 keeps the own turn 6 leftover."""
        state = setup_startups_game(["a", "b", "c"], seed=3)
        state.get_player("a").cards.append(make_card("Night Shift", effects=[Efficiency()]))
        source = HandRecorder()

        loop_for(state, source).play_age(Age.AGE1)

        seen = source.hands
        for pid in state.player_ids:
            giver = state.get_player(pid).neighbor(Neighbor.RIGHT)
            for turn in range(2, 7):
                assert seen[(turn, pid)] == seen[(turn - 1, giver)][1:]
        assert len(seen[(6, "a")]) == 2
        assert seen[(7, "a")] == seen[(6, "a")][1:]
        assert {pid for turn, pid in seen if turn == 7} == {"a"}

    def test_poaching_recorded_at_end_of_age(self):
        """A stronger player records victories for this age."""
        state = setup_startups_game(["a", "b", "c"], seed=3)
        state.get_player("a").cards.append(make_card("Army", effects=[Poaching(3)]))

        loop_for(state, DropFirst()).play_age(Age.AGE1)

        results = state.get_player("a").poaching_results
        assert [r.kind for r in results] == [OutcomeKind.VICTORY, OutcomeKind.VICTORY]
        assert all(r.age == Age.AGE1 for r in results)
        assert [r.kind for r in state.get_player("b").poaching_results] == [OutcomeKind.DEFEAT]


class TestRuleViolationsAreNotFaults:
    """Rule violations never escape the turn."""

    def test_exchange_violation_is_contained(self, three_player_state):
        state = three_player_state
        card = make_card("Stand")
        hands = {pid: [make_card(f"{pid} card")] for pid in state.player_ids}
        hands["alice"] = [card]
        script = {(1, 1, "alice"): Decision(PlayerAction.play(card), make_exchange(left="DDDD"))}
        try:
            loop_for(state, ScriptedPolicy(script)).play_turn(Age.AGE1, 1, hands)
        except RuleViolation:
            pytest.fail("rule violation escaped the turn")
        assert card in state.discard_pile
