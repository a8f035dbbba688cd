"""
Tests for poaching and scoring.

Tests:
- Poaching comparison against both neighbors
- Research table with jokers
- Card funding and victory conditions
- Final score aggregation
"""

import pytest

from ..engine_core.effects import (
    NEIGHBORS,
    OWN,
    AddVictory,
    ByCompanyStage,
    ByPoachingResult,
    GainFunding,
    PerCard,
    Poaching,
    Research,
    ScientificJoker,
)
from ..engine_core.poaching import resolve_poaching
from ..engine_core.scoring import card_funding, card_victory, research_score, total_points, victory_points
from ..engine_core.state import (
    Age,
    CardType,
    CompanyStage,
    OutcomeKind,
    PoachingOutcome,
    ResearchType,
    VictoryType,
)
from .conftest import make_card

SCALING = ResearchType.SCALING
PROGRAMMING = ResearchType.PROGRAMMING
CUSTOM = ResearchType.CUSTOM_SOLUTION


def give_poaching(state, player_id, strength):
    state.get_player(player_id).cards.append(make_card(f"Poach {strength}", effects=[Poaching(strength)]))


class TestPoaching:
    """Tests for resolve_poaching."""

    def test_weak_player_loses_to_both_ties_record_nothing(self, three_player_state):
        """Strengths 2, 5, 5: two defeats, one victory each, nothing for the tie."""
        state = three_player_state
        give_poaching(state, "alice", 2)
        give_poaching(state, "bob", 5)
        give_poaching(state, "carol", 5)

        outcomes = resolve_poaching(Age.AGE2, state)

        assert outcomes["alice"] == [PoachingOutcome.defeat(), PoachingOutcome.defeat()]
        assert outcomes["bob"] == [PoachingOutcome.victory(Age.AGE2)]
        assert outcomes["carol"] == [PoachingOutcome.victory(Age.AGE2)]

    def test_outcomes_are_not_applied(self, three_player_state):
        """The caller decides when outcomes are recorded."""
        give_poaching(three_player_state, "alice", 1)
        resolve_poaching(Age.AGE1, three_player_state)
        assert three_player_state.get_player("alice").poaching_results == []

    def test_all_equal_records_nothing(self, three_player_state):
        outcomes = resolve_poaching(Age.AGE3, three_player_state)
        assert all(results == [] for results in outcomes.values())

    @pytest.mark.parametrize("outcome,points", [
        (PoachingOutcome.defeat(), -1),
        (PoachingOutcome.victory(Age.AGE1), 1),
        (PoachingOutcome.victory(Age.AGE2), 3),
        (PoachingOutcome.victory(Age.AGE3), 5),
    ])
    def test_outcome_points(self, outcome, points):
        assert outcome.points == points


class TestResearchScore:
    """Tests for the research table."""

    def test_nothing_scores_zero(self):
        assert research_score([], 0) == 0

    def test_squares_per_type(self):
        assert research_score([SCALING, SCALING, SCALING], 0) == 9

    def test_full_set_bonus(self):
        """One of each type: 1 + 1 + 1 + 7."""
        assert research_score([SCALING, PROGRAMMING, CUSTOM], 0) == 10

    def test_joker_takes_best_type(self):
        """S, S, P, C plus a joker is best as a third S."""
        assert research_score([SCALING, SCALING, PROGRAMMING, CUSTOM], 1) == 18

    def test_jokers_alone(self):
        """Two jokers score best as a pair of one type."""
        assert research_score([], 2) == 4


class TestCardEffects:
    """Tests for card funding and victory."""

    def test_funding_per_card_of_neighbors(self, three_player_state):
        """Counts matching cards of both neighbors only."""
        state = three_player_state
        state.get_player("bob").cards.append(make_card("Base B", card_type=CardType.BASE_RESOURCE))
        state.get_player("carol").cards.append(make_card("Base C", card_type=CardType.BASE_RESOURCE))
        state.get_player("alice").cards.append(make_card("Base A", card_type=CardType.BASE_RESOURCE))
        consulting = make_card(
            "Consulting",
            effects=[GainFunding(1, PerCard(NEIGHBORS, frozenset({CardType.BASE_RESOURCE})))],
        )
        assert card_funding(state, "alice", consulting) == 2

    def test_victory_by_company_stage(self, three_player_state):
        state = three_player_state
        state.get_player("alice").company_stage = CompanyStage.STAGE2
        investor_day = make_card(
            "Investor Day",
            effects=[AddVictory(VictoryType.COMMERCIAL, 1, ByCompanyStage(OWN))],
        )
        assert card_victory(state, "alice", investor_day) == [(VictoryType.COMMERCIAL, 2)]

    def test_victory_by_neighbor_defeats(self, three_player_state):
        state = three_player_state
        state.get_player("bob").poaching_results.append(PoachingOutcome.defeat())
        state.get_player("carol").poaching_results.extend(
            [PoachingOutcome.defeat(), PoachingOutcome.victory(Age.AGE1)]
        )
        veterans = make_card(
            "Veterans Club",
            effects=[AddVictory(VictoryType.COMMUNITY, 1, ByPoachingResult(NEIGHBORS, frozenset({OutcomeKind.DEFEAT})))],
        )
        assert card_victory(state, "alice", veterans) == [(VictoryType.COMMUNITY, 2)]


class TestVictoryPoints:
    """Tests for final scoring."""

    def test_every_player_scored(self, three_player_state):
        scores = victory_points(three_player_state)
        assert sorted(scores) == ["alice", "bob", "carol"]
        for score in scores.values():
            assert {VictoryType.POACHING, VictoryType.FUNDING, VictoryType.RESEARCH} <= set(score)

    def test_contributions_summed_by_category(self, three_player_state):
        state = three_player_state
        alice = state.get_player("alice")
        alice.funds = 10
        alice.poaching_results = [
            PoachingOutcome.defeat(),
            PoachingOutcome.victory(Age.AGE2),
            PoachingOutcome.victory(Age.AGE3),
        ]
        alice.cards.append(make_card("Lab", card_type=CardType.RESEARCH, effects=[Research(SCALING)]))
        alice.cards.append(make_card("Society", card_type=CardType.COMMUNITY, effects=[ScientificJoker()]))
        alice.cards.append(make_card("Retreat", effects=[AddVictory(VictoryType.INFRASTRUCTURE, 7)]))
        alice.cards.append(make_card("Rooftop", effects=[AddVictory(VictoryType.INFRASTRUCTURE, 5)]))

        score = victory_points(state)["alice"]

        assert score[VictoryType.POACHING] == 7
        assert score[VictoryType.FUNDING] == 3
        assert score[VictoryType.RESEARCH] == 4
        assert score[VictoryType.INFRASTRUCTURE] == 12
        assert total_points(score) == 26
