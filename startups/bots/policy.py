"""
Decision Sources - Interface for player decision-making.

A DecisionSource is asked, once per turn, for the decision of one
player. Decisions include:
- Which card to use, and how (play, drop, company stage)
- Which resources to buy from each neighbor
- Card choices for the Recycling and Copy Community prompts

Sources always receive a snapshot of the state, never the live one.
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import TYPE_CHECKING

from ..engine_core.action_generator import legal_actions

if TYPE_CHECKING:
    from ..engine_core.action import Decision
    from ..engine_core.state import Age, Card, GameState


class DecisionSource(ABC):
    """
    Abstract base class for decision sources.

    Implementations can be bots, scripted replays, or adapters
    to a human or remote player.
    """

    @abstractmethod
    def decide(
        self,
        age: Age,
        turn: int,
        player_id: str,
        hand: list[Card],
        state: GameState,
    ) -> Decision:
        """
        Select an action and exchange for the hand.

        Args:
            age: Current age
            turn: Turn number within the age (1..7)
            player_id: The deciding player
            hand: Cards currently held
            state: Read-only snapshot of the game state

        Returns:
            Decision with the chosen action and exchange
        """
        pass

    @abstractmethod
    def choose_card(
        self,
        age: Age,
        player_id: str,
        options: list[Card],
        prompt: str,
        state: GameState,
    ) -> Card:
        """
        Pick one card among options (never empty).

        Used by the Recycling and Copy Community prompts.
        """
        pass

    def get_name(self) -> str:
        """Get the source's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(DecisionSource):
    """
    Random policy - selects decisions uniformly at random.

    Used for:
    - Simulation
    - Baseline comparison
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def decide(self, age, turn, player_id, hand, state):
        decisions = legal_actions(state, player_id, hand, age)
        if not decisions:
            raise ValueError("No legal decisions available")
        decision = self.rng.choice(decisions)
        return _explained(decision, "Selected randomly")

    def choose_card(self, age, player_id, options, prompt, state):
        if not options:
            raise ValueError("No options available")
        return self.rng.choice(options)


class FirstLegalPolicy(DecisionSource):
    """
    First-legal policy - always selects the first legal decision.

    Used for:
    - Deterministic testing
    - Baseline comparison
    """

    def decide(self, age, turn, player_id, hand, state):
        decisions = legal_actions(state, player_id, hand, age)
        if not decisions:
            raise ValueError("No legal decisions available")
        return _explained(decisions[0], "Selected first legal decision")

    def choose_card(self, age, player_id, options, prompt, state):
        if not options:
            raise ValueError("No options available")
        return options[0]


class ScriptedPolicy(DecisionSource):
    """
    Replays pre-scripted decisions.

    `script` maps (age, turn, player id) to a Decision and `choices`
    maps (age, player id) to a card name. Anything not scripted is
    delegated to `fallback`.
    """

    def __init__(
        self,
        script: dict[tuple[int, int, str], Decision] | None = None,
        choices: dict[tuple[int, str], str] | None = None,
        fallback: DecisionSource | None = None,
    ):
        self.script = dict(script or {})
        self.choices = dict(choices or {})
        self.fallback = fallback or FirstLegalPolicy()
        # (age, turn, player id) of every decide() call, in call order
        self.requests: list[tuple[int, int, str]] = []

    def decide(self, age, turn, player_id, hand, state):
        key = (int(age), turn, player_id)
        self.requests.append(key)
        if key in self.script:
            return self.script[key]
        return self.fallback.decide(age, turn, player_id, hand, state)

    def choose_card(self, age, player_id, options, prompt, state):
        name = self.choices.get((int(age), player_id))
        for card in options:
            if card.name == name:
                return card
        return self.fallback.choose_card(age, player_id, options, prompt, state)


def _explained(decision: Decision, explanation: str) -> Decision:
    return replace(decision, explanation=explanation)
