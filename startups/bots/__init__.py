"""
Bots module - Decision sources for automated players.

Provides:
- DecisionSource: Interface for decision-making
- RandomPolicy / FirstLegalPolicy: Simple bots built on legal actions
- ScriptedPolicy: Replays fixed decisions (tests, replays)
"""

from ..engine_core.action import Decision
from .policy import DecisionSource, FirstLegalPolicy, RandomPolicy, ScriptedPolicy

__all__ = [
    "Decision",
    "DecisionSource",
    "FirstLegalPolicy",
    "RandomPolicy",
    "ScriptedPolicy",
]
