"""
Startups Companies - Company profiles and their stage cards.

Each company has two sides. A side is an ordered list of stage cards:
the project card every player starts with, then the stages built
with BUILD_COMPANY. The project card only provides the company's
starting resource.
"""

from __future__ import annotations

from ...engine_core.effects import (
    AddVictory,
    CheaperExchange,
    CopyCommunity,
    Efficiency,
    GainFunding,
    Opportunity,
    Poaching,
    Recycling,
    ResourceChoice,
    ScientificJoker,
)
from ...engine_core.state import (
    BASE_RESOURCES,
    Age,
    Card,
    Company,
    CompanyProfile,
    CompanyStage,
    Cost,
    Neighbor,
    Sharing,
    Side,
    VictoryType,
    parse_resources,
)
from .cards import provide


def _vp(points: int) -> AddVictory:
    return AddVictory(category=VictoryType.COMPANY, points=points)


def _choice(codes: str) -> ResourceChoice:
    return ResourceChoice(resources=frozenset(parse_resources(codes)), sharing=Sharing.PERSONAL)


# Company -> starting resource letter
STARTING_RESOURCES: dict[Company, str] = {
    Company.FACEBOOK: "F",
    Company.TWITTER: "Y",
    Company.APPLE: "V",
    Company.GOOGLE: "M",
    Company.YAHOO: "D",
    Company.AMAZON: "A",
    Company.MICROSOFT: "O",
}

# (company, side) -> [(cost, effects)] for each stage after the project
STAGES: dict[tuple[Company, Side], list[tuple[Cost, list]]] = {
    (Company.FACEBOOK, Side.A): [
        (Cost.of("DD"), [_vp(3)]),
        (Cost.of("MMM"), [Poaching(2)]),
        (Cost.of("FFFF"), [_vp(7)]),
    ],
    (Company.FACEBOOK, Side.B): [
        (Cost.of("OOO"), [Poaching(1), _vp(3), GainFunding(3)]),
        (Cost.of("FFFF"), [Poaching(1), _vp(4), GainFunding(4)]),
    ],
    (Company.TWITTER, Side.A): [
        (Cost.of("OO"), [_vp(3)]),
        (Cost.of("FF"), [_choice("DOMF")]),
        (Cost.of("YY"), [_vp(7)]),
    ],
    (Company.TWITTER, Side.B): [
        (Cost.of("MM"), [_choice("DOMF")]),
        (Cost.of("DD"), [_choice("YVA")]),
        (Cost.of("OOO"), [_vp(7)]),
    ],
    (Company.APPLE, Side.A): [
        (Cost.of("OO"), [_vp(3)]),
        (Cost.of("DD"), [GainFunding(9)]),
        (Cost.of("VV"), [_vp(7)]),
    ],
    (Company.APPLE, Side.B): [
        (Cost.of("OO"), [_vp(2), GainFunding(4)]),
        (Cost.of("DD"), [_vp(3), GainFunding(4)]),
        (Cost.of("YVA"), [_vp(5), GainFunding(4)]),
    ],
    (Company.GOOGLE, Side.A): [
        (Cost.of("MM"), [_vp(3)]),
        (Cost.of("DDD"), [ScientificJoker()]),
        (Cost.of("MMMM"), [_vp(7)]),
    ],
    (Company.GOOGLE, Side.B): [
        (Cost.of("MA"), [_vp(3)]),
        (Cost.of("DDY"), [Efficiency()]),
        (Cost.of("MMMV"), [ScientificJoker()]),
    ],
    (Company.YAHOO, Side.A): [
        (Cost.of("DD"), [_vp(3)]),
        (Cost.of("OO"), [Opportunity(Age.AGE1), Opportunity(Age.AGE2), Opportunity(Age.AGE3)]),
        (Cost.of("FF"), [_vp(7)]),
    ],
    (Company.YAHOO, Side.B): [
        (Cost.of("DD"), [CheaperExchange(frozenset({Neighbor.LEFT, Neighbor.RIGHT}), BASE_RESOURCES)]),
        (Cost.of("OO"), [_vp(5)]),
        (Cost.of("AFF"), [CopyCommunity()]),
    ],
    (Company.AMAZON, Side.A): [
        (Cost.of("MM"), [_vp(3)]),
        (Cost.of("FFF"), [Recycling()]),
        (Cost.of("AA"), [_vp(7)]),
    ],
    (Company.AMAZON, Side.B): [
        (Cost.of("FF"), [_vp(2), Recycling()]),
        (Cost.of("MMM"), [_vp(1), Recycling()]),
        (Cost.of("YVA"), [Recycling()]),
    ],
    (Company.MICROSOFT, Side.A): [
        (Cost.of("OO"), [_vp(3)]),
        (Cost.of("DDD"), [_vp(5)]),
        (Cost.of("OOOO"), [_vp(7)]),
    ],
    (Company.MICROSOFT, Side.B): [
        (Cost.of("DD"), [_vp(3)]),
        (Cost.of("OOO"), [_vp(5)]),
        (Cost.of("MMM"), [_vp(5)]),
        (Cost.of("OOOOV"), [_vp(7)]),
    ],
}


def _stage_card(profile: CompanyProfile, stage: CompanyStage, cost: Cost, effects) -> Card:
    return Card(
        name=f"{profile} {stage.name.lower()}",
        age=None,
        card_type=None,
        min_players=None,
        cost=cost,
        effects=tuple(effects),
    )


def build_company_cards() -> dict[CompanyProfile, list[Card]]:
    """Stage cards for every profile, indexed by CompanyStage."""
    profiles: dict[CompanyProfile, list[Card]] = {}
    for (company, side), stages in STAGES.items():
        profile = CompanyProfile(company, side)
        project = _stage_card(
            profile, CompanyStage.PROJECT, Cost(), provide(STARTING_RESOURCES[company])
        )
        cards = [project]
        for index, (cost, effects) in enumerate(stages, start=1):
            cards.append(_stage_card(profile, CompanyStage(index), cost, effects))
        profiles[profile] = cards
    return profiles
