"""
Startups Cards - The card catalog for the three ages.

Card structure:
- Age (1-3) and type
- Minimum table size (a card listed for several sizes has one copy per size)
- Cost (resource letters + funding)
- Effects
- Names of the cards it lets its owner build for free

Resource letters: D(evelopment) O(perations) M(arketing) F(inance)
Y(outhfulness) V(ision) A(doption).
"""

from __future__ import annotations
from typing import Iterable

from ...engine_core.effects import (
    EVERYONE,
    NEIGHBORS,
    OWN,
    AddVictory,
    ByCompanyStage,
    ByPoachingResult,
    CheaperExchange,
    GainFunding,
    PerCard,
    Poaching,
    ProvideResource,
    Research,
    ResourceChoice,
    ScientificJoker,
)
from ...engine_core.state import (
    ADVANCED_RESOURCES,
    BASE_RESOURCES,
    Age,
    Card,
    CardType,
    Cost,
    Neighbor,
    OutcomeKind,
    ResearchType,
    Sharing,
    VictoryType,
    parse_resources,
)

BASE = CardType.BASE_RESOURCE
ADVANCED = CardType.ADVANCED_RESOURCE
INFRA = CardType.INFRASTRUCTURE
RESEARCH = CardType.RESEARCH
COMMERCIAL = CardType.COMMERCIAL
HEAD_HUNTING = CardType.HEAD_HUNTING
COMMUNITY = CardType.COMMUNITY


def card(
    name: str,
    age: Age,
    card_type: CardType,
    players: Iterable[int],
    cost: Cost = Cost(),
    effects: Iterable = (),
    free: Iterable[str] = (),
) -> list[Card]:
    """One card copy per listed table size."""
    return [
        Card(
            name=name,
            age=age,
            card_type=card_type,
            min_players=n,
            cost=cost,
            effects=tuple(effects),
            free_cards=tuple(free),
        )
        for n in players
    ]


def provide(codes: str, sharing: Sharing = Sharing.SHARED) -> list[ProvideResource]:
    resources = parse_resources(codes)
    return [
        ProvideResource(resource=r, amount=resources.count(r), sharing=sharing)
        for r in dict.fromkeys(resources)
    ]


def choice(codes: str, sharing: Sharing = Sharing.SHARED) -> ResourceChoice:
    return ResourceChoice(resources=frozenset(parse_resources(codes)), sharing=sharing)


def victory(category: VictoryType, points: int, condition=None) -> AddVictory:
    if condition is None:
        return AddVictory(category=category, points=points)
    return AddVictory(category=category, points=points, condition=condition)


def infrastructure(points: int) -> AddVictory:
    return victory(VictoryType.INFRASTRUCTURE, points)


def per_card(targets, *card_types: CardType) -> PerCard:
    return PerCard(targets=targets, card_types=frozenset(card_types))


def community(points: int, condition) -> AddVictory:
    return victory(VictoryType.COMMUNITY, points, condition)


# ============================================================================
# Age 1
# ============================================================================

AGE1_CARDS: list[Card] = [
    # Base resources
    *card("Hackathon", Age.AGE1, BASE, (3, 4), effects=provide("D")),
    *card("Server Closet", Age.AGE1, BASE, (3, 5), effects=provide("O")),
    *card("Mailing List", Age.AGE1, BASE, (3, 5), effects=provide("M")),
    *card("Angel Investor", Age.AGE1, BASE, (3, 4), effects=provide("F")),
    *card("Coworking Space", Age.AGE1, BASE, (6,), Cost.of(funding=1), [choice("DM")]),
    *card("Growth Hacking", Age.AGE1, BASE, (4,), Cost.of(funding=1), [choice("OM")]),
    *card("Crowdfunding", Age.AGE1, BASE, (3,), Cost.of(funding=1), [choice("MF")]),
    *card("Dev Ops", Age.AGE1, BASE, (3,), Cost.of(funding=1), [choice("OD")]),
    *card("Incubator", Age.AGE1, BASE, (5,), Cost.of(funding=1), [choice("DF")]),
    *card("Bank Loan", Age.AGE1, BASE, (6,), Cost.of(funding=1), [choice("OF")]),

    # Advanced resources
    *card("Beta Testers", Age.AGE1, ADVANCED, (3, 6), effects=provide("A")),
    *card("Interns", Age.AGE1, ADVANCED, (3, 6), effects=provide("Y")),
    *card("Whiteboard", Age.AGE1, ADVANCED, (3, 6), effects=provide("V")),

    # Infrastructure
    *card("Ping Pong Table", Age.AGE1, INFRA, (4, 7), effects=[infrastructure(3)]),
    *card("Open Space", Age.AGE1, INFRA, (3, 7), Cost.of("O"), [infrastructure(3)], free=["Data Center"]),
    *card("Team Building", Age.AGE1, INFRA, (3, 5), effects=[infrastructure(2)], free=["Corporate Culture"]),
    *card("Free Snacks", Age.AGE1, INFRA, (3, 6), effects=[infrastructure(2)], free=["Nap Room"]),

    # Commercial
    *card("Bootstrapping", Age.AGE1, COMMERCIAL, (4, 5, 7), effects=[GainFunding(5)]),
    *card(
        "Reseller Network", Age.AGE1, COMMERCIAL, (3, 7),
        effects=[CheaperExchange(frozenset({Neighbor.LEFT}), BASE_RESOURCES)],
        free=["Conference"],
    ),
    *card(
        "Partner Network", Age.AGE1, COMMERCIAL, (3, 7),
        effects=[CheaperExchange(frozenset({Neighbor.RIGHT}), BASE_RESOURCES)],
        free=["Conference"],
    ),
    *card(
        "Freelance Platform", Age.AGE1, COMMERCIAL, (3, 6),
        effects=[CheaperExchange(frozenset({Neighbor.LEFT, Neighbor.RIGHT}), ADVANCED_RESOURCES)],
        free=["Coffee Shop"],
    ),

    # Head hunting
    *card("Job Board", Age.AGE1, HEAD_HUNTING, (3, 7), Cost.of("D"), [Poaching(1)]),
    *card("Referral Bonus", Age.AGE1, HEAD_HUNTING, (3, 5), Cost.of("F"), [Poaching(1)]),
    *card("Recruiter", Age.AGE1, HEAD_HUNTING, (3, 4), Cost.of("M"), [Poaching(1)]),

    # Research
    *card(
        "Prototyping", Age.AGE1, RESEARCH, (3, 5), Cost.of("A"),
        [Research(ResearchType.SCALING)], free=["Signing Bonus", "User Research"],
    ),
    *card(
        "Code Review", Age.AGE1, RESEARCH, (3, 7), Cost.of("Y"),
        [Research(ResearchType.PROGRAMMING)], free=["Headhunter Agency", "R&D Lab"],
    ),
    *card(
        "Documentation", Age.AGE1, RESEARCH, (3, 4), Cost.of("V"),
        [Research(ResearchType.CUSTOM_SOLUTION)], free=["Legal Department", "Knowledge Base"],
    ),
]


# ============================================================================
# Age 2
# ============================================================================

AGE2_CARDS: list[Card] = [
    # Base resources
    *card("Dev Team", Age.AGE2, BASE, (3, 4), Cost.of(funding=1), provide("DD")),
    *card("Cloud Hosting", Age.AGE2, BASE, (3, 4), Cost.of(funding=1), provide("OO")),
    *card("Ad Campaign", Age.AGE2, BASE, (3, 4), Cost.of(funding=1), provide("MM")),
    *card("Venture Round", Age.AGE2, BASE, (3, 4), Cost.of(funding=1), provide("FF")),

    # Advanced resources
    *card("Student Ambassadors", Age.AGE2, ADVANCED, (3, 5), effects=provide("A")),
    *card("Young Talents", Age.AGE2, ADVANCED, (3, 5), effects=provide("Y")),
    *card("Roadmap", Age.AGE2, ADVANCED, (3, 5), effects=provide("V")),

    # Infrastructure
    *card("Data Center", Age.AGE2, INFRA, (3, 7), Cost.of("OOO"), [infrastructure(5)]),
    *card(
        "Corporate Culture", Age.AGE2, INFRA, (3, 6), Cost.of("DMY"),
        [infrastructure(3)], free=["Company Retreat"],
    ),
    *card("Nap Room", Age.AGE2, INFRA, (3, 7), Cost.of("FFD"), [infrastructure(4)], free=["Rooftop Garden"]),
    *card("Legal Department", Age.AGE2, INFRA, (3, 5), Cost.of("MMA"), [infrastructure(4)]),

    # Commercial
    *card(
        "Conference", Age.AGE2, COMMERCIAL, (3, 6, 7), Cost.of("MM"),
        [choice("YVA", Sharing.PERSONAL)], free=["Holding Company"],
    ),
    *card(
        "Coffee Shop", Age.AGE2, COMMERCIAL, (3, 5, 6), Cost.of("DD"),
        [choice("DOMF", Sharing.PERSONAL)], free=["Flagship Store"],
    ),
    *card("Consulting", Age.AGE2, COMMERCIAL, (3, 6), effects=[GainFunding(1, per_card(EVERYONE, BASE))]),
    *card("Marketplace Fees", Age.AGE2, COMMERCIAL, (4, 7), effects=[GainFunding(2, per_card(EVERYONE, ADVANCED))]),

    # Head hunting
    *card("Stock Options", Age.AGE2, HEAD_HUNTING, (3, 7), Cost.of("OOO"), [Poaching(2)], free=["Golden Parachute"]),
    *card("Mentorship", Age.AGE2, HEAD_HUNTING, (4, 6, 7), Cost.of("FFD"), [Poaching(2)], free=["Hackers House"]),
    *card("Signing Bonus", Age.AGE2, HEAD_HUNTING, (3, 5), Cost.of("MDF"), [Poaching(2)]),
    *card("Headhunter Agency", Age.AGE2, HEAD_HUNTING, (3, 6), Cost.of("DDF"), [Poaching(2)]),

    # Research
    *card(
        "User Research", Age.AGE2, RESEARCH, (3, 4), Cost.of("FFY"),
        [Research(ResearchType.SCALING)], free=["Investor Day", "Design Thinking"],
    ),
    *card(
        "R&D Lab", Age.AGE2, RESEARCH, (3, 5), Cost.of("MMV"),
        [Research(ResearchType.PROGRAMMING)], free=["Talent Acquisition", "AI Lab"],
    ),
    *card(
        "Knowledge Base", Age.AGE2, RESEARCH, (3, 6), Cost.of("OOA"),
        [Research(ResearchType.CUSTOM_SOLUTION)], free=["Advisory Board", "University Partnership"],
    ),
    *card(
        "Bootcamp", Age.AGE2, RESEARCH, (3, 7), Cost.of("DV"),
        [Research(ResearchType.CUSTOM_SOLUTION)], free=["Research Chair", "Think Tank"],
    ),
]


# ============================================================================
# Age 3
# ============================================================================

AGE3_CARDS: list[Card] = [
    # Infrastructure
    *card("Company Retreat", Age.AGE3, INFRA, (3, 6), Cost.of("MMFYVA"), [infrastructure(7)]),
    *card("Rooftop Garden", Age.AGE3, INFRA, (3, 4), Cost.of("MMD"), [infrastructure(5)]),
    *card("Board of Directors", Age.AGE3, INFRA, (3, 5, 6), Cost.of("OOFY"), [infrastructure(6)]),
    *card("Headquarters", Age.AGE3, INFRA, (3, 7), Cost.of("DOMFYVA"), [infrastructure(8)]),
    *card("Advisory Board", Age.AGE3, INFRA, (3, 5), Cost.of("DDOF"), [infrastructure(6)]),

    # Commercial
    *card(
        "Holding Company", Age.AGE3, COMMERCIAL, (3, 4), Cost.of("FDA"),
        [
            GainFunding(1, per_card(OWN, BASE)),
            victory(VictoryType.COMMERCIAL, 1, per_card(OWN, BASE)),
        ],
    ),
    *card(
        "Flagship Store", Age.AGE3, COMMERCIAL, (3, 6), Cost.of("OY"),
        [
            GainFunding(1, per_card(OWN, COMMERCIAL)),
            victory(VictoryType.COMMERCIAL, 1, per_card(OWN, COMMERCIAL)),
        ],
    ),
    *card(
        "Chamber of Commerce", Age.AGE3, COMMERCIAL, (4, 6), Cost.of("MMV"),
        [
            GainFunding(2, per_card(OWN, ADVANCED)),
            victory(VictoryType.COMMERCIAL, 2, per_card(OWN, ADVANCED)),
        ],
    ),
    *card(
        "Investor Day", Age.AGE3, COMMERCIAL, (3, 5, 7), Cost.of("OOF"),
        [
            GainFunding(3, ByCompanyStage(OWN)),
            victory(VictoryType.COMMERCIAL, 1, ByCompanyStage(OWN)),
        ],
    ),

    # Head hunting
    *card("Golden Parachute", Age.AGE3, HEAD_HUNTING, (3, 7), Cost.of("FFFO"), [Poaching(3)]),
    *card("Hackers House", Age.AGE3, HEAD_HUNTING, (4, 5, 6), Cost.of("OOOF"), [Poaching(3)]),
    *card("Poaching Lawyers", Age.AGE3, HEAD_HUNTING, (3, 4, 7), Cost.of("DDFA"), [Poaching(3)]),
    *card("Talent Acquisition", Age.AGE3, HEAD_HUNTING, (3, 5), Cost.of("MMMD"), [Poaching(3)]),

    # Research
    *card("Design Thinking", Age.AGE3, RESEARCH, (3, 6), Cost.of("MMVA"), [Research(ResearchType.SCALING)]),
    *card("AI Lab", Age.AGE3, RESEARCH, (3, 7), Cost.of("FFYA"), [Research(ResearchType.PROGRAMMING)]),
    *card(
        "University Partnership", Age.AGE3, RESEARCH, (3, 4), Cost.of("DDYV"),
        [Research(ResearchType.CUSTOM_SOLUTION)],
    ),
    *card("Research Chair", Age.AGE3, RESEARCH, (3, 7), Cost.of("OOOY"), [Research(ResearchType.SCALING)]),
    *card("Think Tank", Age.AGE3, RESEARCH, (3, 5), Cost.of("DVA"), [Research(ResearchType.PROGRAMMING)]),
]


# ============================================================================
# Community cards (dealt in age 3 only, player count + 2 of them)
# ============================================================================

COMMUNITY_CARDS: list[Card] = [
    *card(
        "Open Source Foundation", Age.AGE3, COMMUNITY, (3,), Cost.of("FFMOD"),
        [community(1, per_card(NEIGHBORS, BASE))],
    ),
    *card(
        "Makers Guild", Age.AGE3, COMMUNITY, (3,), Cost.of("FFOO"),
        [community(2, per_card(NEIGHBORS, ADVANCED))],
    ),
    *card(
        "Chamber of Startups", Age.AGE3, COMMUNITY, (3,), Cost.of("YAV"),
        [community(1, per_card(NEIGHBORS, COMMERCIAL))],
    ),
    *card(
        "Academic Network", Age.AGE3, COMMUNITY, (3,), Cost.of("MMMAV"),
        [community(1, per_card(NEIGHBORS, RESEARCH))],
    ),
    *card(
        "Insider Club", Age.AGE3, COMMUNITY, (3,), Cost.of("MMMY"),
        [community(1, per_card(NEIGHBORS, HEAD_HUNTING))],
    ),
    *card(
        "Veterans Club", Age.AGE3, COMMUNITY, (3,), Cost.of("FFOA"),
        [community(1, ByPoachingResult(NEIGHBORS, frozenset({OutcomeKind.DEFEAT})))],
    ),
    *card(
        "Business Angels Network", Age.AGE3, COMMUNITY, (3,), Cost.of("DDDYV"),
        [community(1, per_card(OWN, BASE, ADVANCED, COMMUNITY))],
    ),
    *card("Open Science Society", Age.AGE3, COMMUNITY, (3,), Cost.of("DDFFV"), [ScientificJoker()]),
    *card(
        "Ethics Committee", Age.AGE3, COMMUNITY, (3,), Cost.of("DDDOA"),
        [community(1, per_card(NEIGHBORS, INFRA))],
    ),
    *card(
        "Founders Circle", Age.AGE3, COMMUNITY, (3,), Cost.of("OOMMY"),
        [community(1, ByCompanyStage(EVERYONE))],
    ),
]


ALL_CARDS: list[Card] = AGE1_CARDS + AGE2_CARDS + AGE3_CARDS


def get_card_by_name(name: str) -> Card | None:
    """First catalog card with the given name (communities included)."""
    for c in ALL_CARDS + COMMUNITY_CARDS:
        if c.name == name:
            return c
    return None
