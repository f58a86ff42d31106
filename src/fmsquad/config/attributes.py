"""Attribute code table for squad report exports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple


@dataclass(frozen=True)
class AttributeCode:
    code: str
    name: str
    category: str


TECHNICAL = "technical"
MENTAL = "mental"
PHYSICAL = "physical"
GOALKEEPER = "goalkeeper"
OTHER = "other"

_CATEGORY_MEMBERS: Dict[str, Tuple[str, ...]] = {
    TECHNICAL: (
        "Corners",
        "Crossing",
        "Dribbling",
        "Finishing",
        "First Touch",
        "Free Kick Taking",
        "Heading",
        "Long Shots",
        "Long Throws",
        "Marking",
        "Passing",
        "Penalty Taking",
        "Tackling",
        "Technique",
    ),
    MENTAL: (
        "Aggression",
        "Anticipation",
        "Bravery",
        "Composure",
        "Concentration",
        "Decisions",
        "Determination",
        "Flair",
        "Leadership",
        "Off the Ball",
        "Positioning",
        "Teamwork",
        "Vision",
        "Work Rate",
    ),
    PHYSICAL: (
        "Acceleration",
        "Agility",
        "Balance",
        "Jumping Reach",
        "Natural Fitness",
        "Pace",
        "Stamina",
        "Strength",
    ),
    GOALKEEPER: (
        "Aerial Reach",
        "Command of Area",
        "Communication",
        "Eccentricity",
        "Handling",
        "Kicking",
        "One on Ones",
        "Reflexes",
        "Tendency to Rush Out",
        "Tendency to Punch",
        "Throwing",
    ),
}

_CATEGORY_BY_NAME: Dict[str, str] = {
    name: category for category, names in _CATEGORY_MEMBERS.items() for name in names
}


def attribute_category(name: str) -> str:
    """Return the category of a full attribute name, ``"other"`` if unknown."""

    return _CATEGORY_BY_NAME.get(name, OTHER)


# Column order of the squad export, left to right after the Position column.
_EXPORT_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("Acc", "Acceleration"),
    ("Wor", "Work Rate"),
    ("Vis", "Vision"),
    ("Thr", "Throwing"),
    ("Tec", "Technique"),
    ("Tea", "Teamwork"),
    ("Tck", "Tackling"),
    ("Str", "Strength"),
    ("Sta", "Stamina"),
    ("TRO", "Tendency to Rush Out"),
    ("Ref", "Reflexes"),
    ("Pun", "Tendency to Punch"),
    ("Pos", "Positioning"),
    ("Pen", "Penalty Taking"),
    ("Pas", "Passing"),
    ("Pac", "Pace"),
    ("1v1", "One on Ones"),
    ("OtB", "Off the Ball"),
    ("Nat", "Natural Fitness"),
    ("Mar", "Marking"),
    ("L Th", "Long Throws"),
    ("Lon", "Long Shots"),
    ("Ldr", "Leadership"),
    ("Kic", "Kicking"),
    ("Jum", "Jumping Reach"),
    ("Hea", "Heading"),
    ("Han", "Handling"),
    ("Fre", "Free Kick Taking"),
    ("Fla", "Flair"),
    ("Fir", "First Touch"),
    ("Fin", "Finishing"),
    ("Ecc", "Eccentricity"),
    ("Dri", "Dribbling"),
    ("Det", "Determination"),
    ("Dec", "Decisions"),
    ("Cro", "Crossing"),
    ("Cor", "Corners"),
    ("Cnt", "Concentration"),
    ("Cmp", "Composure"),
    ("Com", "Communication"),
    ("Cmd", "Command of Area"),
    ("Bra", "Bravery"),
    ("Bal", "Balance"),
    ("Ant", "Anticipation"),
    ("Agi", "Agility"),
    ("Agg", "Aggression"),
    ("Aer", "Aerial Reach"),
)

ATTRIBUTE_CODES: Tuple[AttributeCode, ...] = tuple(
    AttributeCode(code=code, name=name, category=attribute_category(name))
    for code, name in _EXPORT_COLUMNS
)

ATTRIBUTE_VALUE_MIN = 1
ATTRIBUTE_VALUE_MAX = 20

_BY_CODE: Mapping[str, AttributeCode] = {attr.code: attr for attr in ATTRIBUTE_CODES}
_BY_NAME: Mapping[str, AttributeCode] = {attr.name.lower(): attr for attr in ATTRIBUTE_CODES}


def iter_attributes() -> Iterable[AttributeCode]:
    """Return the attribute table in export column order."""

    return iter(ATTRIBUTE_CODES)


def get_attribute(code: str) -> AttributeCode:
    """Fetch an attribute by its export code, raising KeyError if missing."""

    key = code.strip()
    if key not in _BY_CODE:
        raise KeyError(f"No attribute configured for code={code!r}")
    return _BY_CODE[key]


def get_attribute_by_name(name: str) -> Optional[AttributeCode]:
    return _BY_NAME.get(name.strip().lower())


def resolve_header(label: str) -> str:
    """Map an export header cell to its full attribute name when it is a code."""

    text = label.strip()
    attr = _BY_CODE.get(text)
    return attr.name if attr else text
