"""Decode squad export position strings into tactical slot codes."""

from __future__ import annotations

from typing import List, Sequence, Tuple


# Families are matched by substring, so longer tokens must come first
# ("AM" and "DM" before "M", "DM" before "D").
_POSITION_FAMILIES: Tuple[Tuple[str, Tuple[Tuple[str, Tuple[str, ...]], ...], Tuple[str, ...]], ...] = (
    ("GK", (), ("GK",)),
    (
        "AM",
        (("(C)", ("AMC", "AMCL", "AMCR")), ("(L)", ("AML",)), ("(R)", ("AMR",))),
        ("AMC", "AMCL", "AMCR"),
    ),
    (
        "DM",
        (("(C)", ("DM", "DMCL", "DMCR")), ("(L)", ("DMCL",)), ("(R)", ("DMCR",))),
        ("DM", "DMCL", "DMCR"),
    ),
    (
        "ST",
        (("(C)", ("STC",)), ("(L)", ("STL",)), ("(R)", ("STR",))),
        ("STC", "STL", "STR"),
    ),
    (
        "M",
        (("(C)", ("MC", "MCL", "MCR")), ("(L)", ("ML",)), ("(R)", ("MR",))),
        ("MC", "MCL", "MCR"),
    ),
    (
        "D",
        (
            ("(LC)", ("DL", "DC", "DCL", "DCR")),
            ("(RC)", ("DR", "DC", "DCL", "DCR")),
            ("(C)", ("DC", "DCL", "DCR")),
            ("(L)", ("DL",)),
            ("(R)", ("DR",)),
        ),
        ("DC", "DCL", "DCR"),
    ),
)


def _decode_part(part: str) -> Sequence[str]:
    for token, sides, default in _POSITION_FAMILIES:
        if token not in part:
            continue
        for side, codes in sides:
            if side in part:
                return codes
        return default
    return ()


def _expand(text: str) -> List[str]:
    codes: List[str] = []
    for part in (piece.strip() for piece in text.split(",")):
        if not part:
            continue
        if "/" in part:
            # "M/AM (C)" shares the side suffix between both families.
            suffix = part[part.index("("):] if "(" in part else ""
            for slash_part in part.split("/"):
                codes.extend(_expand(f"{slash_part.strip()} {suffix}".strip()))
            continue
        codes.extend(_decode_part(part))
    return codes


def parse_position_string(text: str) -> List[str]:
    """Return the slot codes for a raw position string, first occurrence order kept."""

    if not text:
        return []
    return list(dict.fromkeys(_expand(text)))
