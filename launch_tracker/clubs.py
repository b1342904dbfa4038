"""
Canonical bag order used by every club sort.

Driver -> fairway woods -> hybrids -> irons -> wedges (by loft) -> putter,
then anything unrecognized. Club labels are free text ("7 Iron", "7i",
"Iron 7", "56°", "60 (LW)") so the category is recognized with patterns.
"""
import re
import zlib
from typing import Iterable, List, Tuple

DRIVER_INDEX = 0
WOOD_BASE = 100
HYBRID_BASE = 200
IRON_BASE = 300
WEDGE_BASE = 400
PUTTER_INDEX = 500
UNKNOWN_BASE = 1000

# Conventional lofts so named wedges interleave with degree-labelled ones
WEDGE_LOFTS = {
    "pw": 46,
    "gw": 50,
    "aw": 50,
    "sw": 56,
    "lw": 60,
}

_WEDGE_NAMES = (
    (re.compile(r"\bpitch(ing)?\b|\bpw\b|\bp[\s-]?wedge\b"), "pw"),
    (re.compile(r"\bgap\b|\bgw\b|\bapproach\b|\baw\b|\buw\b"), "gw"),
    (re.compile(r"\bsand\b|\bsw\b"), "sw"),
    (re.compile(r"\blob\b|\blw\b"), "lw"),
)

_NUMBER_RE = re.compile(r"(\d+)")
_DEGREE_RE = re.compile(r"^(\d{2})\s*(°|deg(ree)?s?)?\b")


def _number_in(label: str, default: int) -> int:
    match = _NUMBER_RE.search(label)
    return int(match.group(1)) if match else default


def _unknown_index(label: str) -> int:
    return UNKNOWN_BASE + zlib.crc32(label.encode("utf-8")) % 1000


def order_index(club: str) -> int:
    """Bag position of a club label; lower sorts first"""
    label = (club or "").strip().lower()
    if not label:
        return _unknown_index(label)

    if re.search(r"\bdriver\b|\bdr\b|^1\s*w(ood)?$", label):
        return DRIVER_INDEX
    if re.search(r"\bputter\b|\bpt\b", label):
        return PUTTER_INDEX
    if re.search(r"hybrid|rescue|\d+\s*h\b|\bh\s*\d+", label):
        return HYBRID_BASE + _number_in(label, 0)
    if re.search(r"wood|fairway|\d+\s*w\b|\bfw\b", label):
        return WOOD_BASE + _number_in(label, 0)

    for pattern, key in _WEDGE_NAMES:
        if pattern.search(label):
            return WEDGE_BASE + WEDGE_LOFTS[key]

    degrees = _DEGREE_RE.match(label)
    if degrees and ("wedge" in label or degrees.group(2) or len(label) <= 3):
        return WEDGE_BASE + int(degrees.group(1))
    if "wedge" in label:
        return WEDGE_BASE + _number_in(label, WEDGE_LOFTS["gw"])

    if re.search(r"iron|\d+\s*i\b|\bi\s*\d+", label):
        return IRON_BASE + _number_in(label, 0)

    return _unknown_index(label)


def sort_key(club: str) -> Tuple[int, str]:
    """Total order: bag index, then label so equal indices stay stable"""
    return (order_index(club), (club or "").strip().lower())


def sort_clubs(clubs: Iterable[str]) -> List[str]:
    return sorted(clubs, key=sort_key)
