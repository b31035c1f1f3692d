"""
Three-Node Motif Catalog

There are 13 possible three-node motifs without self-loops. Each motif has
three nodes, 0, 1 and 2, and six possible edges, indexed as::

    0->1 (0), 0->2 (1), 1->0 (2), 1->2 (3), 2->0 (4), 2->1 (5)

The connectivity of a triad is a 6-bit string in this order (first
character is the most significant bit), e.g. "110000" for the fan-out.
Every motif has a standard representation; for cascades, node 0 is the
first node, node 1 the middle and node 2 the end (edges 0 and 3 are the
true edges). A triad with any other labeling is relabeled to the standard
representation: the permutation ``p`` of a code moves node k of the triad
to position ``p[k]``.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional, Tuple

from ..utils.io import write_text
from ..utils.logging import get_logger


logger = get_logger("motifs")


NUM_MOTIF_TYPES = 13
NUM_EDGE_TYPES = 6

# Edge slots (source, target) in bit order
EDGE_SLOTS: Tuple[Tuple[int, int], ...] = ((0, 1), (0, 2), (1, 0), (1, 2), (2, 0), (2, 1))
E01, E02, E10, E12, E20, E21 = range(NUM_EDGE_TYPES)

Permutation = Tuple[int, int, int]

_012: Permutation = (0, 1, 2)
_021: Permutation = (0, 2, 1)
_102: Permutation = (1, 0, 2)
_120: Permutation = (1, 2, 0)
_201: Permutation = (2, 0, 1)
_210: Permutation = (2, 1, 0)

# Standard representation and common name of each motif
MOTIF_DEFINITIONS: Tuple[Tuple[str, str], ...] = (
    ("110000", "fan-out"),
    ("001010", "fan-in"),
    ("100100", "cascade"),
    ("010110", ""),
    ("010011", ""),
    ("111010", ""),
    ("110100", "feed-forward loop"),
    ("100110", "loop"),
    ("110101", ""),
    ("001111", ""),
    ("110110", ""),
    ("111011", ""),
    ("111111", "fully connected"),
)

# Every connected triad code -> (motif id, permutation to the standard representation)
ISOMORPHISMS: Dict[str, Tuple[int, Permutation]] = {
    # fan-out
    "110000": (0, _012), "001100": (0, _102), "000011": (0, _120),
    # fan-in
    "001010": (1, _012), "100001": (1, _102), "010100": (1, _120),
    # cascade
    "100100": (2, _012), "010001": (2, _021), "000110": (2, _201),
    "011000": (2, _102), "100010": (2, _120), "001001": (2, _210),
    "010110": (3, _012), "101001": (3, _021), "101010": (3, _201),
    "010101": (3, _102), "100101": (3, _120), "011010": (3, _210),
    "010011": (4, _012), "101100": (4, _021), "111000": (4, _201),
    "000111": (4, _102), "001101": (4, _120), "110010": (4, _210),
    "111010": (5, _012), "101101": (5, _102), "010111": (5, _120),
    # feed-forward loop
    "110100": (6, _012), "110001": (6, _021), "011100": (6, _102),
    "001110": (6, _201), "100011": (6, _120), "001011": (6, _210),
    # loop
    "100110": (7, _012), "011001": (7, _021),
    "110101": (8, _012), "011110": (8, _102), "101011": (8, _120),
    "001111": (9, _012), "110011": (9, _102), "111100": (9, _120),
    "110110": (10, _012), "111001": (10, _021), "011101": (10, _102),
    "101110": (10, _201), "100111": (10, _120), "011011": (10, _210),
    "111011": (11, _012), "111110": (11, _021), "101111": (11, _102),
    "111101": (11, _201), "011111": (11, _120), "110111": (11, _210),
    # fully connected
    "111111": (12, _012),
}

# Edge slots with equivalent roles, pooled before computing statistics
_BILATERAL = ((E01, E02), (E10, E20), (E12, E21))
_LOOP = ((E01, E12, E20), (E10, E21, E02))
_FULL = ((E01, E02, E10, E12, E20, E21),)

EQUIVALENT_SLOTS: Dict[int, Tuple[Tuple[int, ...], ...]] = {
    0: _BILATERAL,
    1: _BILATERAL,
    5: _BILATERAL,
    8: _BILATERAL,
    9: _BILATERAL,
    7: _LOOP,
    12: _FULL,
}


def code_to_bits(code: int) -> str:
    """6-bit string of a triad code, most significant bit first."""
    return format(code, "06b")


def edge_roles(pattern: str) -> Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]]:
    """
    Partition the six edge slots of a motif pattern.

    Returns
    -------
    tuple
        (true slots, back slots, absent slots). A back slot is absent but
        its reverse is present; an absent slot has neither direction.
    """
    reverse = {slot: EDGE_SLOTS.index((t, s)) for slot, (s, t) in enumerate(EDGE_SLOTS)}

    true_slots = tuple(k for k in range(NUM_EDGE_TYPES) if pattern[k] == "1")
    back_slots = tuple(
        k for k in range(NUM_EDGE_TYPES) if pattern[k] == "0" and pattern[reverse[k]] == "1"
    )
    absent_slots = tuple(
        k for k in range(NUM_EDGE_TYPES) if pattern[k] == "0" and pattern[reverse[k]] == "0"
    )
    return true_slots, back_slots, absent_slots


@dataclass(frozen=True)
class MotifType:
    """A canonical three-node motif."""

    id: int
    pattern: str
    name: str
    true_slots: Tuple[int, ...]
    back_slots: Tuple[int, ...]
    absent_slots: Tuple[int, ...]
    equivalent_slots: Tuple[Tuple[int, ...], ...]

    @property
    def label(self) -> str:
        return f"{self.pattern} ({self.name})" if self.name else self.pattern

    def category(self, slot: int) -> str:
        """'true', 'back' or 'absent'."""
        if slot in self.true_slots:
            return "true"
        if slot in self.back_slots:
            return "back"
        return "absent"


@dataclass(frozen=True)
class MotifCatalog:
    """
    Immutable lookup tables of the 13 motif types.

    ``motif_ids[code]`` is the motif id of a 6-bit triad code (None for
    codes of disconnected triads) and ``permutations[code]`` the relabeling
    to its standard representation. Build it with ``MotifCatalog.build()``
    or share the cached instance of ``default_catalog()``.
    """

    motifs: Tuple[MotifType, ...]
    motif_ids: Tuple[Optional[int], ...]
    permutations: Tuple[Optional[Permutation], ...]

    @classmethod
    def build(cls) -> "MotifCatalog":
        motifs = []
        for motif_id, (pattern, name) in enumerate(MOTIF_DEFINITIONS):
            true_slots, back_slots, absent_slots = edge_roles(pattern)
            groups = EQUIVALENT_SLOTS.get(motif_id, tuple((k,) for k in range(NUM_EDGE_TYPES)))
            motifs.append(
                MotifType(motif_id, pattern, name, true_slots, back_slots, absent_slots, groups)
            )

        motif_ids = tuple(
            ISOMORPHISMS[code_to_bits(code)][0] if code_to_bits(code) in ISOMORPHISMS else None
            for code in range(64)
        )
        permutations = tuple(
            ISOMORPHISMS[code_to_bits(code)][1] if code_to_bits(code) in ISOMORPHISMS else None
            for code in range(64)
        )

        return cls(tuple(motifs), motif_ids, permutations)

    @property
    def num_motif_types(self) -> int:
        return len(self.motifs)

    def classify(self, code: int) -> Optional[Tuple[int, Permutation]]:
        """Motif id and permutation of a triad code, None if disconnected."""
        motif_id = self.motif_ids[code]
        if motif_id is None:
            return None
        return motif_id, self.permutations[code]

    def equivalence_group(self, motif_id: int, slot: int) -> Tuple[int, ...]:
        """The slots pooled with ``slot`` for motif ``motif_id``."""
        for group in self.motifs[motif_id].equivalent_slots:
            if slot in group:
                return group
        return (slot,)

    def definition_report(self) -> str:
        """Human-readable description of the motif types."""
        lines = [
            f"There are {NUM_MOTIF_TYPES} possible three-node motifs without self-loops. The common ones are:",
            "fan-out (0), fan-in (1), cascade (2), feed-forward loop (6).",
            "",
            "Each motif has three nodes, defined as node 0, 1, and 2, and six possible types of edges.",
            "The six edges are assigned the following indexes:",
            "0->1 (0), 0->2 (1), 1->0 (2), 1->2 (3), 2->0 (4), and 2->1 (5).",
            "",
        ]
        for motif in self.motifs:
            lines.append(f"Motif {motif.id}: {motif.label}")
        return "\n".join(lines) + "\n"

    def save_definitions(self, filepath: str | Path = "motif_definitions.txt") -> Optional[Path]:
        """Write the definition report; errors are logged, not raised."""
        try:
            return write_text(self.definition_report(), filepath)
        except OSError as e:
            logger.warning(f"Error saving motif definitions: {e}")
            return None


@lru_cache(maxsize=1)
def default_catalog() -> MotifCatalog:
    """The shared catalog, built on first use."""
    return MotifCatalog.build()
