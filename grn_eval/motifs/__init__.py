"""
Motif Module

Canonical three-node motifs and the motif profiles of gold standards.
"""

from .catalog import (
    NUM_MOTIF_TYPES,
    NUM_EDGE_TYPES,
    EDGE_SLOTS,
    MotifCatalog,
    MotifType,
    default_catalog,
)
from .profile import MotifProfile, MotifProfiler

__all__ = [
    "NUM_MOTIF_TYPES",
    "NUM_EDGE_TYPES",
    "EDGE_SLOTS",
    "MotifCatalog",
    "MotifType",
    "default_catalog",
    "MotifProfile",
    "MotifProfiler",
]
