"""Genetic distance model conditional on transmission linkage."""

from .gendist import (
    GenDistDistribution,
    conditional_distance_pmfs,
    gendist_distribution,
    generation_distance_pmf,
)
from .sensspec import SensSpecEngine, SensSpecRow, gendist_sensspec_cutoff

__all__ = [
    "GenDistDistribution",
    "SensSpecEngine",
    "SensSpecRow",
    "conditional_distance_pmfs",
    "gendist_distribution",
    "gendist_sensspec_cutoff",
    "generation_distance_pmf",
]
