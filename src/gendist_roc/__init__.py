"""Genetic distance ROC analysis for outbreak linkage.

This package estimates how well the rule "call two cases linked if their
genetic distance is at or below a cutoff" classifies transmission linkage,
given a per-generation mutation rate and the distribution of generations
separating sampled cases.
"""

from . import model, roc
from .errors import (
    CutoffRangeError,
    InvalidDistributionError,
    InvalidParameterError,
    UnsortedCutoffsError,
)
from .model import SensSpecRow, gendist_distribution, gendist_sensspec_cutoff
from .params import ModelBounds, ResolvedBounds, resolve_bounds
from .roc import ROCCurve, ROCPoint, compute_roc_curve, gendist_roc_format

__all__ = [
    "CutoffRangeError",
    "InvalidDistributionError",
    "InvalidParameterError",
    "ModelBounds",
    "ROCCurve",
    "ROCPoint",
    "ResolvedBounds",
    "SensSpecRow",
    "UnsortedCutoffsError",
    "compute_roc_curve",
    "gendist_distribution",
    "gendist_roc_format",
    "gendist_sensspec_cutoff",
    "model",
    "resolve_bounds",
    "roc",
]
