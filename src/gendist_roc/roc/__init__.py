"""ROC curve construction for genetic distance cutoffs."""

from .curve import ROCCurve, ROCPoint, assemble_roc_curve
from .format import compute_roc_curve, gendist_roc_format
from .sweep import run_sweep, validate_cutoffs

__all__ = [
    "ROCCurve",
    "ROCPoint",
    "assemble_roc_curve",
    "compute_roc_curve",
    "gendist_roc_format",
    "run_sweep",
    "validate_cutoffs",
]
