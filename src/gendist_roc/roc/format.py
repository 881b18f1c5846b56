"""ROC curve for the genetic distance linkage classifier.

The pipeline runs three steps in order:
1. Resolve model bounds (``max_gens``, ``max_dist``) left unset by the caller
2. Sweep the cutoffs through a sensitivity/specificity engine
3. Assemble the rows into an anchored ROC curve

Key functions:
    compute_roc_curve: Pipeline driven by a ``ModelBounds`` configuration.
    gendist_roc_format: Keyword form mirroring the distance model's signature.
"""

from collections.abc import Sequence

from numpy.typing import NDArray

from ..model.sensspec import SensSpecEngine, gendist_sensspec_cutoff
from ..params import DEFAULT_MAX_LINK_GENS, ModelBounds
from .curve import ROCCurve, assemble_roc_curve
from .sweep import run_sweep, validate_cutoffs

DEFAULT_BOUNDS = ModelBounds()


def compute_roc_curve(
    cutoffs: Sequence[int] | NDArray,
    mutation_rate: float,
    generation_distribution: Sequence[float] | NDArray,
    bounds: ModelBounds = DEFAULT_BOUNDS,
    engine: SensSpecEngine = gendist_sensspec_cutoff,
) -> ROCCurve:
    """Build the ROC curve of a genetic distance cutoff classifier.

    Args:
        cutoffs: Strictly ascending positive integer cutoffs to sweep.
        mutation_rate: Mean number of mutations per generation (Poisson).
        generation_distribution: Probability that two cases are separated by
            exactly ``g`` generations, indexed by ``g``.
        bounds: Model bounds; unset values are derived. Defaults to
            ``ModelBounds()``.
        engine: Sensitivity/specificity engine. Defaults to
            ``gendist_sensspec_cutoff``.

    Returns:
        ROC curve with ``len(cutoffs) + 2`` rows.

    Raises:
        InvalidParameterError: If the mutation rate is not positive or the
            cutoffs are empty or not positive integers.
        InvalidDistributionError: If ``max_gens`` cannot be derived from the
            generation distribution.
        UnsortedCutoffsError: If the cutoffs are not strictly ascending.
        CutoffRangeError: If the default engine finds a cutoff above the
            resolved ``max_dist``, which may be 0 for a tiny mutation rate.
    """
    resolved = bounds.resolve(mutation_rate, generation_distribution)
    cutoff_arr = validate_cutoffs(cutoffs)
    rows = run_sweep(
        cutoff_arr, mutation_rate, generation_distribution, resolved, engine
    )
    return assemble_roc_curve(rows)


def gendist_roc_format(
    cutoffs: Sequence[int] | NDArray,
    mutation_rate: float,
    generation_distribution: Sequence[float] | NDArray,
    max_link_gens: int = DEFAULT_MAX_LINK_GENS,
    max_gens: int | None = None,
    max_dist: int | None = None,
    engine: SensSpecEngine = gendist_sensspec_cutoff,
) -> ROCCurve:
    """Make an ROC curve from the sensitivity and specificity of each cutoff.

    Args:
        cutoffs: Maximum genetic distances at which to call cases linked.
        mutation_rate: Mean number of mutations per generation (Poisson).
        generation_distribution: Probability that two cases are separated by
            exactly ``g`` generations, indexed by ``g``.
        max_link_gens: Maximum generations of separation for linked pairs.
            Defaults to 1.
        max_gens: Maximum generations to consider. Defaults to the last
            generation with non-zero probability.
        max_dist: Maximum distance to calculate. Defaults to ``max_gens``
            times the 99.9th percentile of Poisson(``mutation_rate``).
        engine: Sensitivity/specificity engine. Defaults to
            ``gendist_sensspec_cutoff``.

    Returns:
        ROC curve of cutoff, sensitivity and 1 - specificity.

    Examples:
        >>> curve = gendist_roc_format([1, 2, 3], 1.0, [0.0, 0.6, 0.4])
        >>> len(curve)
        5
        >>> curve[-1]
        ROCPoint(x=inf, sensitivity=1.0, specificity_complement=1.0)
    """
    bounds = ModelBounds(
        max_link_gens=max_link_gens, max_gens=max_gens, max_dist=max_dist
    )
    return compute_roc_curve(
        cutoffs, mutation_rate, generation_distribution, bounds=bounds, engine=engine
    )
