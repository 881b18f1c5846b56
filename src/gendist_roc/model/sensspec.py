"""Sensitivity and specificity of a genetic distance cutoff.

A pair is classified as linked when its genetic distance is at or below the
cutoff, so at cutoff ``c``:

    sensitivity(c) = P(distance <= c | linked)
    specificity(c) = P(distance >  c | unlinked)
"""

from collections.abc import Sequence
from typing import NamedTuple, Protocol

import numpy as np
from numpy.typing import NDArray

from ..errors import CutoffRangeError
from ..params import DEFAULT_MAX_LINK_GENS, resolve_bounds
from .gendist import conditional_distance_pmfs


class SensSpecRow(NamedTuple):
    """Classifier performance at one cutoff."""

    cutoff: int
    sensitivity: float
    specificity: float


class SensSpecEngine(Protocol):
    """Callable computing sensitivity and specificity for each cutoff.

    Implementations must be deterministic and side-effect free, and return
    one row per requested cutoff.
    """

    def __call__(
        self,
        cutoffs: Sequence[int],
        mutation_rate: float,
        generation_distribution: Sequence[float] | NDArray,
        max_link_gens: int,
        max_gens: int,
        max_dist: int,
        /,
    ) -> Sequence[SensSpecRow]: ...


def gendist_sensspec_cutoff(
    cutoffs: Sequence[int] | NDArray,
    mutation_rate: float,
    generation_distribution: Sequence[float] | NDArray,
    max_link_gens: int = DEFAULT_MAX_LINK_GENS,
    max_gens: int | None = None,
    max_dist: int | None = None,
) -> list[SensSpecRow]:
    """Compute sensitivity and specificity of each genetic distance cutoff.

    Args:
        cutoffs: Maximum genetic distances at which to call pairs linked.
        mutation_rate: Mean number of mutations per generation (Poisson).
        generation_distribution: Probability that two cases are separated by
            exactly ``g`` generations, indexed by ``g``.
        max_link_gens: Maximum generations of separation for linked pairs.
            Defaults to 1.
        max_gens: Maximum generations to model. Derived when None.
        max_dist: Maximum distance to model. Derived when None.

    Returns:
        One ``SensSpecRow`` per cutoff, in the order given.

    Raises:
        CutoffRangeError: If any cutoff is negative or exceeds ``max_dist``.
    """
    bounds = resolve_bounds(
        mutation_rate,
        generation_distribution,
        max_link_gens=max_link_gens,
        max_gens=max_gens,
        max_dist=max_dist,
    )

    cutoff_arr = np.asarray(cutoffs, dtype=np.int64)
    if cutoff_arr.size and (cutoff_arr.min() < 0 or cutoff_arr.max() > bounds.max_dist):
        raise CutoffRangeError(
            f"cutoffs must lie in [0, max_dist={bounds.max_dist}], "
            f"got range [{cutoff_arr.min()}, {cutoff_arr.max()}]"
        )

    linked, unlinked = conditional_distance_pmfs(
        mutation_rate, generation_distribution, bounds
    )
    # Clip rounding overshoot so every value stays a probability
    sens = np.clip(np.cumsum(linked)[cutoff_arr], 0.0, 1.0)
    spec = np.clip(1.0 - np.cumsum(unlinked)[cutoff_arr], 0.0, 1.0)

    return [
        SensSpecRow(int(c), float(se), float(sp))
        for c, se, sp in zip(cutoff_arr, sens, spec)
    ]
