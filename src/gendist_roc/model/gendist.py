"""
Theoretical genetic distance distributions for linked and unlinked pairs.

Two cases separated by ``g`` transmission generations accumulate
Poisson(``mutation_rate``) mutations per generation, so their genetic distance
is Poisson(``g * mutation_rate``). Mixing these over the generation
distribution, split at ``max_link_gens``, gives the distance pmf conditional on
linkage status:

    linked[d]   = sum_{g <= L}       pdf[g] * Pois(d; g * mu) / sum_{g <= L} pdf[g]
    unlinked[d] = sum_{L < g <= G}   pdf[g] * Pois(d; g * mu) / sum_{L < g <= G} pdf[g]

with ``L = max_link_gens`` and ``G = max_gens``. Distances run from 0 to
``max_dist``; mass beyond ``max_dist`` is dropped rather than renormalised.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy import stats

from ..errors import InvalidDistributionError
from ..params import DEFAULT_MAX_LINK_GENS, ResolvedBounds, resolve_bounds


@dataclass(frozen=True, eq=False)
class GenDistDistribution:
    """Genetic distance pmf conditional on linkage status.

    Attributes:
        dist: Genetic distances ``0..max_dist``.
        linked: P(distance = d | linked) at each distance.
        unlinked: P(distance = d | unlinked) at each distance.
        bounds: The resolved bounds the distribution was built with.
    """

    dist: NDArray
    linked: NDArray
    unlinked: NDArray
    bounds: ResolvedBounds

    def to_frame(self, long: bool = False) -> pd.DataFrame:
        """Tabulate the distribution.

        Args:
            long: If True, melt into ``dist``/``status``/``prob`` columns, the
                shape plotting libraries expect. Defaults to False, giving one
                column per status.

        Returns:
            DataFrame of the distribution.
        """
        wide = pd.DataFrame(
            {"dist": self.dist, "linked": self.linked, "unlinked": self.unlinked}
        )
        if not long:
            return wide
        return wide.melt(id_vars="dist", var_name="status", value_name="prob")


def generation_distance_pmf(
    mutation_rate: float, max_gens: int, max_dist: int
) -> NDArray:
    """Distance pmf for each generation count.

    Args:
        mutation_rate: Mean number of mutations per generation.
        max_gens: Largest generation count.
        max_dist: Largest genetic distance.

    Returns:
        Array of shape ``(max_gens + 1, max_dist + 1)`` whose row ``g`` is the
        Poisson(``g * mutation_rate``) pmf over distances ``0..max_dist``.
    """
    dist = np.arange(max_dist + 1)
    pmf = np.zeros((max_gens + 1, max_dist + 1), dtype=np.float64)

    # Zero generations apart is a point mass at distance zero
    pmf[0, 0] = 1.0
    if max_gens > 0:
        means = np.arange(1, max_gens + 1, dtype=np.float64) * mutation_rate
        pmf[1:] = stats.poisson.pmf(dist[None, :], means[:, None])
    return pmf


def _mixture(pmf: NDArray, weights: NDArray, status: str) -> NDArray:
    total = weights.sum()
    if total <= 0:
        raise InvalidDistributionError(
            f"generation_distribution has no mass for {status} pairs"
        )
    return weights @ pmf / total


def conditional_distance_pmfs(
    mutation_rate: float,
    generation_distribution: Sequence[float] | NDArray,
    bounds: ResolvedBounds,
) -> tuple[NDArray, NDArray]:
    """Compute the linked and unlinked distance pmfs for resolved bounds.

    The rate and generation pmf are used as given; they are checked once, when
    the bounds are resolved (see ``ModelBounds.resolve``).

    Returns:
        Tuple of (linked, unlinked), each of length ``bounds.max_dist + 1``.

    Raises:
        InvalidDistributionError: If either linkage status has no generation
            mass within ``0..bounds.max_gens``.
    """
    rate = float(mutation_rate)
    pdf = np.asarray(generation_distribution, dtype=np.float64)

    # Generations past the end of the supplied pmf carry no mass
    weights = np.zeros(bounds.max_gens + 1, dtype=np.float64)
    n_used = min(pdf.size, bounds.max_gens + 1)
    weights[:n_used] = pdf[:n_used]

    pmf = generation_distance_pmf(rate, bounds.max_gens, bounds.max_dist)

    link_cut = min(bounds.max_link_gens, bounds.max_gens) + 1
    linked_weights = np.where(np.arange(weights.size) < link_cut, weights, 0.0)
    unlinked_weights = weights - linked_weights

    linked = _mixture(pmf, linked_weights, "linked")
    unlinked = _mixture(pmf, unlinked_weights, "unlinked")
    return linked, unlinked


def gendist_distribution(
    mutation_rate: float,
    generation_distribution: Sequence[float] | NDArray,
    max_link_gens: int = DEFAULT_MAX_LINK_GENS,
    max_gens: int | None = None,
    max_dist: int | None = None,
) -> GenDistDistribution:
    """Build the theoretical genetic distance distribution by linkage status.

    Args:
        mutation_rate: Mean number of mutations per generation (Poisson).
        generation_distribution: Probability that two cases are separated by
            exactly ``g`` generations, indexed by ``g``.
        max_link_gens: Maximum generations of separation for linked pairs.
            Defaults to 1.
        max_gens: Maximum generations to model. Defaults to the last
            generation with non-zero probability.
        max_dist: Maximum distance to tabulate. Defaults to ``max_gens`` times
            the 99.9th percentile of Poisson(``mutation_rate``).

    Returns:
        The conditional distance distributions.

    Examples:
        >>> d = gendist_distribution(1.0, [0.0, 0.6, 0.4])
        >>> d.bounds.max_gens
        2
        >>> bool(abs(d.linked[1] - np.exp(-1.0)) < 1e-12)
        True
    """
    bounds = resolve_bounds(
        mutation_rate,
        generation_distribution,
        max_link_gens=max_link_gens,
        max_gens=max_gens,
        max_dist=max_dist,
    )
    linked, unlinked = conditional_distance_pmfs(
        mutation_rate, generation_distribution, bounds
    )
    return GenDistDistribution(
        dist=np.arange(bounds.max_dist + 1),
        linked=linked,
        unlinked=unlinked,
        bounds=bounds,
    )
