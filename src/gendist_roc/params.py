"""Model bounds for the genetic-distance linkage model.

The distance model needs two upper bounds: the largest number of generations
separating two cases (``max_gens``) and the largest genetic distance whose
probability is tabulated (``max_dist``). Either may be left unset, in which
case it is derived from the generation distribution and the mutation rate:

- ``max_gens`` is the last generation count with non-zero probability.
- ``max_dist`` is ``max_gens`` times the ``dist_quantile`` (99.9th by default)
  quantile of a Poisson distribution with mean ``mutation_rate``.

Key classes:
    ModelBounds: Configuration with optional bounds and enumerated defaults.
    ResolvedBounds: Concrete integer bounds passed to the distance model.

Key functions:
    resolve_bounds: Functional form of ``ModelBounds.resolve``.
    validate_generation_distribution: Check and normalise a generation pmf.
    validate_mutation_rate: Check a per-generation mutation rate.
"""

import math
import warnings
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from .errors import InvalidDistributionError, InvalidParameterError

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_MAX_LINK_GENS = 1
DEFAULT_DIST_QUANTILE = 0.999

# Slack allowed when checking that the generation pmf sums to at most one
PDF_SUM_TOLERANCE = 1e-8


# =============================================================================
# Validation
# =============================================================================


def _as_bounded_int(value, name: str, minimum: int = 1) -> int:
    if isinstance(value, bool) or not isinstance(value, int | np.integer):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidParameterError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def validate_mutation_rate(mutation_rate: float) -> float:
    """Check that the mean number of mutations per generation is usable.

    Args:
        mutation_rate: Mean number of mutations per generation.

    Returns:
        The rate as a Python float.

    Raises:
        InvalidParameterError: If the rate is not a finite positive number.
    """
    if isinstance(mutation_rate, bool):
        raise InvalidParameterError(
            f"mutation_rate must be a number, got {mutation_rate!r}"
        )
    try:
        rate = float(mutation_rate)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(
            f"mutation_rate must be a number, got {mutation_rate!r}"
        ) from exc
    if not math.isfinite(rate) or rate <= 0:
        raise InvalidParameterError(f"mutation_rate must be > 0, got {mutation_rate}")
    return rate


def validate_generation_distribution(
    generation_distribution: Sequence[float] | NDArray,
) -> NDArray:
    """Check a generation-separation pmf and return it as a read-only array.

    Index ``g`` holds the probability that two linked cases are separated by
    exactly ``g`` generations. The pmf may be truncated (sum below one) but
    must not exceed one.

    Args:
        generation_distribution: Probabilities indexed by generation count.

    Returns:
        Read-only float64 copy of the distribution.

    Raises:
        InvalidDistributionError: If the distribution is empty, not
            one-dimensional, has negative or non-finite entries, or sums to
            more than one.
    """
    try:
        pdf = np.array(generation_distribution, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidDistributionError(
            "generation_distribution must be a sequence of numbers"
        ) from exc

    if pdf.ndim != 1 or pdf.size == 0:
        raise InvalidDistributionError(
            "generation_distribution must be a non-empty 1-D sequence, "
            f"got shape {pdf.shape}"
        )
    if not np.all(np.isfinite(pdf)):
        raise InvalidDistributionError(
            "generation_distribution contains non-finite values"
        )
    if np.any(pdf < 0):
        raise InvalidDistributionError(
            "generation_distribution contains negative values"
        )

    total = pdf.sum()
    if total > 1 + PDF_SUM_TOLERANCE:
        raise InvalidDistributionError(
            f"generation_distribution sums to {total:.6g}, expected at most 1"
        )

    pdf.setflags(write=False)
    return pdf


# =============================================================================
# Derived bounds
# =============================================================================


def last_nonzero_generation(generation_distribution: Sequence[float] | NDArray) -> int:
    """Return the largest generation count with non-zero probability.

    Raises:
        InvalidDistributionError: If every entry is zero, or the only mass
            sits at zero generations.
    """
    pdf = np.asarray(generation_distribution)
    nonzero = np.flatnonzero(pdf)
    if nonzero.size == 0:
        raise InvalidDistributionError(
            "generation_distribution has no non-zero entries; cannot derive max_gens"
        )

    max_gens = int(nonzero[-1])
    if max_gens == 0:
        raise InvalidDistributionError(
            "generation_distribution only has mass at zero generations; "
            "cannot derive a positive max_gens"
        )
    return max_gens


def derive_max_dist(
    mutation_rate: float, max_gens: int, dist_quantile: float = DEFAULT_DIST_QUANTILE
) -> int:
    """Distance beyond which the conditional distance distributions are negligible.

    Computed as ``max_gens * Poisson(mutation_rate).ppf(dist_quantile)``.
    """
    per_generation = stats.poisson.ppf(dist_quantile, mutation_rate)
    max_dist = int(max_gens * per_generation)

    if max_dist == 0:
        warnings.warn(
            f"Derived max_dist is 0 for mutation_rate={mutation_rate}; "
            "every modelled pair will have genetic distance 0",
            RuntimeWarning,
            stacklevel=2,
        )
    return max_dist


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class ResolvedBounds:
    """Concrete model bounds with every default filled in.

    Attributes:
        max_link_gens: Generations of separation at or below which a pair is
            considered linked.
        max_gens: Largest generation count modelled.
        max_dist: Largest genetic distance tabulated.
    """

    max_link_gens: int
    max_gens: int
    max_dist: int


@dataclass(frozen=True)
class ModelBounds:
    """Bounds for the distance model, with unset values derived on resolve.

    Attributes:
        max_link_gens: Linkage threshold in generations. Defaults to 1.
        max_gens: Largest generation count to model. ``None`` derives it from
            the last non-zero entry of the generation distribution.
        max_dist: Largest genetic distance to model, at least 0. ``None``
            derives it from ``max_gens`` and the Poisson ``dist_quantile`` of
            the mutation rate.
        dist_quantile: Poisson quantile used to derive ``max_dist``.
    """

    max_link_gens: int = DEFAULT_MAX_LINK_GENS
    max_gens: int | None = None
    max_dist: int | None = None
    dist_quantile: float = DEFAULT_DIST_QUANTILE

    def __post_init__(self):
        _as_bounded_int(self.max_link_gens, "max_link_gens")
        if self.max_gens is not None:
            _as_bounded_int(self.max_gens, "max_gens")
        if self.max_dist is not None:
            # Distance 0 alone is a valid table, and a derived bound may be 0
            _as_bounded_int(self.max_dist, "max_dist", minimum=0)

        if isinstance(self.dist_quantile, bool):
            raise InvalidParameterError(
                f"dist_quantile must be a number, got {self.dist_quantile!r}"
            )
        try:
            quantile = float(self.dist_quantile)
        except (TypeError, ValueError) as exc:
            raise InvalidParameterError(
                f"dist_quantile must be a number, got {self.dist_quantile!r}"
            ) from exc
        if not 0 < quantile < 1:
            raise InvalidParameterError(
                f"dist_quantile must be in (0, 1), got {self.dist_quantile}"
            )

    def resolve(
        self, mutation_rate: float, generation_distribution: Sequence[float] | NDArray
    ) -> ResolvedBounds:
        """Fill in unset bounds from the mutation rate and generation pmf.

        Args:
            mutation_rate: Mean number of mutations per generation.
            generation_distribution: Probabilities indexed by generation count.

        Returns:
            Bounds with every value set.

        Raises:
            InvalidParameterError: If ``mutation_rate`` is not positive.
            InvalidDistributionError: If ``max_gens`` must be derived and the
                distribution has no usable mass.
        """
        rate = validate_mutation_rate(mutation_rate)
        pdf = validate_generation_distribution(generation_distribution)

        max_gens = self.max_gens
        if max_gens is None:
            max_gens = last_nonzero_generation(pdf)

        max_dist = self.max_dist
        if max_dist is None:
            max_dist = derive_max_dist(rate, max_gens, float(self.dist_quantile))

        return ResolvedBounds(
            max_link_gens=int(self.max_link_gens),
            max_gens=int(max_gens),
            max_dist=int(max_dist),
        )


def resolve_bounds(
    mutation_rate: float,
    generation_distribution: Sequence[float] | NDArray,
    max_link_gens: int = DEFAULT_MAX_LINK_GENS,
    max_gens: int | None = None,
    max_dist: int | None = None,
) -> ResolvedBounds:
    """Resolve model bounds, deriving any that are ``None``.

    See ``ModelBounds.resolve``.
    """
    bounds = ModelBounds(
        max_link_gens=max_link_gens, max_gens=max_gens, max_dist=max_dist
    )
    return bounds.resolve(mutation_rate, generation_distribution)
