"""Cutoff validation and the sensitivity/specificity sweep."""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from ..errors import InvalidParameterError, UnsortedCutoffsError
from ..model.sensspec import SensSpecEngine, SensSpecRow, gendist_sensspec_cutoff
from ..params import ResolvedBounds


def validate_cutoffs(cutoffs: Sequence[int] | NDArray) -> NDArray:
    """Check that cutoffs are a non-empty, strictly ascending run of positive integers.

    Integral floats (e.g. ``2.0``) are accepted and converted.

    Args:
        cutoffs: Candidate maximum genetic distances.

    Returns:
        Read-only int64 array of the cutoffs.

    Raises:
        InvalidParameterError: If the sequence is empty, not one-dimensional,
            or holds anything other than positive integers.
        UnsortedCutoffsError: If the cutoffs are not strictly ascending.
    """
    arr = np.asarray(cutoffs)
    if arr.ndim != 1 or arr.size == 0:
        raise InvalidParameterError(
            f"cutoffs must be a non-empty 1-D sequence, got shape {arr.shape}"
        )

    if arr.dtype.kind == "f":
        if not np.all(np.isfinite(arr)) or np.any(arr != np.floor(arr)):
            raise InvalidParameterError("cutoffs must be integers")
    elif arr.dtype.kind not in "iu":
        raise InvalidParameterError(f"cutoffs must be integers, got dtype {arr.dtype}")

    # Range check before the cast; larger values would wrap around in int64
    if arr.dtype.kind == "f":
        too_large = arr >= 2.0**63
    elif arr.dtype.kind == "u":
        too_large = arr > np.uint64(np.iinfo(np.int64).max)
    else:
        too_large = np.zeros(arr.shape, dtype=bool)
    if np.any(too_large):
        raise InvalidParameterError(
            f"cutoffs must fit in a 64-bit integer, got maximum {arr.max()}"
        )

    arr = arr.astype(np.int64)
    if np.any(arr < 1):
        raise InvalidParameterError(f"cutoffs must be >= 1, got minimum {arr.min()}")

    if np.any(np.diff(arr) <= 0):
        raise UnsortedCutoffsError("cutoffs must be strictly ascending")

    arr.setflags(write=False)
    return arr


def _check_probability(value: float, name: str, cutoff: int) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise InvalidParameterError(
            f"{name} at cutoff {cutoff} must be in [0, 1], got {value}"
        )
    return value


def run_sweep(
    cutoffs: NDArray,
    mutation_rate: float,
    generation_distribution: Sequence[float] | NDArray,
    bounds: ResolvedBounds,
    engine: SensSpecEngine = gendist_sensspec_cutoff,
) -> list[SensSpecRow]:
    """Evaluate every cutoff with the sensitivity/specificity engine.

    The engine receives the resolved bounds, never unset ones. Errors it
    raises propagate unchanged. Its rows are returned in ascending cutoff
    order whatever order it produced them in.

    Args:
        cutoffs: Validated, ascending cutoffs (see ``validate_cutoffs``).
        mutation_rate: Mean number of mutations per generation.
        generation_distribution: Probabilities indexed by generation count.
        bounds: Resolved model bounds.
        engine: Sensitivity/specificity engine. Defaults to
            ``gendist_sensspec_cutoff``.

    Returns:
        One row per cutoff, ascending by cutoff.

    Raises:
        InvalidParameterError: If the engine's rows do not match the
            requested cutoffs one-to-one or hold values outside [0, 1].
    """
    requested = [int(c) for c in cutoffs]
    result = engine(
        requested,
        mutation_rate,
        generation_distribution,
        bounds.max_link_gens,
        bounds.max_gens,
        bounds.max_dist,
    )

    rows = [SensSpecRow(*row) for row in result]
    if len(rows) != len(requested):
        raise InvalidParameterError(
            f"engine returned {len(rows)} rows for {len(requested)} cutoffs"
        )

    rows.sort(key=lambda row: row.cutoff)
    returned = [int(row.cutoff) for row in rows]
    if returned != requested:
        raise InvalidParameterError(
            f"engine returned cutoffs {returned}, expected {requested}"
        )

    return [
        SensSpecRow(
            cutoff,
            _check_probability(row.sensitivity, "sensitivity", cutoff),
            _check_probability(row.specificity, "specificity", cutoff),
        )
        for cutoff, row in zip(returned, rows)
    ]
