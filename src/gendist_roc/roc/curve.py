"""ROC curve assembly from per-cutoff sensitivity and specificity.

Each swept cutoff contributes one ROC point (1 - specificity, sensitivity).
Two anchors complete the curve: a cutoff of -inf calls no pair linked and sits
at (0, 0); a cutoff of +inf calls every pair linked and sits at (1, 1). Points
are never deduplicated, since the area under the curve uses every sample.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from ..errors import InvalidParameterError, UnsortedCutoffsError
from ..model.sensspec import SensSpecRow

LOWER_ANCHOR_X = -np.inf
UPPER_ANCHOR_X = np.inf


class ROCPoint(NamedTuple):
    """One row of an ROC curve."""

    x: float
    sensitivity: float
    specificity_complement: float


@dataclass(frozen=True, eq=False)
class ROCCurve:
    """ROC curve for a genetic distance cutoff classifier.

    Rows are ordered by ascending cutoff. The first row is the (-inf, 0, 0)
    anchor and the last is the (+inf, 1, 1) anchor; the arrays are read-only.

    Attributes:
        x: Cutoff for each row, with -inf and +inf for the anchors.
        sensitivity: True positive rate at each cutoff.
        specificity_complement: False positive rate (1 - specificity).
    """

    x: NDArray
    sensitivity: NDArray
    specificity_complement: NDArray

    def __len__(self) -> int:
        return len(self.x)

    def __getitem__(self, index: int) -> ROCPoint:
        return ROCPoint(
            float(self.x[index]),
            float(self.sensitivity[index]),
            float(self.specificity_complement[index]),
        )

    def __iter__(self) -> Iterator[ROCPoint]:
        for i in range(len(self)):
            yield self[i]

    def rows(self) -> list[ROCPoint]:
        """All rows as ``ROCPoint`` records."""
        return list(self)

    @property
    def fpr(self) -> NDArray:
        """Alias for ``specificity_complement``."""
        return self.specificity_complement

    @property
    def cutoffs(self) -> NDArray:
        """Swept cutoffs, without the anchors."""
        return self.x[1:-1].astype(np.int64)

    def auc(self) -> float:
        """Area under the curve by the trapezoidal rule over every row."""
        return float(np.trapezoid(self.sensitivity, self.specificity_complement))

    def youden(self) -> tuple[int, float]:
        """Cutoff maximising Youden's J = sensitivity - false positive rate.

        Ties resolve to the smallest cutoff.

        Returns:
            Tuple of (cutoff, J).

        Raises:
            InvalidParameterError: If the curve has no swept cutoffs.
        """
        if len(self) <= 2:
            raise InvalidParameterError("ROC curve has no swept cutoffs")
        j = self.sensitivity[1:-1] - self.specificity_complement[1:-1]
        best = int(np.argmax(j))
        return int(self.cutoffs[best]), float(j[best])

    def to_frame(self) -> pd.DataFrame:
        """Tabulate the curve for plotting.

        Returns:
            DataFrame with ``cutoff``, ``sensitivity`` and ``specificity``
            columns, where ``specificity`` holds 1 - specificity.
        """
        return pd.DataFrame(
            {
                "cutoff": self.x,
                "sensitivity": self.sensitivity,
                "specificity": self.specificity_complement,
            }
        )


def _frozen(values: list[float]) -> NDArray:
    arr = np.array(values, dtype=np.float64)
    arr.setflags(write=False)
    return arr


def assemble_roc_curve(rows: Sequence[SensSpecRow]) -> ROCCurve:
    """Turn per-cutoff sensitivity and specificity into an ROC curve.

    Args:
        rows: Sweep results in strictly ascending cutoff order, as
            ``SensSpecRow`` or (cutoff, sensitivity, specificity) tuples.

    Returns:
        Curve with ``len(rows) + 2`` rows: the low anchor, one row per input
        row with specificity replaced by 1 - specificity, and the high anchor.

    Raises:
        UnsortedCutoffsError: If the rows are not strictly ascending by cutoff.
    """
    rows = [SensSpecRow(*row) for row in rows]
    cutoffs = [float(row.cutoff) for row in rows]
    if np.any(np.diff(cutoffs) <= 0):
        raise UnsortedCutoffsError("sweep rows must be strictly ascending by cutoff")

    x = [LOWER_ANCHOR_X, *cutoffs, UPPER_ANCHOR_X]
    sensitivity = [0.0, *(float(row.sensitivity) for row in rows), 1.0]
    fpr = [0.0, *(1.0 - float(row.specificity) for row in rows), 1.0]

    return ROCCurve(
        x=_frozen(x),
        sensitivity=_frozen(sensitivity),
        specificity_complement=_frozen(fpr),
    )
