"""Exceptions raised while building genetic-distance ROC curves.

All errors derive from ``ValueError`` so callers that already guard numeric
input with ``except ValueError`` keep working.
"""


class InvalidDistributionError(ValueError):
    """The generation distribution cannot support the requested model.

    Raised when the distribution has no non-zero mass to derive ``max_gens``
    from, contains negative or non-finite entries, sums to more than one, or
    leaves one linkage status without any generation mass.
    """


class InvalidParameterError(ValueError):
    """A scalar parameter or the cutoff sequence is out of range."""


class UnsortedCutoffsError(InvalidParameterError):
    """Cutoffs were not supplied in strictly ascending order."""


class CutoffRangeError(InvalidParameterError):
    """A cutoff lies beyond the maximum genetic distance being modelled."""
