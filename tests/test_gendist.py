"""
Unit tests for the genetic distance model.

Critical behaviors tested:
1. Distances g generations apart follow Poisson(g * mutation_rate)
2. Linked/unlinked pmfs mix generations split at max_link_gens
3. Missing linkage mass is reported as an invalid distribution
4. Sensitivity and specificity are cumulative pmf sums at each cutoff
"""

import numpy as np
import pytest
from scipy import stats

from gendist_roc import params
from gendist_roc.errors import (
    CutoffRangeError,
    InvalidDistributionError,
    InvalidParameterError,
)
from gendist_roc.model import (
    SensSpecRow,
    gendist_distribution,
    gendist_sensspec_cutoff,
    generation_distance_pmf,
)


@pytest.fixture
def gens_pdf():
    """Generation distribution from the reference example."""
    return [0.0, 0.6, 0.4]


# =============================================================================
# Per-generation pmf
# =============================================================================


class TestGenerationDistancePmf:
    """Test the distance pmf for each generation count."""

    def test_shape(self):
        assert generation_distance_pmf(1.0, 3, 12).shape == (4, 13)

    def test_zero_generations_is_point_mass(self):
        pmf = generation_distance_pmf(2.0, 2, 5)
        np.testing.assert_array_equal(pmf[0], [1.0, 0.0, 0.0, 0.0, 0.0, 0.0])

    @pytest.mark.parametrize("mutation_rate", [0.5, 1.0, 3.0])
    def test_rows_are_poisson(self, mutation_rate):
        pmf = generation_distance_pmf(mutation_rate, 3, 20)
        dist = np.arange(21)
        for g in range(1, 4):
            np.testing.assert_allclose(pmf[g], stats.poisson.pmf(dist, g * mutation_rate))


# =============================================================================
# Conditional distributions
# =============================================================================


class TestGendistDistribution:
    """Test distance distributions conditional on linkage status."""

    def test_reference_example(self, gens_pdf):
        """One generation linked, two generations unlinked."""
        d = gendist_distribution(1.0, gens_pdf)

        assert d.bounds.max_gens == 2
        assert d.bounds.max_dist == 10
        np.testing.assert_array_equal(d.dist, np.arange(11))
        np.testing.assert_allclose(d.linked, stats.poisson.pmf(d.dist, 1.0))
        np.testing.assert_allclose(d.unlinked, stats.poisson.pmf(d.dist, 2.0))

    def test_unlinked_mixes_generations(self):
        pdf = [0.0, 0.5, 0.3, 0.2]
        d = gendist_distribution(1.5, pdf, max_dist=25)

        expected = (
            0.3 * stats.poisson.pmf(d.dist, 3.0) + 0.2 * stats.poisson.pmf(d.dist, 4.5)
        ) / 0.5
        np.testing.assert_allclose(d.unlinked, expected)

    def test_linked_includes_zero_generations(self):
        pdf = [0.2, 0.4, 0.4]
        d = gendist_distribution(1.0, pdf)

        point_mass = (d.dist == 0).astype(float)
        expected = (0.2 * point_mass + 0.4 * stats.poisson.pmf(d.dist, 1.0)) / 0.6
        np.testing.assert_allclose(d.linked, expected)

    def test_max_link_gens_moves_split(self):
        pdf = [0.0, 0.4, 0.3, 0.3]
        d = gendist_distribution(1.0, pdf, max_link_gens=2)

        linked = (0.4 * stats.poisson.pmf(d.dist, 1.0) + 0.3 * stats.poisson.pmf(d.dist, 2.0)) / 0.7
        np.testing.assert_allclose(d.linked, linked)
        np.testing.assert_allclose(d.unlinked, stats.poisson.pmf(d.dist, 3.0))

    def test_pmfs_nearly_sum_to_one(self, gens_pdf):
        """Mass beyond max_dist is negligible by construction."""
        d = gendist_distribution(2.0, gens_pdf)
        assert 0.99 < d.linked.sum() <= 1.0 + 1e-12
        assert 0.99 < d.unlinked.sum() <= 1.0 + 1e-12

    def test_max_gens_beyond_pdf_length(self, gens_pdf):
        """Generations past the supplied pmf carry no mass."""
        d = gendist_distribution(1.0, gens_pdf, max_gens=4)
        assert d.bounds.max_dist == 20
        np.testing.assert_allclose(d.unlinked, stats.poisson.pmf(d.dist, 2.0))

    def test_max_gens_truncates_pdf(self):
        pdf = [0.0, 0.5, 0.3, 0.2]
        d = gendist_distribution(1.0, pdf, max_gens=2, max_dist=15)
        np.testing.assert_allclose(d.unlinked, stats.poisson.pmf(d.dist, 2.0))

    def test_no_unlinked_mass_raises(self):
        with pytest.raises(InvalidDistributionError, match="unlinked"):
            gendist_distribution(1.0, [0.0, 1.0], max_gens=1)

    def test_link_threshold_covering_all_generations_raises(self, gens_pdf):
        with pytest.raises(InvalidDistributionError):
            gendist_distribution(1.0, gens_pdf, max_link_gens=2)

    def test_no_linked_mass_raises(self):
        with pytest.raises(InvalidDistributionError, match="linked"):
            gendist_distribution(1.0, [0.0, 0.0, 0.5, 0.5])

    def test_all_zero_distribution_raises(self):
        with pytest.raises(InvalidDistributionError):
            gendist_distribution(1.0, [0.0, 0.0, 0.0])

    def test_tiny_mutation_rate_tabulates_distance_zero_only(self, gens_pdf):
        with pytest.warns(RuntimeWarning):
            d = gendist_distribution(1e-6, gens_pdf)
        assert d.bounds.max_dist == 0
        np.testing.assert_array_equal(d.dist, [0])
        assert d.linked[0] == pytest.approx(np.exp(-1e-6))

    def test_wide_frame(self, gens_pdf):
        frame = gendist_distribution(1.0, gens_pdf).to_frame()
        assert list(frame.columns) == ["dist", "linked", "unlinked"]
        assert len(frame) == 11

    def test_long_frame(self, gens_pdf):
        frame = gendist_distribution(1.0, gens_pdf).to_frame(long=True)
        assert list(frame.columns) == ["dist", "status", "prob"]
        assert len(frame) == 22
        assert set(frame["status"]) == {"linked", "unlinked"}


# =============================================================================
# Sensitivity and specificity
# =============================================================================


class TestGendistSensspecCutoff:
    """Test the default sensitivity/specificity engine."""

    def test_reference_values(self, gens_pdf):
        """At cutoff 1: sens = P(Pois(1) <= 1), spec = P(Pois(2) > 1)."""
        (row,) = gendist_sensspec_cutoff([1], 1.0, gens_pdf)

        assert isinstance(row, SensSpecRow)
        assert row.cutoff == 1
        assert row.sensitivity == pytest.approx(2 * np.exp(-1.0))
        assert row.specificity == pytest.approx(1 - 3 * np.exp(-2.0))

    def test_matches_cumulative_pmfs(self, gens_pdf):
        cutoffs = [1, 2, 3, 5, 8]
        d = gendist_distribution(1.0, gens_pdf)
        rows = gendist_sensspec_cutoff(cutoffs, 1.0, gens_pdf)

        assert [r.cutoff for r in rows] == cutoffs
        np.testing.assert_allclose(
            [r.sensitivity for r in rows], np.cumsum(d.linked)[cutoffs]
        )
        np.testing.assert_allclose(
            [r.specificity for r in rows], 1 - np.cumsum(d.unlinked)[cutoffs]
        )

    def test_monotone_in_cutoff(self, gens_pdf):
        rows = gendist_sensspec_cutoff(list(range(1, 11)), 1.0, gens_pdf)
        sens = np.array([r.sensitivity for r in rows])
        spec = np.array([r.specificity for r in rows])

        assert np.all(np.diff(sens) >= 0)
        assert np.all(np.diff(spec) <= 0)
        assert np.all((sens >= 0) & (sens <= 1))
        assert np.all((spec >= 0) & (spec <= 1))

    def test_preserves_given_order(self, gens_pdf):
        rows = gendist_sensspec_cutoff([3, 1, 2], 1.0, gens_pdf)
        assert [r.cutoff for r in rows] == [3, 1, 2]

    def test_cutoff_at_max_dist_allowed(self, gens_pdf):
        rows = gendist_sensspec_cutoff([10], 1.0, gens_pdf)
        assert rows[0].cutoff == 10

    def test_cutoff_beyond_max_dist_raises(self, gens_pdf):
        with pytest.raises(CutoffRangeError) as exc_info:
            gendist_sensspec_cutoff([5, 11], 1.0, gens_pdf)
        assert isinstance(exc_info.value, InvalidParameterError)
        assert isinstance(exc_info.value, ValueError)

    def test_explicit_max_dist_bounds_cutoffs(self, gens_pdf):
        with pytest.raises(CutoffRangeError):
            gendist_sensspec_cutoff([4], 1.0, gens_pdf, max_dist=3)

    def test_derived_zero_max_dist_rejects_positive_cutoff(self, gens_pdf):
        with pytest.warns(RuntimeWarning, match="max_dist is 0"):
            with pytest.raises(CutoffRangeError, match="max_dist=0"):
                gendist_sensspec_cutoff([1], 1e-6, gens_pdf)

    def test_derived_zero_max_dist_allows_cutoff_zero(self, gens_pdf):
        with pytest.warns(RuntimeWarning):
            rows = gendist_sensspec_cutoff([0], 1e-6, gens_pdf)
        assert rows[0].sensitivity == pytest.approx(np.exp(-1e-6))
        assert rows[0].specificity == pytest.approx(1.0 - np.exp(-2e-6), abs=1e-12)

    def test_generation_distribution_checked_once(self, monkeypatch, gens_pdf):
        calls = []
        original = params.validate_generation_distribution

        def counting(generation_distribution):
            calls.append(generation_distribution)
            return original(generation_distribution)

        monkeypatch.setattr(params, "validate_generation_distribution", counting)
        gendist_sensspec_cutoff([1, 2, 3], 1.0, gens_pdf)
        assert len(calls) == 1
