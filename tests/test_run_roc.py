"""
Tests for the ROC driver script.

Critical behaviors tested:
1. Default cutoffs run 1 .. max_dist - 1
2. A mutation rate whose derived max_dist is 0 gets no cutoffs and is skipped
3. Curves and the summary are written only for rates that were computed
"""

import importlib.util
import json
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from gendist_roc import ModelBounds

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_roc.py"


@pytest.fixture(scope="module")
def run_roc():
    spec = importlib.util.spec_from_file_location("run_roc", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def gens_pdf():
    return np.array([0.0, 0.6, 0.4])


class TestDefaultCutoffs:
    def test_reference_range(self, run_roc, gens_pdf):
        cutoffs = run_roc.default_cutoffs(ModelBounds(), 1.0, gens_pdf)
        np.testing.assert_array_equal(cutoffs, np.arange(1, 10))

    def test_explicit_max_dist_one_keeps_cutoff_one(self, run_roc, gens_pdf):
        cutoffs = run_roc.default_cutoffs(ModelBounds(max_dist=1), 1.0, gens_pdf)
        np.testing.assert_array_equal(cutoffs, [1])

    def test_zero_max_dist_gives_no_cutoffs(self, run_roc, gens_pdf):
        with pytest.warns(RuntimeWarning):
            cutoffs = run_roc.default_cutoffs(ModelBounds(), 1e-6, gens_pdf)
        assert cutoffs.size == 0


class TestMain:
    def run(self, run_roc, monkeypatch, tmp_path, *rates):
        argv = ["run_roc.py", "--mut-rates", *map(str, rates)]
        argv += ["--gens-pdf", "0", "0.6", "0.4", "--output-dir", str(tmp_path)]
        monkeypatch.setattr(sys, "argv", argv)
        run_roc.main()

    def test_tiny_rate_skipped(self, run_roc, monkeypatch, tmp_path, capsys):
        with pytest.warns(RuntimeWarning):
            self.run(run_roc, monkeypatch, tmp_path, 1e-6, 1.0)

        assert "skipped" in capsys.readouterr().out
        curves = pd.read_csv(tmp_path / "roc_curves.csv")
        assert set(curves["mut_rate"]) == {1.0}
        summary = json.loads((tmp_path / "roc_summary.json").read_text())
        assert [entry["mut_rate"] for entry in summary] == [1.0]

    def test_nothing_saved_when_every_rate_skipped(
        self, run_roc, monkeypatch, tmp_path, capsys
    ):
        with pytest.warns(RuntimeWarning):
            self.run(run_roc, monkeypatch, tmp_path, 1e-6)

        assert "nothing saved" in capsys.readouterr().out
        assert not (tmp_path / "roc_curves.csv").exists()
