#!/usr/bin/env python
"""
Genetic Distance Cutoff ROC Curves

Computes the ROC curve of the "linked if genetic distance <= cutoff" rule for
one or more mutation rates and writes the curves and a summary to disk.

Usage:
    python run_roc.py --gens-pdf 0 0.6 0.4                 # Mutation rate 1
    python run_roc.py --mut-rates 0.5 1 2 --gens-pdf 0 0.6 0.4
    python run_roc.py --gens-csv data/gens.csv --max-link-gens 2
    python run_roc.py --help                                 # Show all options
"""

import argparse
import json
from pathlib import Path

import numpy as np
import pandas as pd
from tqdm import tqdm

from gendist_roc import ModelBounds, compute_roc_curve

# =============================================================================
# Configuration
# =============================================================================


def load_generation_distribution(args: argparse.Namespace) -> np.ndarray:
    """Read the generation distribution from the command line or a CSV file.

    The CSV may hold the probabilities as a single row or a single column,
    with no header.
    """
    if args.gens_csv is not None:
        table = pd.read_csv(args.gens_csv, header=None)
        return table.to_numpy(dtype=float).ravel()
    return np.asarray(args.gens_pdf, dtype=float)


def default_cutoffs(
    bounds: ModelBounds, mutation_rate: float, pdf: np.ndarray
) -> np.ndarray:
    """Cutoffs 1 .. max_dist - 1, the full range of informative distances.

    Empty when ``max_dist`` is 0, since every modelled pair then has distance
    0 and no positive cutoff is in range.
    """
    resolved = bounds.resolve(mutation_rate, pdf)
    if resolved.max_dist < 1:
        return np.arange(0)
    return np.arange(1, max(resolved.max_dist, 2))


# =============================================================================
# Main Entry Point
# =============================================================================


def main():
    parser = argparse.ArgumentParser(
        description="Compute ROC curves for genetic distance linkage cutoffs",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--mut-rates",
        type=float,
        nargs="+",
        default=[1.0],
        help="Mean mutations per generation; one curve per rate",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--gens-pdf",
        type=float,
        nargs="+",
        help="Generation distribution, indexed by generations of separation",
    )
    source.add_argument(
        "--gens-csv",
        type=Path,
        help="CSV file holding the generation distribution",
    )
    parser.add_argument(
        "--max-link-gens",
        type=int,
        default=1,
        help="Maximum generations of separation for linked pairs",
    )
    parser.add_argument(
        "--max-gens", type=int, default=None, help="Maximum generations to model"
    )
    parser.add_argument(
        "--max-dist", type=int, default=None, help="Maximum genetic distance to model"
    )
    parser.add_argument(
        "--max-cutoff",
        type=int,
        default=None,
        help="Largest cutoff to sweep (defaults to max_dist - 1)",
    )

    # Output
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("data/results"),
        help="Output directory for results",
    )

    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    pdf = load_generation_distribution(args)
    bounds = ModelBounds(
        max_link_gens=args.max_link_gens, max_gens=args.max_gens, max_dist=args.max_dist
    )

    print("\n" + "=" * 60)
    print("ROC CONFIGURATION")
    print("=" * 60)
    print(f"Mutation rates: {args.mut_rates}")
    print(f"Generation distribution: {pdf.tolist()}")
    print(f"Max linked generations: {bounds.max_link_gens}")
    print(f"Max generations: {bounds.max_gens if bounds.max_gens else 'derived'}")
    print(f"Max distance: {bounds.max_dist if bounds.max_dist else 'derived'}")
    print(f"Output directory: {output_dir}")
    print("=" * 60)

    frames = []
    summary = []
    for mut_rate in tqdm(args.mut_rates, desc="Mutation rates"):
        if args.max_cutoff is None:
            cutoffs = default_cutoffs(bounds, mut_rate, pdf)
        else:
            cutoffs = np.arange(1, args.max_cutoff + 1)

        if cutoffs.size == 0:
            tqdm.write(f"  mut_rate={mut_rate:g}: no cutoffs in range; skipped")
            continue

        curve = compute_roc_curve(cutoffs, mut_rate, pdf, bounds=bounds)
        best_cutoff, best_j = curve.youden()

        frame = curve.to_frame()
        frame.insert(0, "mut_rate", mut_rate)
        frames.append(frame)

        summary.append(
            {
                "mut_rate": mut_rate,
                "n_cutoffs": len(cutoffs),
                "auc": curve.auc(),
                "youden_cutoff": best_cutoff,
                "youden_j": best_j,
            }
        )
        tqdm.write(
            f"  mut_rate={mut_rate:g}: AUC={curve.auc():.4f}, "
            f"best cutoff={best_cutoff} (J={best_j:.4f})"
        )

    if not frames:
        print("No curves computed; nothing saved")
        return

    csv_path = output_dir / "roc_curves.csv"
    pd.concat(frames, ignore_index=True).to_csv(csv_path, index=False)

    json_path = output_dir / "roc_summary.json"
    with open(json_path, "w") as f:
        json.dump(summary, f, indent=2)

    print(f"  Saved: {csv_path.name}")
    print(f"  Saved: {json_path.name}")


if __name__ == "__main__":
    main()
