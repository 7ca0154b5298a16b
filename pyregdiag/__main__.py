"""
Command-line walkthroughs of the course examples.

    python -m pyregdiag list
    python -m pyregdiag show longley
    python -m pyregdiag gls [--method ML] [--plot-dir DIR]
    python -m pyregdiag wls [--plot-dir DIR]
    python -m pyregdiag lack-of-fit [--plot-dir DIR]
    python -m pyregdiag robust [--seed N] [--plot-dir DIR]

Each walkthrough loads a bundled dataset, fits the naive model, prints the
diagnostic that exposes its problem and then the remedy.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Sequence

import numpy as np

from pyregdiag import __version__
from pyregdiag.core.exceptions import RegDiagError
from pyregdiag.datasets import list_datasets, describe_dataset, load_dataset
from pyregdiag.regression import Design, fit, lack_of_fit, compare
from pyregdiag.gls import gls
from pyregdiag.robust import rlm, lts, lad
from pyregdiag.diagnostics import (
    acf,
    durbin_watson,
    breusch_pagan,
    box_test,
    outlier_test,
)

RULE = "-" * 72


def _section(title: str) -> None:
    print()
    print(RULE)
    print(title)
    print(RULE)


def _plotter(plot_dir: str | None) -> Callable[[str, object], None] | None:
    """Return save(name, figure) writing PNGs to plot_dir, or None."""
    if plot_dir is None:
        return None
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from pyregdiag.plotting import save_figure

    root = Path(plot_dir)

    def save(name: str, fig) -> None:
        path = save_figure(fig, root / f"{name}.png")
        plt.close(fig)
        print(f"saved {path}")

    return save


def cmd_list(args: argparse.Namespace) -> int:
    for name in list_datasets():
        print(describe_dataset(name))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    print(describe_dataset(args.name))
    print()
    print(load_dataset(args.name, as_frame=True).to_string())
    return 0


def cmd_gls(args: argparse.Namespace) -> int:
    ds = load_dataset('longley')
    design = Design.from_datasource(ds, x=['gnp', 'population'], y='employed')

    _section("OLS: employed ~ gnp + population (longley)")
    ols = fit(design)
    print(ols.summary())
    print()
    print(f"Durbin-Watson: {durbin_watson(ols):.4f}")
    print(box_test(ols, lag=1, data_name='OLS residuals').summary())
    print(acf(ols, data_name='OLS residuals').summary())

    _section(f"GLS with AR(1) errors, fit by {args.method}")
    ar1 = gls(design, time=ds['year'], method=args.method)
    print(ar1.summary())
    print()
    print(acf(ar1.normalized_residuals, data_name='normalized residuals').summary())

    save = _plotter(args.plot_dir)
    if save is not None:
        from pyregdiag.plotting import plot_acf, plot_diagnostics
        save("gls_ols_diagnostics", plot_diagnostics(ols))
        save("gls_ols_acf", plot_acf(acf(ols, data_name='OLS residuals')))
        save("gls_normalized_acf",
             plot_acf(acf(ar1.normalized_residuals, data_name='normalized residuals')))
    return 0


def cmd_wls(args: argparse.Namespace) -> int:
    cars = load_dataset('cars')
    cars_design = Design.from_datasource(cars, x='speed', y='dist')

    _section("OLS: dist ~ speed (cars)")
    cars_ols = fit(cars_design)
    print(cars_ols.summary())
    print()
    print(breusch_pagan(cars_ols, data_name='dist ~ speed').summary())

    strongx = load_dataset('strongx')
    sx_design = Design.from_datasource(strongx, x='energy', y='crossx')

    _section("OLS vs WLS: crossx ~ energy (strongx), weights = 1 / sd^2")
    sx_ols = fit(sx_design)
    sx_wls = fit(sx_design, weights=1.0 / strongx['sd'] ** 2)
    print(sx_ols.summary())
    print()
    print(sx_wls.summary())

    save = _plotter(args.plot_dir)
    if save is not None:
        from pyregdiag.plotting import plot_diagnostics, plot_fits
        save("wls_cars_diagnostics", plot_diagnostics(cars_ols))
        save("wls_strongx_fits", plot_fits(
            strongx['energy'], strongx['crossx'],
            {'OLS': sx_ols, 'WLS': sx_wls},
            x_name='energy', y_name='crossx',
        ))
    return 0


def cmd_lack_of_fit(args: argparse.Namespace) -> int:
    ds = load_dataset('corrosion')
    line = fit(Design.from_datasource(ds, x='fe', y='loss'))

    _section("OLS: loss ~ fe (corrosion)")
    print(line.summary())

    _section("Pure-error lack-of-fit test")
    print(lack_of_fit(line).summary())

    _section("Straight line vs one mean per fe level")
    levels = np.unique(ds['fe'])
    dummies = (ds['fe'][:, np.newaxis] == levels[np.newaxis, :]).astype(float)
    saturated = fit(dummies, ds['loss'], names=[f"fe={v:g}" for v in levels])
    print(compare(line, saturated).summary())

    save = _plotter(args.plot_dir)
    if save is not None:
        from pyregdiag.plotting import plot_diagnostics
        save("lack_of_fit_diagnostics", plot_diagnostics(line))
    return 0


def cmd_robust(args: argparse.Namespace) -> int:
    ds = load_dataset('stackloss')
    design = Design.from_datasource(ds, y='stack_loss')

    _section("OLS: stack_loss ~ . (stackloss)")
    ols = fit(design)
    print(ols.summary())
    print()
    print(outlier_test(ols, data_name='stack_loss ~ .').summary())

    fits = {}
    for psi in ('huber', 'hampel', 'bisquare'):
        _section(f"M-estimation, psi = {psi}")
        fits[psi] = rlm(design, psi=psi)
        print(fits[psi].summary())

    _section("Least trimmed squares")
    trimmed = lts(design, seed=args.seed)
    print(trimmed.summary())

    _section("LAD (median) regression")
    median = lad(design)
    print(median.summary())

    save = _plotter(args.plot_dir)
    if save is not None:
        from pyregdiag.plotting import plot_diagnostics, plot_robust_weights
        save("robust_ols_diagnostics", plot_diagnostics(ols))
        for psi, model in fits.items():
            save(f"robust_weights_{psi}", plot_robust_weights(model))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyregdiag",
        description="Regression diagnostics and remedies on the bundled course datasets.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List bundled datasets")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("show", help="Print a bundled dataset")
    p.add_argument("name", help="Dataset name (see 'list')")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("gls", help="Serial correlation: OLS vs GLS with AR(1) errors (longley)")
    p.add_argument("--method", choices=("REML", "ML"), default="REML",
                   help="Likelihood used for phi (default: REML)")
    p.set_defaults(func=cmd_gls)

    p = sub.add_parser("wls", help="Non-constant variance: Breusch-Pagan and WLS (cars, strongx)")
    p.set_defaults(func=cmd_wls)

    p = sub.add_parser("lack-of-fit", help="Pure-error lack-of-fit F test (corrosion)")
    p.set_defaults(func=cmd_lack_of_fit)

    p = sub.add_parser("robust", help="Outliers: M-estimation, LTS and LAD (stackloss)")
    p.add_argument("--seed", type=int, default=1, help="Seed for LTS random starts (default: 1)")
    p.set_defaults(func=cmd_robust)

    for name, action in sub.choices.items():
        if name not in ("list", "show"):
            action.add_argument("--plot-dir", default=None,
                                help="Write diagnostic figures (PNG) to this directory")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except RegDiagError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
