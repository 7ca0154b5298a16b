"""
Reference datasets used by the course walkthroughs.

Exact copies of the classic datasets shipped with R (datasets package) and
with Faraway's teaching package. Column names are lower_snake_case versions
of the R names.

    stackloss   Brownlee's stack loss plant data (robust regression)
    cars        Ezekiel's speed and stopping distances (WLS)
    longley     Longley's macroeconomic data, 1947-1962 (GLS, AR(1))
    corrosion   Corrosion loss in Cu-Ni alloys (lack-of-fit)
    strongx     Strong interaction experiment (WLS with known SDs)
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pyregdiag.core.datasource import DataSource
from pyregdiag.core.exceptions import ValidationError


stackloss = {
    'air_flow': [80, 80, 75, 62, 62, 62, 62, 62, 58, 58, 58,
                 58, 58, 58, 50, 50, 50, 50, 50, 56, 70],
    'water_temp': [27, 27, 25, 24, 22, 23, 24, 24, 23, 18, 18,
                   17, 18, 19, 18, 18, 19, 19, 20, 20, 20],
    'acid_conc': [89, 88, 90, 87, 87, 87, 93, 93, 87, 80, 89,
                  88, 82, 93, 89, 86, 72, 79, 80, 82, 91],
    'stack_loss': [42, 37, 37, 28, 18, 18, 19, 20, 15, 14, 14,
                   13, 11, 12, 8, 7, 8, 8, 9, 15, 15],
}

cars = {
    'speed': [4, 4, 7, 7, 8, 9, 10, 10, 10, 11, 11, 12, 12, 12, 12, 13, 13,
              13, 13, 14, 14, 14, 14, 15, 15, 15, 16, 16, 17, 17, 17, 18, 18,
              18, 18, 19, 19, 19, 20, 20, 20, 20, 20, 22, 23, 24, 24, 24, 24,
              25],
    'dist': [2, 10, 4, 22, 16, 10, 18, 26, 34, 17, 28, 14, 20, 24, 28, 26,
             34, 34, 46, 26, 36, 60, 80, 20, 26, 54, 32, 40, 32, 40, 50, 42,
             56, 76, 84, 36, 46, 68, 32, 48, 52, 56, 64, 66, 54, 70, 92, 93,
             120, 85],
}

longley = {
    'gnp_deflator': [83.0, 88.5, 88.2, 89.5, 96.2, 98.1, 99.0, 100.0,
                     101.2, 104.6, 108.4, 110.8, 112.6, 114.2, 115.7, 116.9],
    'gnp': [234.289, 259.426, 258.054, 284.599, 328.975, 346.999, 365.385,
            363.112, 397.469, 419.180, 442.769, 444.546, 482.704, 502.601,
            518.173, 554.894],
    'unemployed': [235.6, 232.5, 368.2, 335.1, 209.9, 193.2, 187.0, 357.8,
                   290.4, 282.2, 293.6, 468.1, 381.3, 393.1, 480.6, 400.7],
    'armed_forces': [159.0, 145.6, 161.6, 165.0, 309.9, 359.4, 354.7, 335.0,
                     304.8, 285.7, 279.8, 263.7, 255.2, 251.4, 257.2, 282.7],
    'population': [107.608, 108.632, 109.773, 110.929, 112.075, 113.270,
                   115.094, 116.219, 117.388, 118.734, 120.445, 121.950,
                   123.366, 125.368, 127.852, 130.081],
    'year': list(range(1947, 1963)),
    'employed': [60.323, 61.122, 60.171, 61.187, 63.221, 63.639, 64.989,
                 63.761, 66.019, 67.857, 68.169, 66.513, 68.655, 69.564,
                 69.331, 70.551],
}

corrosion = {
    'fe': [0.01, 0.48, 0.71, 0.95, 1.19, 0.01, 0.48, 1.44, 0.71, 1.96,
           0.01, 1.44, 1.96],
    'loss': [127.6, 124.0, 110.8, 103.9, 101.5, 130.1, 122.0, 92.3, 113.1,
             83.7, 128.0, 91.4, 86.2],
}

strongx = {
    'momentum': [4, 6, 8, 10, 12, 15, 20, 30, 75, 150],
    'energy': [0.345, 0.287, 0.251, 0.225, 0.207, 0.186, 0.161, 0.132,
               0.084, 0.060],
    'crossx': [367, 311, 295, 268, 253, 239, 220, 213, 193, 192],
    'sd': [17, 9, 9, 7, 7, 6, 6, 6, 5, 5],
}


_REGISTRY: dict[str, tuple[dict[str, list[Any]], str]] = {
    'stackloss': (
        stackloss,
        "Operational data of a plant oxidising ammonia to nitric acid "
        "(21 days). Response: stack_loss.",
    ),
    'cars': (
        cars,
        "Speed (mph) and stopping distance (ft) of 50 cars recorded in the "
        "1920s. Response: dist.",
    ),
    'longley': (
        longley,
        "US macroeconomic series 1947-1962, highly collinear. "
        "Response: employed.",
    ),
    'corrosion': (
        corrosion,
        "Weight loss of 13 Cu-Ni alloy bars by iron content, with "
        "replicated fe values. Response: loss.",
    ),
    'strongx': (
        strongx,
        "Cross-section of a pi-meson proton interaction at ten momenta with "
        "known measurement SDs. Response: crossx.",
    ),
}


def list_datasets() -> list[str]:
    """Names of the bundled datasets, sorted."""
    return sorted(_REGISTRY)


def describe_dataset(name: str) -> str:
    """One-paragraph description of a bundled dataset."""
    columns, description = _lookup(name)
    n = len(next(iter(columns.values())))
    return f"{name}: {n} rows, columns {list(columns)}. {description}"


def load_dataset(name: str, *, as_frame: bool = False) -> Any:
    """
    Load a bundled dataset.

    Args:
        name: One of list_datasets()
        as_frame: Return a pandas DataFrame instead of a DataSource

    Returns:
        DataSource (default) or pandas.DataFrame

    Raises:
        ValidationError: If the name is unknown
    """
    columns, _ = _lookup(name)
    arrays = {col: np.asarray(values, dtype=np.float64) for col, values in columns.items()}
    ds = DataSource.from_arrays(name=name, **arrays)
    if as_frame:
        return ds.to_frame()
    return ds


def _lookup(name: str) -> tuple[dict[str, list[Any]], str]:
    try:
        return _REGISTRY[name]
    except KeyError:
        raise ValidationError(
            f"Unknown dataset {name!r}. Available: {list_datasets()}"
        ) from None
