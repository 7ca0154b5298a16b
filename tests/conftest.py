"""
pytest configuration and shared fixtures.
"""

import matplotlib

matplotlib.use("Agg")

import pytest
import numpy as np

from pyregdiag.datasets import load_dataset
from pyregdiag.regression import Design


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression dataset with an intercept column."""
    n = 100
    X = np.column_stack([np.ones(n), rng.standard_normal((n, 2))])
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity: x3 = x1 + x2."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    X = np.column_stack([np.ones(n), x1, x2, x1 + x2])
    y = rng.standard_normal(n)
    return X, y


@pytest.fixture
def stackloss_design():
    """stack_loss ~ air_flow + water_temp + acid_conc."""
    return Design.from_datasource(load_dataset('stackloss'), y='stack_loss')


@pytest.fixture
def cars_design():
    """dist ~ speed."""
    return Design.from_datasource(load_dataset('cars'), x='speed', y='dist')


@pytest.fixture
def longley_design():
    """employed ~ gnp + population."""
    return Design.from_datasource(
        load_dataset('longley'), x=['gnp', 'population'], y='employed'
    )


@pytest.fixture
def corrosion_design():
    """loss ~ fe."""
    return Design.from_datasource(load_dataset('corrosion'), x='fe', y='loss')


@pytest.fixture
def ar1_series(rng):
    """Regression with strongly autocorrelated AR(1) errors (phi = 0.8)."""
    n = 200
    e = np.empty(n)
    e[0] = rng.standard_normal() / np.sqrt(1 - 0.64)
    for t in range(1, n):
        e[t] = 0.8 * e[t - 1] + rng.standard_normal()
    x = np.linspace(0.0, 10.0, n)
    X = np.column_stack([np.ones(n), x])
    y = 2.0 + 0.5 * x + e
    return X, y
