"""
Tests for the bundled datasets.
"""

import numpy as np
import pandas as pd
import pytest

from pyregdiag.core.datasource import DataSource
from pyregdiag.core.exceptions import ValidationError
from pyregdiag.datasets import list_datasets, describe_dataset, load_dataset


EXPECTED_SHAPES = {
    'stackloss': (21, 4),
    'cars': (50, 2),
    'longley': (16, 7),
    'corrosion': (13, 2),
    'strongx': (10, 4),
}


class TestRegistry:

    def test_list(self):
        assert list_datasets() == sorted(EXPECTED_SHAPES)

    @pytest.mark.parametrize("name", sorted(EXPECTED_SHAPES))
    def test_shapes(self, name):
        ds = load_dataset(name)
        assert isinstance(ds, DataSource)
        assert (ds.n_observations, len(ds.columns)) == EXPECTED_SHAPES[name]
        assert ds.metadata['name'] == name

    def test_as_frame(self):
        df = load_dataset('cars', as_frame=True)
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['speed', 'dist']

    def test_describe(self):
        text = describe_dataset('corrosion')
        assert text.startswith('corrosion: 13 rows')

    def test_unknown_name(self):
        with pytest.raises(ValidationError, match="Available"):
            load_dataset('iris')


class TestValues:
    """Spot checks against the R copies of the datasets."""

    def test_stackloss_totals(self):
        ds = load_dataset('stackloss')
        assert ds['stack_loss'].sum() == 368
        assert ds['air_flow'].sum() == 1269

    def test_cars_totals(self):
        ds = load_dataset('cars')
        assert ds['speed'].sum() == 770
        assert ds['dist'].sum() == 2149

    def test_longley_years(self):
        ds = load_dataset('longley')
        np.testing.assert_array_equal(ds['year'], np.arange(1947, 1963))

    def test_corrosion_has_replicates(self):
        ds = load_dataset('corrosion')
        assert len(np.unique(ds['fe'])) < ds.n_observations
