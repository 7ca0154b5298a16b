"""
Tests for DataSource.
"""

import numpy as np
import pandas as pd
import pytest

from pyregdiag.core.datasource import DataSource
from pyregdiag.core.exceptions import DimensionError, ValidationError


class TestFromArrays:

    def test_columns_and_length(self):
        ds = DataSource.from_arrays(a=[1, 2, 3], b=[4.0, 5.0, 6.0])
        assert ds.keys() == frozenset({'a', 'b'})
        assert ds.columns == ['a', 'b']
        assert ds.n_observations == 3
        assert len(ds) == 3
        assert 'a' in ds
        assert ds['a'].dtype == np.float64

    def test_name_recorded(self):
        ds = DataSource.from_arrays(name='toy', a=[1, 2])
        assert ds.metadata['name'] == 'toy'

    def test_inconsistent_lengths(self):
        with pytest.raises(DimensionError, match="Inconsistent"):
            DataSource.from_arrays(a=[1, 2, 3], b=[1, 2])

    def test_rejects_2d_column(self):
        with pytest.raises(DimensionError):
            DataSource.from_arrays(a=np.ones((2, 2)))

    def test_no_columns(self):
        with pytest.raises(ValidationError):
            DataSource.from_arrays()

    def test_missing_column_lists_available(self):
        ds = DataSource.from_arrays(a=[1, 2])
        with pytest.raises(KeyError, match="Available"):
            ds['b']


class TestPandas:

    def test_roundtrip(self):
        df = pd.DataFrame({'x': [1.0, 2.0, 3.0], 'y': [2.0, 4.0, 7.0]})
        ds = DataSource.from_dataframe(df)
        assert ds.metadata['source'] == 'dataframe'
        pd.testing.assert_frame_equal(ds.to_frame(), df)

    def test_non_numeric_column(self):
        df = pd.DataFrame({'x': ['a', 'b']})
        with pytest.raises(ValidationError, match="cannot convert"):
            DataSource.from_dataframe(df)

    def test_from_csv(self, tmp_path):
        path = tmp_path / "toy.csv"
        pd.DataFrame({'x': [1, 2, 3], 'y': [3, 2, 1]}).to_csv(path, index=False)
        ds = DataSource.from_file(path)
        assert ds.columns == ['x', 'y']
        assert ds.metadata['name'] == 'toy'
        np.testing.assert_array_equal(ds['y'], [3.0, 2.0, 1.0])

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValidationError, match="Unknown file format"):
            DataSource.from_file(tmp_path / "data.xlsx")
