"""
Tests for Design construction.
"""

import numpy as np
import pytest

from pyregdiag.core.datasource import DataSource
from pyregdiag.core.exceptions import DimensionError, ValidationError
from pyregdiag.datasets import load_dataset
from pyregdiag.regression import Design
from pyregdiag.regression.design import INTERCEPT_NAME, as_design


class TestFromDatasource:

    def test_all_other_columns(self):
        design = Design.from_datasource(load_dataset('stackloss'), y='stack_loss')
        assert design.names == (INTERCEPT_NAME, 'air_flow', 'water_temp', 'acid_conc')
        assert design.response_name == 'stack_loss'
        assert design.has_intercept
        assert (design.n, design.p) == (21, 4)

    def test_no_intercept(self):
        design = Design.from_datasource(
            load_dataset('cars'), x='speed', y='dist', intercept=False
        )
        assert design.names == ('speed',)
        assert not design.has_intercept

    def test_weights_column_excluded_from_x(self):
        ds = DataSource.from_arrays(x=[1, 2, 3, 4], y=[1, 3, 2, 5], w=[1, 2, 1, 2])
        design = Design.from_datasource(ds, y='y', weights='w')
        assert design.names == (INTERCEPT_NAME, 'x')
        np.testing.assert_array_equal(design.weights, [1, 2, 1, 2])

    def test_missing_column(self):
        with pytest.raises(KeyError):
            Design.from_datasource(load_dataset('cars'), x='weight', y='dist')


class TestFromArrays:

    def test_1d_x_reshaped(self):
        design = Design.from_arrays([1.0, 2.0, 3.0], [2.0, 4.0, 6.5])
        assert design.X.shape == (3, 1)
        assert design.names == ('x0',)

    def test_length_mismatch(self):
        with pytest.raises(DimensionError):
            Design.from_arrays(np.ones((5, 2)), np.ones(4))

    def test_non_finite(self):
        with pytest.raises(ValidationError, match="non-finite"):
            Design.from_arrays(np.ones((3, 1)), [1.0, np.nan, 2.0])

    def test_wrong_number_of_names(self):
        with pytest.raises(ValidationError, match="names"):
            Design.from_arrays(np.ones((3, 2)), np.ones(3), names=['a'])

    def test_immutable(self):
        design = Design.from_arrays(np.ones((3, 1)), np.ones(3))
        with pytest.raises(AttributeError):
            design._n = 4


class TestAsDesign:

    def test_with_weights_copy(self, cars_design):
        weighted = as_design(cars_design, weights=np.full(cars_design.n, 2.0))
        assert weighted.weights is not None
        assert cars_design.weights is None

    def test_design_with_names_rejected(self, cars_design):
        with pytest.raises(ValidationError):
            as_design(cars_design, names=['a', 'b'])
