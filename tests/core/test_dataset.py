"""
Tests for Dataset.

Validates:
    - build(): column/name validation, role validation, immutability
    - Factories: from_arrays, from_columns, from_dataframe, from_file
    - Access: __getitem__, __contains__, position(s), response
    - same_structure()
"""

import numpy as np
import pytest

from pystatmodel.core.dataset import Dataset
from pystatmodel.core.exceptions import ConfigurationError, DimensionError, ValidationError


# ═══════════════════════════════════════════════════════════════════════
# Construction
# ═══════════════════════════════════════════════════════════════════════


class TestBuild:
    """Dataset.build validates names, roles and column lengths."""

    def test_basic(self, data1):
        assert data1.varnames == ('y', 'x1', 'x2')
        assert data1.yname == 'y'
        assert data1.xnames == ('x1', 'x2')
        assert data1.n_observations == 7
        assert data1.n_variables == 3

    def test_contract_aliases(self, data1):
        assert data1.response_name == data1.yname
        assert data1.predictor_names == data1.xnames
        assert data1.columns() is data1.data

    def test_columns_are_float64(self, data1):
        for col in data1.data:
            assert col.dtype == np.float64

    def test_name_count_mismatch(self):
        with pytest.raises(DimensionError, match="len\\(data\\)=2 and len\\(varnames\\)=3"):
            Dataset.build([[1, 2], [3, 4]], ['y', 'x', 'z'], 'y', ['x'])

    def test_column_length_mismatch(self):
        with pytest.raises(DimensionError, match="Inconsistent lengths"):
            Dataset.build([[1, 2, 3], [3, 4]], ['y', 'x'], 'y', ['x'])

    def test_unknown_predictor(self):
        with pytest.raises(ConfigurationError) as excinfo:
            Dataset.build([[1, 2], [3, 4]], ['y', 'x'], 'y', ['x', 'z'])
        assert excinfo.value.missing == ('z',)
        assert excinfo.value.available == ('y', 'x')

    def test_unknown_response(self):
        with pytest.raises(ConfigurationError, match="'w'"):
            Dataset.build([[1, 2], [3, 4]], ['y', 'x'], 'w', ['x'])

    def test_duplicate_names(self):
        with pytest.raises(ConfigurationError, match="Duplicate"):
            Dataset.build([[1, 2], [3, 4]], ['x', 'x'], 'x', ['x'])

    def test_non_numeric_column(self):
        with pytest.raises(ValidationError):
            Dataset.build([[1, 2], ['a', 'b']], ['y', 'x'], 'y', ['x'])

    def test_2d_column_rejected(self):
        with pytest.raises(DimensionError):
            Dataset.build([[1, 2], [[1, 2], [3, 4]]], ['y', 'x'], 'y', ['x'])


class TestImmutability:
    """Columns are private read-only copies."""

    def test_columns_read_only(self, data1):
        with pytest.raises(ValueError):
            data1['x2'][0] = 100.0

    def test_row_count_from_columns(self):
        ds = Dataset(
            _data=(np.zeros(3), np.arange(3.0)),
            _varnames=('y', 'x'),
            _yname='y',
            _xnames=('x',),
        )
        assert ds.n_observations == 3

    def test_row_count_ignores_metadata(self):
        ds = Dataset.build([[1, 2], [3, 4]], ['y', 'x'], 'y', ['x'], metadata={'n_observations': 99})
        assert ds.n_observations == 2

    def test_source_mutation_does_not_leak(self):
        x = np.array([1.0, 2.0, 3.0])
        ds = Dataset.build([x, x], ['y', 'x'], 'y', ['x'])
        x[0] = 99.0
        assert ds['x'][0] == 1.0


# ═══════════════════════════════════════════════════════════════════════
# Factories
# ═══════════════════════════════════════════════════════════════════════


class _Columns:
    """Minimal column store satisfying the ColumnSource protocol."""

    def __init__(self, names, data):
        self._names = names
        self._data = data

    def names(self):
        return self._names

    def data(self):
        return self._data


class TestFactories:
    """Alternative constructors all route through build()."""

    def test_from_arrays_keeps_keyword_order(self):
        ds = Dataset.from_arrays(yname='y', xnames=['b', 'a'], y=[0, 1], a=[1, 2], b=[3, 4])
        assert ds.varnames == ('y', 'a', 'b')
        assert ds.positions(ds.xnames) == (2, 1)
        assert ds.metadata['source'] == 'arrays'

    def test_from_columns(self):
        src = _Columns(['y', 'x'], [np.array([1.0, 2.0]), np.array([3.0, 4.0])])
        ds = Dataset.from_columns(src, 'y', ['x'])
        np.testing.assert_array_equal(ds['x'], [3.0, 4.0])

    def test_from_columns_rejects_other_objects(self):
        with pytest.raises(ValidationError, match="names\\(\\) and data\\(\\)"):
            Dataset.from_columns(object(), 'y', ['x'])

    def test_from_dataframe(self):
        pd = pytest.importorskip("pandas")
        df = pd.DataFrame({'y': [1, 0, 1], 'x': [0.5, 1.5, 2.5]})
        ds = Dataset.from_dataframe(df, yname='y', xnames=['x'])
        assert ds.varnames == ('y', 'x')
        assert ds.n_observations == 3
        np.testing.assert_array_equal(ds.response, [1.0, 0.0, 1.0])

    def test_from_file_csv(self, tmp_path):
        pytest.importorskip("pandas")
        path = tmp_path / "data.csv"
        path.write_text("y,x1,x2\n1,2,3\n4,5,6\n")
        ds = Dataset.from_file(path, yname='y', xnames=['x1', 'x2'])
        assert ds.varnames == ('y', 'x1', 'x2')
        assert ds.metadata['source_path'] == str(path)
        np.testing.assert_array_equal(ds['x2'], [3.0, 6.0])

    def test_from_file_unknown_format(self, tmp_path):
        with pytest.raises(ValidationError, match="Unknown file format"):
            Dataset.from_file(tmp_path / "data.xlsx", yname='y', xnames=['x'])


# ═══════════════════════════════════════════════════════════════════════
# Access
# ═══════════════════════════════════════════════════════════════════════


class TestAccess:
    """Variables are addressable by name and position."""

    def test_getitem(self, data1):
        np.testing.assert_array_equal(data1['x2'], [4, 1, -1, 3, 5, -5, 3])

    def test_getitem_unknown(self, data1):
        with pytest.raises(KeyError, match="Available"):
            data1['nope']

    def test_contains(self, data1):
        assert 'x1' in data1
        assert 'nope' not in data1

    def test_positions(self, data1):
        assert data1.position('x2') == 2
        assert data1.positions(['x2', 'y']) == (2, 0)

    def test_position_unknown(self, data1):
        with pytest.raises(ConfigurationError):
            data1.position('nope')

    def test_response(self, data1):
        np.testing.assert_array_equal(data1.response, [0, 1, 3, 2, 1, 1, 0])

    def test_same_structure(self, data1):
        other = Dataset.build(
            [np.zeros(3), np.ones(3), np.arange(3)], ['y', 'x1', 'x2'], 'y', ['x1', 'x2']
        )
        assert data1.same_structure(other)

    def test_different_order_is_different_structure(self, data1):
        other = Dataset.build(
            [np.zeros(3), np.ones(3), np.arange(3)], ['y', 'x2', 'x1'], 'y', ['x1', 'x2']
        )
        assert not data1.same_structure(other)

    def test_repr(self, data1):
        assert "n=7" in repr(data1)
