"""
Dataset: named columns with response/predictor roles.

A Dataset is an ordered collection of equal-length numeric variables.
One variable is designated the response, an ordered subset the
predictors; others may be weights, offsets or stratifying variables that
a particular model family reads.

Datasets are immutable after construction. Columns are copied into
read-only float64 arrays so several models (and their results) can share
one Dataset safely.

Usage:
    from pystatmodel import Dataset

    ds = Dataset.build([y, x1, x2], ['y', 'x1', 'x2'], 'y', ['x1', 'x2'])
    ds = Dataset.from_arrays(yname='y', xnames=['x1', 'x2'], y=y, x1=x1, x2=x2)
    ds = Dataset.from_dataframe(df, yname='y', xnames=['x1', 'x2'])
    ds = Dataset.from_file("data.csv", yname='y', xnames=['x1', 'x2'])

    ds['x1']                 # column by name
    ds.positions(ds.xnames)  # column indices of the predictors
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystatmodel.core.exceptions import ConfigurationError, DimensionError, ValidationError
from pystatmodel.core.protocols import ColumnSource
from pystatmodel.core.validation import check_array, check_1d, check_consistent_length

if TYPE_CHECKING:
    import pandas as pd


@dataclass(frozen=True, eq=False)
class Dataset:
    """
    Column-wise data for a regression model.

    Construct via factory classmethods, not directly.

    data[k] is the k'th variable and varnames[k] its name. yname and
    xnames name the dependent and independent variables.
    """
    _data: tuple[NDArray[np.floating[Any]], ...]
    _varnames: tuple[str, ...]
    _yname: str
    _xnames: tuple[str, ...]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Factory Methods ===

    @classmethod
    def build(
        cls,
        data: Sequence[ArrayLike],
        varnames: Sequence[str],
        yname: str,
        xnames: Sequence[str],
        *,
        metadata: dict[str, Any] | None = None,
    ) -> Dataset:
        """
        Build a Dataset from columns and their names.

        Args:
            data: The variables, one array-like per column
            varnames: Names of the variables, in the order of data
            yname: Name of the response variable
            xnames: Names of the predictor variables, in model order

        Raises:
            DimensionError: If the number of names and columns differ, or
                the columns have different lengths
            ConfigurationError: If yname or an xnames entry is not a
                variable name, or variable names are duplicated
        """
        data = list(data)
        varnames = tuple(str(v) for v in varnames)
        xnames = tuple(str(x) for x in xnames)

        if len(data) != len(varnames):
            raise DimensionError(
                f"len(data)={len(data)} and len(varnames)={len(varnames)} are not compatible"
            )

        dupes = sorted({v for v in varnames if varnames.count(v) > 1})
        if dupes:
            raise ConfigurationError(
                f"Duplicate variable names: {dupes}",
                missing=(),
                available=varnames,
            )

        missing = tuple(
            name for name in (yname, *xnames) if name not in varnames
        )
        if missing:
            raise ConfigurationError(
                f"Variables {list(missing)} not found. Available: {list(varnames)}",
                missing=missing,
                available=varnames,
            )

        columns = []
        for name, col in zip(varnames, data):
            arr = check_array(col, name)
            if arr.ndim == 2 and arr.shape[1] == 1:
                arr = arr.ravel()
            check_1d(arr, name)
            arr = arr.copy()
            arr.flags.writeable = False
            columns.append(arr)

        if columns:
            check_consistent_length(*columns, names=varnames)

        meta = dict(metadata or {})

        return cls(
            _data=tuple(columns),
            _varnames=varnames,
            _yname=yname,
            _xnames=xnames,
            _metadata=meta,
        )

    @classmethod
    def from_arrays(
        cls,
        *,
        yname: str,
        xnames: Sequence[str],
        **columns: ArrayLike,
    ) -> Dataset:
        """
        Construct from keyword arrays. Variable order follows keyword order.

        Example:
            >>> ds = Dataset.from_arrays(yname="y", xnames=["x1"], y=[0, 1], x1=[1, 2])
            >>> ds.varnames
            ('y', 'x1')
        """
        return cls.build(
            list(columns.values()), list(columns.keys()), yname, xnames,
            metadata={'source': 'arrays'},
        )

    @classmethod
    def from_columns(
        cls,
        source: ColumnSource,
        yname: str,
        xnames: Sequence[str],
    ) -> Dataset:
        """Construct from any object exposing names() and data()."""
        if not isinstance(source, ColumnSource):
            raise ValidationError(
                f"source must provide names() and data(), got {type(source).__name__}"
            )
        return cls.build(
            source.data(), source.names(), yname, xnames,
            metadata={'source': 'columns'},
        )

    @classmethod
    def from_dataframe(
        cls,
        df: 'pd.DataFrame',
        *,
        yname: str,
        xnames: Sequence[str],
        source_path: str | None = None,
    ) -> Dataset:
        """Construct from a pandas DataFrame, keeping all of its columns."""
        names = [str(c) for c in df.columns]
        data = [df[c].to_numpy(dtype=np.float64) for c in df.columns]

        metadata: dict[str, Any] = {'source': 'dataframe'}
        if source_path:
            metadata['source_path'] = source_path

        return cls.build(data, names, yname, xnames, metadata=metadata)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        yname: str,
        xnames: Sequence[str],
        columns: list[str] | None = None,
    ) -> Dataset:
        """Construct from a delimited text file (CSV, TSV)."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix not in ('.csv', '.tsv'):
            raise ValidationError(f"Unknown file format: {suffix}")

        import pandas as pd
        sep = '\t' if suffix == '.tsv' else ','
        df = pd.read_csv(path, sep=sep, usecols=columns)
        return cls.from_dataframe(df, yname=yname, xnames=xnames, source_path=str(path))

    # === Array Access ===

    def __getitem__(self, key: str) -> NDArray[np.floating[Any]]:
        """
        Access a variable by name.

        Raises:
            KeyError: If key not found, with a message listing available names
        """
        try:
            return self._data[self._varnames.index(key)]
        except ValueError:
            raise KeyError(
                f"Dataset has no variable '{key}'. Available: {list(self._varnames)}"
            ) from None

    def __contains__(self, key: object) -> bool:
        return key in self._varnames

    def position(self, name: str) -> int:
        """Index of the named variable in data."""
        if name not in self._varnames:
            raise ConfigurationError(
                f"Variable '{name}' not found. Available: {list(self._varnames)}",
                missing=(name,),
                available=self._varnames,
            )
        return self._varnames.index(name)

    def positions(self, names: Sequence[str]) -> tuple[int, ...]:
        """Indices of the named variables, in the order given."""
        return tuple(self.position(name) for name in names)

    def columns(self) -> tuple[NDArray[np.floating[Any]], ...]:
        """All variables, stored column-wise."""
        return self._data

    def same_structure(self, other: Dataset) -> bool:
        """True if other has the same variables in the same order."""
        return self._varnames == other._varnames

    # === Properties ===

    @property
    def data(self) -> tuple[NDArray[np.floating[Any]], ...]:
        return self._data

    @property
    def varnames(self) -> tuple[str, ...]:
        return self._varnames

    @property
    def yname(self) -> str:
        return self._yname

    @property
    def xnames(self) -> tuple[str, ...]:
        return self._xnames

    @property
    def response_name(self) -> str:
        return self._yname

    @property
    def predictor_names(self) -> tuple[str, ...]:
        return self._xnames

    @property
    def response(self) -> NDArray[np.floating[Any]]:
        """The response variable."""
        return self[self._yname]

    @property
    def n_observations(self) -> int:
        """Number of statistical units (rows)."""
        return len(self._data[0]) if self._data else 0

    @property
    def n_variables(self) -> int:
        return len(self._data)

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    def __repr__(self) -> str:
        return (
            f"Dataset(n={self.n_observations}, variables={list(self._varnames)}, "
            f"y={self._yname!r}, x={list(self._xnames)})"
        )
