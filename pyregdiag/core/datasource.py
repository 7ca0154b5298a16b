"""
Universal DataSource for pyregdiag.

DataSource is the "I have a table" abstraction: named numeric columns of
equal length. It does not know whether it will feed OLS, GLS or a robust
fit. Designs ask it for columns.

Usage:
    from pyregdiag.core.datasource import DataSource

    ds = DataSource.from_arrays(speed=speed, dist=dist)
    ds = DataSource.from_dataframe(df)
    ds = DataSource.from_file("cars.csv")

    ds.keys()      # frozenset({'speed', 'dist'})
    ds['speed']    # numpy array
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pyregdiag.core.exceptions import ValidationError, DimensionError

if TYPE_CHECKING:
    import pandas as pd


@dataclass
class DataSource:
    """
    Named-column data container. Domain-agnostic.

    Construct via the factory classmethods, not directly. Column order is
    preserved in ``columns`` so tables round-trip to pandas unchanged.
    """
    _data: dict[str, NDArray[np.floating[Any]]]
    _metadata: dict[str, Any] = field(default_factory=dict)

    # === Column Access ===

    def keys(self) -> frozenset[str]:
        """Return the names of all available columns."""
        return frozenset(self._data.keys())

    @property
    def columns(self) -> list[str]:
        """Column names in insertion order."""
        return list(self._data.keys())

    def __getitem__(self, key: str) -> NDArray[np.floating[Any]]:
        """
        Access a named column.

        Raises:
            KeyError: If key not found, listing the available columns
        """
        if key not in self._data:
            raise KeyError(
                f"DataSource has no column '{key}'. Available: {sorted(self.keys())}"
            )
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return self.n_observations

    # === Properties ===

    @property
    def n_observations(self) -> int:
        """Number of rows."""
        return self._metadata.get('n_observations', 0)

    @property
    def metadata(self) -> dict[str, Any]:
        return self._metadata.copy()

    def to_frame(self) -> 'pd.DataFrame':
        """Return the columns as a pandas DataFrame."""
        import pandas as pd
        return pd.DataFrame({name: arr for name, arr in self._data.items()})

    # === Factory Methods ===

    @classmethod
    def from_arrays(cls, *, name: str | None = None, **columns: Any) -> DataSource:
        """Construct from 1D array-likes passed as keyword arguments."""
        if not columns:
            raise ValidationError("DataSource.from_arrays: no columns given")

        storage: dict[str, NDArray[np.floating[Any]]] = {}
        for col, values in columns.items():
            arr = np.asarray(values, dtype=np.float64)
            if arr.ndim != 1:
                raise DimensionError(
                    f"{col}: expected 1D column, got shape {arr.shape}"
                )
            storage[col] = arr

        lengths = {col: len(arr) for col, arr in storage.items()}
        if len(set(lengths.values())) > 1:
            raise DimensionError(f"Inconsistent column lengths: {lengths}")

        metadata: dict[str, Any] = {
            'n_observations': next(iter(lengths.values())),
            'source': 'arrays',
        }
        if name is not None:
            metadata['name'] = name
        return cls(_data=storage, _metadata=metadata)

    @classmethod
    def from_dataframe(
        cls,
        df: 'pd.DataFrame',
        *,
        source_path: str | None = None,
        name: str | None = None,
    ) -> DataSource:
        """
        Construct from a pandas DataFrame.

        Every column must be numeric; categorical columns should be coded
        before they reach a regression.
        """
        storage: dict[str, NDArray[np.floating[Any]]] = {}
        for col in df.columns:
            try:
                storage[str(col)] = df[col].to_numpy(dtype=np.float64)
            except (ValueError, TypeError) as e:
                raise ValidationError(
                    f"column {col!r}: cannot convert to float: {e}"
                ) from e

        metadata: dict[str, Any] = {
            'n_observations': len(df),
            'source': 'dataframe',
        }
        if source_path:
            metadata['source_path'] = source_path
        if name is not None:
            metadata['name'] = name
        return cls(_data=storage, _metadata=metadata)

    @classmethod
    def from_file(cls, path: str | Path, *, columns: list[str] | None = None) -> DataSource:
        """Construct from a CSV/TSV file."""
        path = Path(path)
        suffix = path.suffix.lower()

        if suffix in ('.csv', '.tsv'):
            import pandas as pd
            sep = '\t' if suffix == '.tsv' else ','
            df = pd.read_csv(path, usecols=columns, sep=sep)
            return cls.from_dataframe(df, source_path=str(path), name=path.stem)
        raise ValidationError(f"Unknown file format: {suffix}")
