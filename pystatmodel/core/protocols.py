"""
Core protocols for pystatmodel.

These define structural interfaces for collaborators that live outside
the package: tabular sources that can be turned into a Dataset, and
consumers that only need the accessor surface of a fitted result.

The model-facing contracts (Parameter, RegFitter) are nominal ABCs in
pystatmodel.core.model; a model family must subclass them explicitly.
"""

from __future__ import annotations

from typing import Protocol, Sequence, Any, TYPE_CHECKING, runtime_checkable

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from pystatmodel.core.model import RegFitter


@runtime_checkable
class ColumnSource(Protocol):
    """
    Anything that can hand over named columns.

    Used by Dataset.from_columns to adopt column stores (data frames,
    record readers, other datasets) without depending on their types.
    names()[k] is the name of data()[k].
    """

    def names(self) -> Sequence[str]:
        ...

    def data(self) -> Sequence[NDArray[Any]]:
        ...


@runtime_checkable
class Resultser(Protocol):
    """
    Accessor surface of a fitted regression model.

    Report generators and diagnostics should depend on this protocol
    rather than on a concrete results class. Derived statistics are None
    when no covariance matrix is available.
    """

    @property
    def model(self) -> 'RegFitter':
        ...

    @property
    def names(self) -> tuple[str, ...]:
        ...

    @property
    def loglike(self) -> float:
        ...

    @property
    def params(self) -> NDArray[np.floating[Any]]:
        ...

    @property
    def vcov(self) -> NDArray[np.floating[Any]] | None:
        ...

    def std_err(self) -> NDArray[np.floating[Any]] | None:
        ...

    def z_scores(self) -> NDArray[np.floating[Any]] | None:
        ...

    def p_values(self) -> NDArray[np.floating[Any]] | None:
        ...
