"""
Data model for the composition PCA workflow.

Immutable dataclasses wrapping the pandas structures produced by each
stage. They are constructed once and never mutated: downstream stages
receive them read-only and build new objects instead.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .config import COL_CONDITION


@dataclass(frozen=True)
class WideMatrix:
    """Sample × compound concentration matrix.

    Parameters
    ----------
    values : pd.DataFrame
        Rows indexed by a (condicao, replica) MultiIndex in first-appearance
        order, one float column per compound. Absent cells hold 0.0.
    """
    values: pd.DataFrame

    @property
    def samples(self) -> List[Tuple[str, str]]:
        """Ordered (condition, replica) keys aligned to matrix rows."""
        return list(self.values.index)

    @property
    def compounds(self) -> List[str]:
        return list(self.values.columns)

    @property
    def conditions(self) -> pd.Series:
        """Condition label of each row, indexed like ``values``."""
        return pd.Series(
            self.values.index.get_level_values(COL_CONDITION),
            index=self.values.index,
            name=COL_CONDITION
        )

    @property
    def shape(self) -> Tuple[int, int]:
        return self.values.shape


@dataclass(frozen=True)
class PCAResult:
    """Standardized PCA of a ``WideMatrix``.

    Parameters
    ----------
    eigenvalues : np.ndarray
        Eigenvalues of the correlation matrix, non-increasing, one per
        retained component (min(n_samples, n_features)).
    variance_percent : np.ndarray
        Percentage of variance explained per component; sums to 100.
    cumulative_variance_percent : np.ndarray
        Running sum of ``variance_percent``.
    ind_coord : pd.DataFrame
        Sample coordinates (n_samples × n_components).
    var_coord : pd.DataFrame
        Variable coordinates, i.e. correlations between each compound and
        each component (n_features × n_components).
    var_contrib : pd.DataFrame
        Variable contributions in percent; every column sums to 100.
    var_cos2 : pd.DataFrame
        Squared variable coordinates (quality of representation).
    ind_contrib : pd.DataFrame
        Sample contributions in percent; every column with a nonzero
        eigenvalue sums to 100.
    column_means : pd.Series
        Means of the retained compound columns before standardization.
    column_stds : pd.Series
        Sample standard deviations (ddof=1) of the retained columns.
    dropped_compounds : tuple of str
        Zero-variance compounds removed before decomposition.
    """
    eigenvalues: np.ndarray
    variance_percent: np.ndarray
    cumulative_variance_percent: np.ndarray
    ind_coord: pd.DataFrame
    var_coord: pd.DataFrame
    var_contrib: pd.DataFrame
    var_cos2: pd.DataFrame
    ind_contrib: pd.DataFrame
    column_means: pd.Series
    column_stds: pd.Series
    dropped_compounds: Tuple[str, ...] = ()

    @property
    def component_names(self) -> List[str]:
        return list(self.var_coord.columns)

    @property
    def compounds(self) -> List[str]:
        return list(self.var_coord.index)

    @property
    def n_components(self) -> int:
        return len(self.eigenvalues)


@dataclass(frozen=True)
class CompositionReport:
    """All artifacts of one analysis run.

    ``ranking`` holds every retained compound; ``top_ranking`` is the
    slice that drove the biplot emphasis and the boxplot facets.
    """
    observations: pd.DataFrame
    wide: WideMatrix
    pca: PCAResult
    ranking: pd.DataFrame
    top_ranking: pd.DataFrame
    biplot: go.Figure
    boxplot: go.Figure
    scree: Optional[go.Figure] = None
    contributions: Optional[go.Figure] = None
