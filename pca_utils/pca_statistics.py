"""
PCA Statistical Functions

Ranking and geometry helpers derived from a PCAResult.
Includes the contributor ranking shared by the biplot and the boxplots,
and confidence ellipses for groups of samples on two components.
"""

import numpy as np
import pandas as pd
from scipy.stats import chi2
from typing import Tuple

from .config import (
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_ELLIPSE_TYPE,
    ELLIPSE_N_POINTS,
    ELLIPSE_TYPES,
    MIN_ELLIPSE_POINTS
)
from .data_model import PCAResult

RANKING_COLUMNS = ['compound', 'PC1', 'PC2', 'mean_contribution']


def rank_contributors(pca_result: PCAResult) -> pd.DataFrame:
    """
    Rank compounds by their mean contribution to PC1 and PC2.

    Parameters
    ----------
    pca_result : PCAResult
        Output of compute_pca (at least 2 components).

    Returns
    -------
    pd.DataFrame
        One row per compound with columns:
        - 'compound': compound name
        - 'PC1', 'PC2': variable coordinates on the first two components
        - 'mean_contribution': (contrib PC1 + contrib PC2) / 2, in percent

        Sorted by 'mean_contribution' descending. Ties keep the original
        column order (stable sort), so the ranking is deterministic.

    Examples
    --------
    >>> ranking = rank_contributors(compute_pca(wide))
    >>> ranking['compound'].head(5).tolist()
    """
    contrib = pca_result.var_contrib
    coord = pca_result.var_coord

    ranking = pd.DataFrame({
        'compound': list(coord.index),
        'PC1': coord['PC1'].to_numpy(),
        'PC2': coord['PC2'].to_numpy(),
        'mean_contribution': ((contrib['PC1'] + contrib['PC2']) / 2.0).to_numpy()
    })

    ranking = ranking.sort_values('mean_contribution', ascending=False, kind='mergesort')
    return ranking.reset_index(drop=True)


def select_top_contributors(ranking: pd.DataFrame, top_n: int) -> pd.DataFrame:
    """
    First ``top_n`` rows of a ranking, clamped to the number of compounds.

    Asking for more compounds than exist returns all of them.
    """
    if top_n < 1:
        raise ValueError(f"top_n must be >= 1, got {top_n}")
    return ranking.head(top_n).copy()


def confidence_ellipse(
    x: np.ndarray,
    y: np.ndarray,
    level: float = DEFAULT_CONFIDENCE_LEVEL,
    kind: str = DEFAULT_ELLIPSE_TYPE,
    n_points: int = ELLIPSE_N_POINTS
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Outline of a bivariate normal ellipse around a group of points.

    Parameters
    ----------
    x, y : np.ndarray
        Coordinates of the group on two components.
    level : float, optional
        Coverage probability. Default is 0.95.
    kind : str, optional
        'confidence': region for the group mean (covariance / n).
        'norm': region for individual points (sample covariance).
        Default is 'confidence'.
    n_points : int, optional
        Number of outline vertices; the last equals the first.

    Returns
    -------
    tuple
        (xs, ys) arrays of length ``n_points`` tracing a closed outline.

    Notes
    -----
    Every outline point p satisfies (p - m)' S⁻¹ (p - m) = χ²₂(level),
    with m the group mean and S the (scaled) covariance.
    """
    if kind not in ELLIPSE_TYPES:
        raise ValueError(f"kind must be one of {ELLIPSE_TYPES}, got {kind!r}")
    if not 0 < level < 1:
        raise ValueError(f"level must be in (0, 1), got {level}")

    points = np.column_stack([np.asarray(x, dtype=float), np.asarray(y, dtype=float)])
    n = len(points)
    if n < MIN_ELLIPSE_POINTS:
        raise ValueError(f"Need at least {MIN_ELLIPSE_POINTS} points for an ellipse, got {n}")

    center = points.mean(axis=0)
    cov = np.cov(points, rowvar=False)
    if kind == 'confidence':
        cov = cov / n

    vals, vecs = np.linalg.eigh(cov)
    vals = np.clip(vals, 0.0, None)
    radius = np.sqrt(chi2.ppf(level, 2))

    theta = np.linspace(0.0, 2.0 * np.pi, n_points)
    circle = np.vstack([np.cos(theta), np.sin(theta)])
    outline = vecs @ (np.diag(np.sqrt(vals) * radius) @ circle) + center[:, None]

    return outline[0], outline[1]
