"""
PCA Calculation Functions - Correlation Matrix Eigen-decomposition

Core computation functions for standardized Principal Component Analysis
of sample × compound concentration matrices.
Pure NumPy/Pandas implementation.
"""

import logging

import numpy as np
import pandas as pd
from typing import Dict, List, Tuple

from .config import (
    CONSTANT_POLICIES,
    DEFAULT_CONSTANT_POLICY,
    EIGENVALUE_TOL,
    MIN_COMPONENTS,
    MIN_SAMPLES,
    ZERO_VARIANCE_TOL
)
from .data_model import PCAResult, WideMatrix
from .errors import ConstantColumnError, InsufficientDimensionsError

logger = logging.getLogger(__name__)


def find_constant_columns(
    data: pd.DataFrame,
    tol: float = ZERO_VARIANCE_TOL
) -> List[str]:
    """
    List columns whose sample standard deviation is numerically zero.

    A column is constant when std <= tol * max(1, |mean|), so that
    round-off in the mean of identical values does not count as variance.
    """
    means = data.mean(axis=0)
    stds = data.std(axis=0, ddof=1)
    threshold = tol * np.maximum(1.0, means.abs())
    return [col for col in data.columns if stds[col] <= threshold[col]]


def standardize_matrix(
    data: pd.DataFrame
) -> Tuple[np.ndarray, pd.Series, pd.Series]:
    """
    Center each column to mean 0 and scale it to unit variance (ddof=1).

    Returns
    -------
    tuple
        (X_standardized, column_means, column_stds). The input frame is
        not modified.
    """
    X_array = data.to_numpy(dtype=float, copy=True)
    means = X_array.mean(axis=0)
    stds = X_array.std(axis=0, ddof=1)
    X_std = (X_array - means) / stds
    return (
        X_std,
        pd.Series(means, index=data.columns),
        pd.Series(stds, index=data.columns)
    )


def _flip_signs(eigenvectors: np.ndarray) -> np.ndarray:
    # Largest-magnitude entry of every eigenvector made positive
    max_rows = np.argmax(np.abs(eigenvectors), axis=0)
    signs = np.sign(eigenvectors[max_rows, range(eigenvectors.shape[1])])
    signs[signs == 0] = 1.0
    return eigenvectors * signs


def compute_pca(
    wide: WideMatrix,
    constant_policy: str = DEFAULT_CONSTANT_POLICY
) -> PCAResult:
    """
    Standardized PCA by eigen-decomposition of the correlation matrix.

    Parameters
    ----------
    wide : WideMatrix
        Sample × compound matrix (n_samples × n_features).
    constant_policy : str, optional
        Handling of zero-variance compounds. 'drop' removes them with a
        warning and records them in ``dropped_compounds``; 'error' raises
        ConstantColumnError naming the first one. Default is 'drop'.

    Returns
    -------
    PCAResult
        Eigenvalues, variance explained, sample and variable coordinates,
        contributions and cos2 for k = min(n_samples, n_features) components.

    Raises
    ------
    InsufficientDimensionsError
        Fewer than 2 samples, or fewer than 2 usable compounds.
    ConstantColumnError
        A zero-variance compound with ``constant_policy='error'``.

    Notes
    -----
    With X the standardized matrix and C = X'X / (n-1):

    - eigenvalues λ and unit eigenvectors v of C, sorted descending
    - sample coordinates = X v
    - variable coordinates = v sqrt(λ)  (correlation circle, |coord| <= 1)
    - variable contributions = v² × 100  (each column sums to 100)
    - sample contributions = coord² / ((n-1) λ) × 100

    Eigenvector signs are fixed so that the largest-magnitude loading of
    each component is positive; repeated runs give identical output.

    Examples
    --------
    >>> result = compute_pca(wide)
    >>> result.variance_percent.sum()   # 100.0
    """
    if constant_policy not in CONSTANT_POLICIES:
        raise ValueError(
            f"constant_policy must be one of {CONSTANT_POLICIES}, got {constant_policy!r}"
        )

    data = wide.values
    n_samples, n_features = data.shape

    # === INPUT VALIDATION ===
    if n_samples < MIN_SAMPLES:
        raise InsufficientDimensionsError(
            f"PCA needs at least {MIN_SAMPLES} samples, got {n_samples}"
        )
    if n_features < MIN_COMPONENTS:
        raise InsufficientDimensionsError(
            f"PCA biplot needs at least {MIN_COMPONENTS} compounds, got {n_features}"
        )

    # === ZERO-VARIANCE COLUMNS ===
    constant = find_constant_columns(data)
    if constant:
        if constant_policy == 'error':
            raise ConstantColumnError(constant[0])
        logger.warning(
            "Dropping %d zero-variance compound(s): %s",
            len(constant), ', '.join(map(str, constant))
        )
        data = data.drop(columns=constant)
        n_features = data.shape[1]

    if n_features < MIN_COMPONENTS:
        raise InsufficientDimensionsError(
            f"PCA biplot needs at least {MIN_COMPONENTS} non-constant compounds, "
            f"got {n_features}"
        )

    # === STANDARDIZATION AND CORRELATION MATRIX ===
    X_std, means, stds = standardize_matrix(data)
    correlation = X_std.T @ X_std / (n_samples - 1)

    # === EIGEN-DECOMPOSITION ===
    # eigh returns ascending eigenvalues of a symmetric matrix
    eigenvalues, eigenvectors = np.linalg.eigh(correlation)
    order = np.argsort(eigenvalues, kind='stable')[::-1]
    eigenvalues = eigenvalues[order]
    # Round-off eigenvalues of a rank-deficient matrix become exactly zero
    eigenvalues[eigenvalues < EIGENVALUE_TOL * max(eigenvalues[0], 1.0)] = 0.0
    eigenvectors = _flip_signs(eigenvectors[:, order])

    n_components = min(n_samples, n_features)
    eigenvalues = eigenvalues[:n_components]
    eigenvectors = eigenvectors[:, :n_components]

    pc_names = [f'PC{i+1}' for i in range(n_components)]
    compounds = list(data.columns)

    # === COORDINATES AND CONTRIBUTIONS ===
    ind_coord = X_std @ eigenvectors
    var_coord = eigenvectors * np.sqrt(eigenvalues)
    var_contrib = eigenvectors ** 2 * 100.0

    denominators = (n_samples - 1) * eigenvalues
    with np.errstate(divide='ignore', invalid='ignore'):
        ind_contrib = np.where(
            denominators > 0, ind_coord ** 2 / denominators * 100.0, 0.0
        )

    variance = calculate_variance_metrics(eigenvalues)

    logger.info(
        "PCA on %d samples x %d compounds: PC1 %.1f%%, PC2 %.1f%%",
        n_samples, n_features,
        variance['variance_percent'][0], variance['variance_percent'][1]
    )

    return PCAResult(
        eigenvalues=eigenvalues,
        variance_percent=variance['variance_percent'],
        cumulative_variance_percent=variance['cumulative_variance_percent'],
        ind_coord=pd.DataFrame(ind_coord, index=data.index, columns=pc_names),
        var_coord=pd.DataFrame(var_coord, index=compounds, columns=pc_names),
        var_contrib=pd.DataFrame(var_contrib, index=compounds, columns=pc_names),
        var_cos2=pd.DataFrame(var_coord ** 2, index=compounds, columns=pc_names),
        ind_contrib=pd.DataFrame(ind_contrib, index=data.index, columns=pc_names),
        column_means=means,
        column_stds=stds,
        dropped_compounds=tuple(constant)
    )


# === UTILITY FUNCTIONS ===

def calculate_variance_metrics(eigenvalues: np.ndarray) -> Dict[str, np.ndarray]:
    """
    Calculate variance explained metrics from eigenvalues.

    Parameters
    ----------
    eigenvalues : np.ndarray
        Array of eigenvalues (variance explained by each component).

    Returns
    -------
    dict
        Dictionary with variance metrics:
        - 'eigenvalues' : Original eigenvalues
        - 'variance_percent' : Percentage of total variance (sums to 100)
        - 'cumulative_variance_percent' : Cumulative percentage
        - 'total_variance' : Sum of all eigenvalues
    """
    eigenvalues = np.asarray(eigenvalues, dtype=float)
    total_variance = np.sum(eigenvalues)

    if total_variance > 0:
        variance_percent = eigenvalues / total_variance * 100.0
    else:
        variance_percent = np.zeros_like(eigenvalues)

    return {
        'eigenvalues': eigenvalues,
        'variance_percent': variance_percent,
        'cumulative_variance_percent': np.cumsum(variance_percent),
        'total_variance': total_variance
    }
