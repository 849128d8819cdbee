"""
Reshaping functions
Turns long-format observations (one row per sample and compound) into the
sample × compound matrix consumed by the PCA engine
"""

import logging

import pandas as pd

from pca_utils.config import (
    COL_COMPOUND,
    COL_CONCENTRATION,
    DEFAULT_DUPLICATE_POLICY,
    DUPLICATE_POLICIES,
    LABEL_COLUMNS,
    SAMPLE_KEY
)
from pca_utils.data_model import WideMatrix
from pca_utils.errors import DuplicateObservationError, InvalidInputError

logger = logging.getLogger(__name__)


def reshape_observations(observations, duplicate_policy=DEFAULT_DUPLICATE_POLICY):
    """
    Pivot observations into a wide sample × compound matrix

    Parameters:
    -----------
    observations : pd.DataFrame
        Validated observations (see validate_observations)
    duplicate_policy : str
        What to do when a (sample, compound) pair appears more than once:
        'last' keeps the value that comes last in input order,
        'error' raises DuplicateObservationError

    Returns:
    --------
    WideMatrix : Rows in first-appearance order of (condicao, replica),
        columns in first-appearance order of composto, absent cells 0.0
    """
    if duplicate_policy not in DUPLICATE_POLICIES:
        raise ValueError(
            f"duplicate_policy must be one of {DUPLICATE_POLICIES}, "
            f"got {duplicate_policy!r}"
        )

    if observations is None or len(observations) == 0:
        raise InvalidInputError("No observations to reshape")

    keys = list(LABEL_COLUMNS)
    duplicated = observations.duplicated(subset=keys, keep=False)
    if duplicated.any():
        first = observations.loc[duplicated].iloc[0]
        where = (f"compound '{first[COL_COMPOUND]}' in sample "
                 f"({first[SAMPLE_KEY[0]]}, {first[SAMPLE_KEY[1]]})")
        if duplicate_policy == 'error':
            raise DuplicateObservationError(
                f"Duplicate observation for {where}",
                field=first[COL_COMPOUND]
            )
        n_dropped = int(observations.duplicated(subset=keys, keep='last').sum())
        logger.warning(
            "%d duplicate observation(s) replaced by a later value, first: %s",
            n_dropped, where
        )

    compounds = list(pd.unique(observations[COL_COMPOUND]))
    if not compounds:
        raise InvalidInputError("Observations contain no compounds", field=COL_COMPOUND)

    samples = pd.MultiIndex.from_frame(
        observations[list(SAMPLE_KEY)].drop_duplicates()
    )

    deduped = observations.drop_duplicates(subset=keys, keep='last')
    wide = deduped.pivot(index=list(SAMPLE_KEY), columns=COL_COMPOUND, values=COL_CONCENTRATION)
    wide = wide.reindex(index=samples, columns=compounds).fillna(0.0).astype(float)
    wide.columns.name = None

    logger.debug("Wide matrix: %d samples x %d compounds", *wide.shape)
    return WideMatrix(values=wide)
