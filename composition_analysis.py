"""
Composition PCA analysis run

Chains the stages of one analysis: resolve the input source, reshape to a
sample × compound matrix, run the standardized PCA, rank compounds by
their contribution to PC1 and PC2, and render the figures. Every stage
receives its input explicitly; nothing is cached between runs.
"""

import logging

from pca_utils.config import (
    DEFAULT_ARROW_SCALE,
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_CONSTANT_POLICY,
    DEFAULT_DUPLICATE_POLICY,
    DEFAULT_ELLIPSE_TYPE,
    DEFAULT_TOP_N,
    LABEL_COLUMNS
)
from pca_utils.data_model import CompositionReport
from pca_utils.pca_calculations import compute_pca
from pca_utils.pca_plots import (
    plot_biplot,
    plot_scree,
    plot_top_compound_boxplots,
    plot_variable_contributions
)
from pca_utils.pca_statistics import rank_contributors, select_top_contributors
from utils.data_loaders import resolve_input_source
from utils.data_reshaper import reshape_observations

logger = logging.getLogger(__name__)


def run_composition_pca(
    source,
    top_n=DEFAULT_TOP_N,
    duplicate_policy=DEFAULT_DUPLICATE_POLICY,
    constant_policy=DEFAULT_CONSTANT_POLICY,
    arrow_scale=DEFAULT_ARROW_SCALE,
    ellipse_level=DEFAULT_CONFIDENCE_LEVEL,
    ellipse_type=DEFAULT_ELLIPSE_TYPE
):
    """
    Run the full analysis on one input source.

    Parameters
    ----------
    source : DataFrameSource or FileSource
        Where the observations come from.
    top_n : int, optional
        Compounds emphasized in the biplot and shown as boxplots.
        Clamped to the number of compounds. Default is 10.
    duplicate_policy : str, optional
        'last' or 'error', see reshape_observations.
    constant_policy : str, optional
        'drop' or 'error', see compute_pca.
    arrow_scale, ellipse_level, ellipse_type
        Biplot display options, see plot_biplot.

    Returns
    -------
    CompositionReport
        Observations, wide matrix, PCA result, full and top-N ranking and
        the biplot, boxplot, scree and contribution figures.

    Raises
    ------
    InvalidInputError, ConstantColumnError, InsufficientDimensionsError
        Propagated unchanged from the stage that detects the problem.
    """
    if top_n < 1:
        raise ValueError(f"top_n must be >= 1, got {top_n}")

    observations = resolve_input_source(source)
    wide = reshape_observations(observations, duplicate_policy=duplicate_policy)
    pca_result = compute_pca(wide, constant_policy=constant_policy)

    ranking = rank_contributors(pca_result)
    top_ranking = select_top_contributors(ranking, top_n)
    if len(top_ranking) < top_n:
        logger.info(
            "Requested top %d compounds but only %d are available",
            top_n, len(top_ranking)
        )

    biplot = plot_biplot(
        pca_result,
        wide.conditions,
        ranking,
        top_n=top_n,
        arrow_scale=arrow_scale,
        ellipse_level=ellipse_level,
        ellipse_type=ellipse_type
    )
    # Boxplots show the values the wide matrix kept
    kept = observations.drop_duplicates(subset=list(LABEL_COLUMNS), keep='last')
    boxplot = plot_top_compound_boxplots(kept, top_ranking)

    return CompositionReport(
        observations=observations,
        wide=wide,
        pca=pca_result,
        ranking=ranking,
        top_ranking=top_ranking,
        biplot=biplot,
        boxplot=boxplot,
        scree=plot_scree(pca_result.variance_percent),
        contributions=plot_variable_contributions(ranking)
    )
