"""
PCA Utility Modules for composition analysis
============================================

Standardized Principal Component Analysis of compound concentrations
measured across replicated samples and experimental conditions:
- Core PCA calculations (correlation-matrix eigen-decomposition)
- Contributor ranking and confidence ellipses
- Visualization functions (biplot, boxplots, scree, contributions)

Package Structure
-----------------
config           : Package-level configuration constants
errors           : Error kinds raised by each stage
data_model       : Immutable result containers
pca_calculations : PCA computation and explained variance
pca_statistics   : Contributor ranking and ellipse geometry
pca_plots        : Plotly-based visualization functions

Quick Start
-----------
>>> from utils import DataFrameSource, resolve_input_source, reshape_observations
>>> from pca_utils import compute_pca, rank_contributors, plot_biplot
>>>
>>> observations = resolve_input_source(DataFrameSource(frame))
>>> wide = reshape_observations(observations)
>>> result = compute_pca(wide)
>>> ranking = rank_contributors(result)
>>> fig = plot_biplot(result, wide.conditions, ranking, top_n=10)
"""

# Import configuration constants
from .config import (
    DEFAULT_TOP_N,
    DEFAULT_ARROW_SCALE,
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_DUPLICATE_POLICY,
    DEFAULT_CONSTANT_POLICY,
    REQUIRED_COLUMNS
)

# Import error kinds
from .errors import (
    CompositionPCAError,
    InvalidInputError,
    DuplicateObservationError,
    ConstantColumnError,
    InsufficientDimensionsError
)

# Import data model
from .data_model import (
    WideMatrix,
    PCAResult,
    CompositionReport
)

# Import calculation functions
from .pca_calculations import (
    compute_pca,
    calculate_variance_metrics,
    find_constant_columns,
    standardize_matrix
)

# Import statistical functions
from .pca_statistics import (
    rank_contributors,
    select_top_contributors,
    confidence_ellipse
)

# Import plotting functions
from .pca_plots import (
    plot_scree,
    plot_biplot,
    add_confidence_ellipses,
    plot_top_compound_boxplots,
    plot_variable_contributions
)

# Define public API
__all__ = [
    # Configuration constants
    'DEFAULT_TOP_N',
    'DEFAULT_ARROW_SCALE',
    'DEFAULT_CONFIDENCE_LEVEL',
    'DEFAULT_DUPLICATE_POLICY',
    'DEFAULT_CONSTANT_POLICY',
    'REQUIRED_COLUMNS',

    # Errors
    'CompositionPCAError',
    'InvalidInputError',
    'DuplicateObservationError',
    'ConstantColumnError',
    'InsufficientDimensionsError',

    # Data model
    'WideMatrix',
    'PCAResult',
    'CompositionReport',

    # Calculation functions
    'compute_pca',
    'calculate_variance_metrics',
    'find_constant_columns',
    'standardize_matrix',

    # Statistical functions
    'rank_contributors',
    'select_top_contributors',
    'confidence_ellipse',

    # Plotting functions
    'plot_scree',
    'plot_biplot',
    'add_confidence_ellipses',
    'plot_top_compound_boxplots',
    'plot_variable_contributions',
]

# Package metadata
__version__ = '1.0.0'
__description__ = 'PCA utility modules for chemical composition analysis'
