"""
PCA Configuration Constants
===========================

Package-level defaults for the composition PCA workflow. Every public
function accepts keyword overrides for these values.
"""

# ============================================================================
# INPUT COLUMNS
# ============================================================================

COL_CONDITION = 'condicao'
COL_REPLICA = 'replica'
COL_COMPOUND = 'composto'
COL_CONCENTRATION = 'concentracao'

REQUIRED_COLUMNS = (COL_CONDITION, COL_REPLICA, COL_COMPOUND, COL_CONCENTRATION)
"""Columns every observations table must carry, in canonical order."""

LABEL_COLUMNS = (COL_CONDITION, COL_REPLICA, COL_COMPOUND)
SAMPLE_KEY = (COL_CONDITION, COL_REPLICA)

# ============================================================================
# FILE PARSING
# ============================================================================

DEFAULT_SEPARATOR = ';'
DEFAULT_DECIMAL = ','
DEFAULT_ENCODING = 'utf-8'
FALLBACK_ENCODINGS = ('utf-8', 'cp1252', 'latin-1')

# ============================================================================
# RESHAPING AND PCA
# ============================================================================

DUPLICATE_POLICIES = ('last', 'error')
DEFAULT_DUPLICATE_POLICY = 'last'

CONSTANT_POLICIES = ('drop', 'error')
DEFAULT_CONSTANT_POLICY = 'drop'

ZERO_VARIANCE_TOL = 1e-12
"""Relative std threshold below which a compound column counts as constant."""

EIGENVALUE_TOL = 1e-10
"""Eigenvalues below this fraction of the largest one are treated as exactly zero."""

MIN_SAMPLES = 2
MIN_COMPONENTS = 2

# ============================================================================
# RANKING AND PLOTS
# ============================================================================

DEFAULT_TOP_N = 10
DEFAULT_ARROW_SCALE = 5.0
DEFAULT_CONFIDENCE_LEVEL = 0.95
ELLIPSE_TYPES = ('confidence', 'norm')
DEFAULT_ELLIPSE_TYPE = 'confidence'
ELLIPSE_N_POINTS = 100
MIN_ELLIPSE_POINTS = 3
