"""
Data handling utility modules for composition PCA
"""

from .data_loaders import (
    DataFrameSource,
    FileSource,
    InputSource,
    load_observations_csv,
    parse_concentration,
    resolve_input_source,
    validate_observations
)

from .data_reshaper import (
    reshape_observations
)

__all__ = [
    # Loaders
    'DataFrameSource',
    'FileSource',
    'InputSource',
    'load_observations_csv',
    'parse_concentration',
    'resolve_input_source',
    'validate_observations',
    # Reshaping
    'reshape_observations'
]
