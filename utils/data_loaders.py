"""
Data loading functions
Resolves an input source (in-memory table or semicolon-separated file)
into a validated observations table
"""

import logging
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from pca_utils.config import (
    COL_CONCENTRATION,
    DEFAULT_DECIMAL,
    DEFAULT_ENCODING,
    DEFAULT_SEPARATOR,
    FALLBACK_ENCODINGS,
    LABEL_COLUMNS,
    REQUIRED_COLUMNS
)
from pca_utils.errors import InvalidInputError

logger = logging.getLogger(__name__)

_GROUPED_NUMBER = {
    ',': re.compile(r'^[+-]?[1-9]\d{0,2}(\.\d{3})+(,\d*)?$'),
    '.': re.compile(r'^[+-]?[1-9]\d{0,2}(,\d{3})+(\.\d*)?$'),
}


@dataclass(frozen=True)
class DataFrameSource:
    """Observations already loaded in memory (bypasses file I/O)."""
    frame: pd.DataFrame
    decimal: str = '.'


@dataclass(frozen=True)
class FileSource:
    """Semicolon-separated observations file on disk."""
    path: Union[str, Path]
    separator: str = DEFAULT_SEPARATOR
    decimal: str = DEFAULT_DECIMAL
    encoding: str = DEFAULT_ENCODING


InputSource = Union[DataFrameSource, FileSource]


def parse_concentration(value, decimal=DEFAULT_DECIMAL):
    """
    Parse one concentration cell with an explicit decimal separator

    Parameters:
    -----------
    value : str or number
        Raw cell value. Numbers are taken as-is.
    decimal : str
        Decimal separator used by text values ('.' or ',').
        The other character is accepted only as a thousands separator
        in groups of three digits, e.g. "1.234,5" with decimal ','.

    Returns:
    --------
    float : Parsed finite value

    Raises:
    -------
    ValueError : Blank, non-numeric or non-finite values
    """
    if decimal not in _GROUPED_NUMBER:
        raise ValueError(f"decimal must be '.' or ',', got {decimal!r}")

    if isinstance(value, (bool, np.bool_)):
        raise ValueError(f"boolean is not a concentration: {value!r}")

    if isinstance(value, (int, float, np.integer, np.floating)):
        result = float(value)
    else:
        text = str(value).strip().replace(' ', '').replace('\u00a0', '')
        if not text:
            raise ValueError("empty value")
        thousands = '.' if decimal == ',' else ','
        if thousands in text:
            if not _GROUPED_NUMBER[decimal].match(text):
                raise ValueError(f"ambiguous separators in {text!r}")
            text = text.replace(thousands, '')
        result = float(text.replace(decimal, '.'))

    if not math.isfinite(result):
        raise ValueError(f"non-finite value: {value!r}")
    return result


def _normalize_label(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def validate_observations(data, decimal='.'):
    """
    Check and normalize a long-format observations table

    Parameters:
    -----------
    data : pd.DataFrame
        Table with at least the columns condicao, replica, composto and
        concentracao. Extra columns are ignored.
    decimal : str
        Decimal separator for text concentrations.

    Returns:
    --------
    pd.DataFrame : Copy with the four required columns in canonical order,
        string labels and float concentrations, 0-based row index

    Raises:
    -------
    InvalidInputError : Empty table, missing column, blank label, or a
        non-numeric, non-finite or negative concentration
    """
    if not isinstance(data, pd.DataFrame):
        raise InvalidInputError(
            f"Observations must be a DataFrame, got {type(data).__name__}"
        )

    columns = {str(col).strip(): col for col in data.columns}
    for required in REQUIRED_COLUMNS:
        if required not in columns:
            raise InvalidInputError(
                f"Missing required column '{required}'. "
                f"Found: {list(columns)}",
                field=required
            )

    if len(data) == 0:
        raise InvalidInputError("Observations table is empty")

    observations = pd.DataFrame(
        {name: data[columns[name]].to_numpy() for name in REQUIRED_COLUMNS}
    )

    for label in LABEL_COLUMNS:
        raw = observations[label]
        blank = raw.isna() | (raw.astype(str).str.strip() == '')
        if blank.any():
            row = int(np.flatnonzero(blank.to_numpy())[0]) + 1
            raise InvalidInputError(
                f"Blank value in column '{label}' at row {row}",
                field=label
            )
        observations[label] = [_normalize_label(v) for v in raw]

    concentrations = []
    for row, raw in enumerate(observations[COL_CONCENTRATION], start=1):
        if raw is None or (isinstance(raw, float) and np.isnan(raw)):
            raise InvalidInputError(
                f"Missing concentration at row {row}",
                field=COL_CONCENTRATION
            )
        try:
            value = parse_concentration(raw, decimal=decimal)
        except ValueError as exc:
            raise InvalidInputError(
                f"Non-numeric concentration {raw!r} at row {row}: {exc}",
                field=COL_CONCENTRATION
            ) from exc
        if value < 0:
            raise InvalidInputError(
                f"Negative concentration {value} at row {row}",
                field=COL_CONCENTRATION
            )
        concentrations.append(value)
    observations[COL_CONCENTRATION] = np.asarray(concentrations, dtype=float)

    return observations


def load_observations_csv(path, separator=DEFAULT_SEPARATOR, encoding=DEFAULT_ENCODING):
    """
    Read a delimited observations file with encoding fallback

    All cells are read as text so the decimal separator is handled by
    validate_observations rather than guessed by the CSV reader.

    Parameters:
    -----------
    path : str or Path
        File to read
    separator : str
        Column separator (semicolon by default)
    encoding : str
        Preferred encoding, tried before the fallbacks

    Returns:
    --------
    pd.DataFrame : Raw table of strings
    """
    encodings = list(dict.fromkeys([encoding, *FALLBACK_ENCODINGS]))
    data = None

    for enc in encodings:
        try:
            data = pd.read_csv(path,
                               sep=separator,
                               dtype=str,
                               keep_default_na=False,
                               encoding=enc,
                               skipinitialspace=True)
            if enc != encoding:
                logger.info("File %s loaded with fallback encoding: %s", path, enc)
            break
        except UnicodeDecodeError:
            continue
        except pd.errors.EmptyDataError as exc:
            raise InvalidInputError(f"File {path} is empty") from exc
        except pd.errors.ParserError as exc:
            # Malformed rows fail the same way under every encoding
            raise InvalidInputError(f"Malformed file {path}: {exc}") from exc

    if data is None:
        raise InvalidInputError(f"Unable to decode {path} with any encoding")

    logger.debug("Read %d rows from %s", len(data), path)
    return data


def resolve_input_source(source):
    """
    Resolve an input source into a validated observations table

    Parameters:
    -----------
    source : DataFrameSource or FileSource

    Returns:
    --------
    pd.DataFrame : Output of validate_observations
    """
    if isinstance(source, DataFrameSource):
        return validate_observations(source.frame, decimal=source.decimal)
    if isinstance(source, FileSource):
        raw = load_observations_csv(source.path,
                                    separator=source.separator,
                                    encoding=source.encoding)
        return validate_observations(raw, decimal=source.decimal)
    raise TypeError(
        f"Unsupported input source: {type(source).__name__}. "
        f"Use DataFrameSource or FileSource."
    )
