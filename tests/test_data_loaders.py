import pandas as pd
import pytest

from conftest import make_observations
from pca_utils.errors import InvalidInputError
from utils.data_loaders import (
    DataFrameSource,
    FileSource,
    load_observations_csv,
    parse_concentration,
    resolve_input_source,
    validate_observations
)


class TestParseConcentration:
    """Unit tests for locale-aware concentration parsing"""

    @pytest.mark.parametrize("text, decimal, expected", [
        ("1,5", ",", 1.5),
        ("1.234,5", ",", 1234.5),
        ("  0,25 ", ",", 0.25),
        ("12", ",", 12.0),
        ("1.5", ".", 1.5),
        ("1,234.5", ".", 1234.5),
        ("2e-3", ".", 0.002),
    ])
    def test_text_values(self, text, decimal, expected):
        """Test text parsing with explicit decimal separator"""
        assert parse_concentration(text, decimal=decimal) == pytest.approx(expected)

    def test_numbers_pass_through(self):
        """Test numeric values are used as-is"""
        assert parse_concentration(3, decimal=',') == 3.0
        assert parse_concentration(2.75, decimal=',') == 2.75

    @pytest.mark.parametrize("text", ["", "abc", "1,2,3", "nan", "inf", "1.5", "0.125", "00.125"])
    def test_rejects_bad_text_with_decimal_comma(self, text):
        """Test blank, non-numeric, non-finite and ambiguous values"""
        with pytest.raises(ValueError):
            parse_concentration(text, decimal=',')

    @pytest.mark.parametrize("text", ["0,125", "0,125.5"])
    def test_rejects_leading_zero_group_with_decimal_point(self, text):
        """Test a decimal comma is not read as thousands grouping"""
        with pytest.raises(ValueError):
            parse_concentration(text, decimal='.')

    def test_rejects_unknown_decimal(self):
        """Test only '.' and ',' are accepted as decimal separators"""
        with pytest.raises(ValueError):
            parse_concentration("1", decimal=';')


class TestValidateObservations:
    """Unit tests for observations validation"""

    def test_normalizes_columns_and_types(self):
        """Test required columns are kept in order and labels become strings"""
        frame = pd.DataFrame({
            'extra': ['x', 'y'],
            'concentracao': ['1,5', '2'],
            'composto': [' limoneno ', 'pineno'],
            'replica': [1, 2],
            'condicao': ['ctrl', 'ctrl'],
        })

        result = validate_observations(frame, decimal=',')

        assert list(result.columns) == ['condicao', 'replica', 'composto', 'concentracao']
        assert result['replica'].tolist() == ['1', '2']
        assert result['composto'].tolist() == ['limoneno', 'pineno']
        assert result['concentracao'].tolist() == [1.5, 2.0]

    def test_does_not_mutate_input(self):
        """Test the caller's frame is left untouched"""
        frame = make_observations([('ctrl', 1, 'A', '1,0')])
        before = frame.copy()

        validate_observations(frame, decimal=',')

        pd.testing.assert_frame_equal(frame, before)

    def test_missing_column(self):
        """Test missing required column names the field"""
        frame = pd.DataFrame({'condicao': ['c'], 'replica': ['1'], 'composto': ['A']})

        with pytest.raises(InvalidInputError) as exc_info:
            validate_observations(frame)

        assert exc_info.value.field == 'concentracao'

    def test_empty_table(self):
        """Test empty input is rejected"""
        with pytest.raises(InvalidInputError):
            validate_observations(make_observations([]))

    def test_non_numeric_concentration(self):
        """Test non-numeric concentration names the field"""
        frame = make_observations([('c', '1', 'A', 'n/d')])

        with pytest.raises(InvalidInputError) as exc_info:
            validate_observations(frame)

        assert exc_info.value.field == 'concentracao'
        assert 'row 1' in str(exc_info.value)

    def test_mismatched_decimal_separator(self):
        """Test '0,125' with decimal '.' fails instead of becoming 125"""
        frame = make_observations([('c', '1', 'A', '0,125')])

        with pytest.raises(InvalidInputError) as exc_info:
            validate_observations(frame)

        assert exc_info.value.field == 'concentracao'

    def test_missing_concentration(self):
        """Test NaN concentration is rejected"""
        frame = make_observations([('c', '1', 'A', 1.0), ('c', '2', 'A', float('nan'))])

        with pytest.raises(InvalidInputError) as exc_info:
            validate_observations(frame)

        assert 'row 2' in str(exc_info.value)

    def test_negative_concentration(self):
        """Test negative concentrations are rejected"""
        with pytest.raises(InvalidInputError):
            validate_observations(make_observations([('c', '1', 'A', -0.5)]))

    def test_blank_label(self):
        """Test blank compound name names the field"""
        frame = make_observations([('c', '1', '  ', 1.0)])

        with pytest.raises(InvalidInputError) as exc_info:
            validate_observations(frame)

        assert exc_info.value.field == 'composto'

    def test_rejects_non_dataframe(self):
        """Test non-tabular input is rejected"""
        with pytest.raises(InvalidInputError):
            validate_observations([('c', '1', 'A', 1.0)])


class TestInputSources:
    """Unit tests for input source resolution"""

    def test_dataframe_source(self, observations_frame):
        """Test in-memory tables bypass file I/O"""
        result = resolve_input_source(DataFrameSource(observations_frame))

        assert len(result) == len(observations_frame)
        assert result['concentracao'].dtype == float

    def test_file_source_with_decimal_comma(self, tmp_path):
        """Test semicolon-separated file with decimal comma"""
        path = tmp_path / "dados.csv"
        path.write_text(
            "condicao;replica;composto;concentracao\n"
            "ctrl;1;limoneno;1,25\n"
            "ctrl;1;pineno;1.000,5\n",
            encoding='utf-8'
        )

        result = resolve_input_source(FileSource(path))

        assert result['concentracao'].tolist() == [1.25, 1000.5]
        assert result['replica'].tolist() == ['1', '1']

    def test_file_source_encoding_fallback(self, tmp_path):
        """Test latin-1 files load when utf-8 decoding fails"""
        path = tmp_path / "latin.csv"
        path.write_bytes(
            "condicao;replica;composto;concentracao\n"
            "ctrl;1;açúcar;2,0\n".encode('latin-1')
        )

        result = resolve_input_source(FileSource(path))

        assert result['composto'].tolist() == ['açúcar']

    def test_empty_file(self, tmp_path):
        """Test empty file raises InvalidInputError"""
        path = tmp_path / "empty.csv"
        path.write_text("", encoding='utf-8')

        with pytest.raises(InvalidInputError):
            load_observations_csv(path)

    def test_header_only_file(self, tmp_path):
        """Test header without rows is an empty table"""
        path = tmp_path / "header.csv"
        path.write_text("condicao;replica;composto;concentracao\n", encoding='utf-8')

        with pytest.raises(InvalidInputError):
            resolve_input_source(FileSource(path))

    def test_malformed_file_keeps_parser_error(self, tmp_path):
        """Test a row with extra fields reports the parser message"""
        path = tmp_path / "malformed.csv"
        path.write_text(
            "condicao;replica;composto;concentracao\n"
            "ctrl;1;A;1,0\n"
            "ctrl;2;A;2,0;extra;extra\n",
            encoding='utf-8'
        )

        with pytest.raises(InvalidInputError) as exc_info:
            load_observations_csv(path)

        assert isinstance(exc_info.value.__cause__, pd.errors.ParserError)
        assert 'Malformed' in str(exc_info.value)
        assert 'decode' not in str(exc_info.value)

    def test_missing_file(self, tmp_path):
        """Test missing file propagates FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            resolve_input_source(FileSource(tmp_path / "missing.csv"))

    def test_unsupported_source(self):
        """Test bare paths must be wrapped in FileSource"""
        with pytest.raises(TypeError):
            resolve_input_source("dados.csv")
