import pytest

from conftest import COMPOUNDS, CONDITIONS, REPLICAS, make_observations
from pca_utils.data_model import WideMatrix
from pca_utils.errors import DuplicateObservationError, InvalidInputError
from utils.data_loaders import validate_observations
from utils.data_reshaper import reshape_observations


class TestReshapeObservations:
    """Unit tests for long-to-wide reshaping"""

    def test_shape_matches_distinct_samples_and_compounds(self, observations_frame):
        """Test one row per (condition, replica) and one column per compound"""
        wide = reshape_observations(validate_observations(observations_frame))

        assert isinstance(wide, WideMatrix)
        assert wide.shape == (len(CONDITIONS) * len(REPLICAS), len(COMPOUNDS))
        assert wide.compounds == COMPOUNDS
        assert wide.samples[0] == ('controle', '1')
        assert wide.conditions.tolist() == [c for c in CONDITIONS for _ in REPLICAS]

    def test_absent_combinations_are_zero(self):
        """Test a compound missing from a sample is filled with 0.0"""
        observations = validate_observations(make_observations([
            ('ctrl', '1', 'A', 1.0),
            ('ctrl', '1', 'B', 2.0),
            ('ctrl', '2', 'A', 3.0),
        ]))

        wide = reshape_observations(observations)

        assert wide.values.loc[('ctrl', '2'), 'B'] == 0.0
        assert wide.values.notna().all().all()

    def test_first_appearance_order(self):
        """Test rows and columns keep input order rather than sorted order"""
        observations = validate_observations(make_observations([
            ('zeta', '2', 'pineno', 1.0),
            ('alpha', '1', 'limoneno', 2.0),
            ('zeta', '2', 'limoneno', 3.0),
        ]))

        wide = reshape_observations(observations)

        assert wide.samples == [('zeta', '2'), ('alpha', '1')]
        assert wide.compounds == ['pineno', 'limoneno']

    def test_duplicate_last_value_wins(self, caplog):
        """Test the later duplicate observation replaces the earlier one"""
        observations = validate_observations(make_observations([
            ('ctrl', '1', 'A', 1.0),
            ('ctrl', '1', 'B', 2.0),
            ('ctrl', '1', 'A', 9.0),
        ]))

        wide = reshape_observations(observations, duplicate_policy='last')

        assert wide.values.loc[('ctrl', '1'), 'A'] == 9.0
        assert wide.shape == (1, 2)
        assert 'duplicate' in caplog.text

    def test_duplicate_error_policy(self):
        """Test duplicates raise and name the compound with the 'error' policy"""
        observations = validate_observations(make_observations([
            ('ctrl', '1', 'A', 1.0),
            ('ctrl', '1', 'A', 9.0),
        ]))

        with pytest.raises(DuplicateObservationError) as exc_info:
            reshape_observations(observations, duplicate_policy='error')

        assert exc_info.value.field == 'A'
        assert isinstance(exc_info.value, InvalidInputError)

    def test_unknown_duplicate_policy(self, observations_frame):
        """Test unsupported policy names are rejected"""
        with pytest.raises(ValueError):
            reshape_observations(observations_frame, duplicate_policy='mean')

    def test_empty_input(self):
        """Test empty observations raise InvalidInputError"""
        with pytest.raises(InvalidInputError):
            reshape_observations(make_observations([]))

    def test_deterministic(self, observations_frame):
        """Test reshaping the same input twice gives identical matrices"""
        observations = validate_observations(observations_frame)

        first = reshape_observations(observations)
        second = reshape_observations(observations)

        assert first.values.equals(second.values)
