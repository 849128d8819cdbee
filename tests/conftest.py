import os
import sys

import numpy as np
import pandas as pd
import pytest

# Add the project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

CONDITIONS = ['controle', 'tratamento_a', 'tratamento_b']
REPLICAS = ['1', '2', '3']
COMPOUNDS = ['limoneno', 'pineno', 'mirceno', 'linalol', 'cariofileno']

# Mean concentration per condition (rows) and compound (columns)
CONDITION_MEANS = np.array([
    [5.0, 2.0, 1.0, 0.5, 3.0],
    [8.0, 1.5, 2.5, 0.4, 3.2],
    [4.0, 3.5, 1.2, 1.8, 2.9],
])


def make_observations(rows):
    """Build an observations frame from (condicao, replica, composto, concentracao) tuples"""
    return pd.DataFrame(rows, columns=['condicao', 'replica', 'composto', 'concentracao'])


@pytest.fixture
def observations_frame():
    """3 conditions x 3 replicas x 5 compounds with condition effects and noise"""
    rng = np.random.default_rng(7)
    rows = []
    for i, condition in enumerate(CONDITIONS):
        for replica in REPLICAS:
            for j, compound in enumerate(COMPOUNDS):
                value = max(0.0, CONDITION_MEANS[i, j] + rng.normal(0.0, 0.3))
                rows.append((condition, replica, compound, round(value, 4)))
    return make_observations(rows)


@pytest.fixture
def constant_compound_frame():
    """Compound A is 1.0 in all four samples; B and C vary"""
    rows = []
    values = {
        ('ctrl', '1'): (1.0, 1.0, 2.0),
        ('ctrl', '2'): (1.0, 2.0, 1.0),
        ('treat', '1'): (1.0, 3.0, 4.0),
        ('treat', '2'): (1.0, 5.0, 3.0),
    }
    for (condition, replica), concentrations in values.items():
        for compound, value in zip(['A', 'B', 'C'], concentrations):
            rows.append((condition, replica, compound, value))
    return make_observations(rows)


@pytest.fixture
def three_compound_frame():
    """2 conditions x 3 replicas x 3 varying compounds"""
    rows = []
    data = {
        ('ctrl', '1'): (1.0, 4.0, 2.5),
        ('ctrl', '2'): (1.2, 3.6, 2.0),
        ('ctrl', '3'): (0.9, 4.4, 2.2),
        ('treat', '1'): (2.1, 2.0, 2.4),
        ('treat', '2'): (2.4, 1.7, 1.9),
        ('treat', '3'): (2.0, 2.2, 2.8),
    }
    for (condition, replica), concentrations in data.items():
        for compound, value in zip(['X', 'Y', 'Z'], concentrations):
            rows.append((condition, replica, compound, value))
    return make_observations(rows)
