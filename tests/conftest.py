"""Fixtures for the test suite."""

import numpy as np
import pandas as pd
import pytest

from diamond_price.config import CATEGORY_LEVELS
from diamond_price.preprocessing import add_features, assign_folds, split_data


def make_diamonds(n=300, seed=42):
    """Synthetic diamonds whose log price is linear in log carat and the grades."""
    rng = np.random.default_rng(seed)
    carat = np.round(np.exp(rng.normal(np.log(0.7), 0.5, n)).clip(0.2, 3.0), 2)
    cut = rng.integers(0, 5, n)
    color = rng.integers(0, 7, n)
    clarity = rng.integers(0, 8, n)
    depth = np.round(rng.normal(61.7, 1.4, n), 1)
    table = np.round(rng.normal(57.5, 2.2, n))
    log_price = 7.8 + 1.8 * np.log(carat) + 0.05 * cut + 0.07 * color + 0.1 * clarity \
        + rng.normal(0, 0.1, n)
    x = np.round(6.4 * carat ** (1 / 3) * rng.normal(1, 0.01, n), 2)
    y = np.round(x * rng.normal(1.005, 0.005, n), 2)
    z = np.round((x + y) / 2 * depth / 100, 2)

    return pd.DataFrame({
        'carat': carat,
        'cut': pd.Categorical.from_codes(cut, CATEGORY_LEVELS['cut'], ordered=True),
        'color': pd.Categorical.from_codes(color, CATEGORY_LEVELS['color'], ordered=True),
        'clarity': pd.Categorical.from_codes(clarity, CATEGORY_LEVELS['clarity'], ordered=True),
        'depth': depth,
        'table': table,
        'price': np.round(np.exp(log_price)).astype(int),
        'x': x,
        'y': y,
        'z': z,
    })


@pytest.fixture
def diamonds():
    """Raw diamond records."""
    return make_diamonds()


@pytest.fixture
def diamonds_csv(tmp_path, diamonds):
    """The raw records written as a CSV with string categoricals."""
    path = tmp_path / 'diamonds.csv'
    diamonds.to_csv(path, index=False)
    return str(path)


@pytest.fixture
def featured(diamonds):
    return add_features(diamonds)


@pytest.fixture
def split(featured):
    """(train with 3 folds, test)."""
    train, test = split_data(featured, test_size=0.25, seed=42)
    return assign_folds(train, n_folds=3, seed=42), test
