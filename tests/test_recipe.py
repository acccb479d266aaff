import numpy as np
import pandas as pd
import pytest

from diamond_price.preprocessing import get_feature_columns
from diamond_price.recipe import (
    CorrelationFilter,
    NearZeroVarianceFilter,
    build_recipe,
    recipe_summary,
)


def test_nzv_drops_constant_and_rare_columns():
    n = 100
    X = pd.DataFrame({
        'constant': np.ones(n),
        'rare': [1.0] * 2 + [0.0] * (n - 2),
        'balanced': [1.0, 0.0] * (n // 2),
        'continuous': np.linspace(0, 1, n),
    })

    nzv = NearZeroVarianceFilter().fit(X)

    assert nzv.removed_ == ['constant', 'rare']
    assert list(nzv.transform(X).columns) == ['balanced', 'continuous']
    assert list(nzv.get_feature_names_out()) == ['balanced', 'continuous']


def test_nzv_keeps_skewed_column_with_many_unique_values():
    # Dominant value but >10% distinct values: not near-zero variance
    X = pd.DataFrame({'skewed': [0.0] * 80 + list(range(1, 21))})

    nzv = NearZeroVarianceFilter().fit(X)

    assert nzv.removed_ == []


@pytest.mark.parametrize('kwargs', [{'freq_cut': 1}, {'unique_cut': 150}])
def test_nzv_rejects_bad_thresholds(kwargs):
    with pytest.raises(ValueError):
        NearZeroVarianceFilter(**kwargs).fit(pd.DataFrame({'a': [1.0, 2.0]}))


def test_correlation_filter_removes_one_of_a_correlated_pair():
    rng = np.random.default_rng(0)
    a = rng.normal(size=200)
    X = pd.DataFrame({
        'a': a,
        'a_copy': a * 2 + rng.normal(scale=0.01, size=200),
        'independent': rng.normal(size=200),
    })

    corr = CorrelationFilter(threshold=0.9).fit(X)

    assert len(corr.removed_) == 1
    assert corr.removed_[0] in {'a', 'a_copy'}
    assert 'independent' in corr.selected_
    assert corr.transform(X).shape == (200, 2)


def test_correlation_filter_drops_the_most_connected_column():
    rng = np.random.default_rng(1)
    base = rng.normal(size=500)
    # hub correlates with both left and right; left and right correlate less with each other
    left = base + rng.normal(scale=0.5, size=500)
    right = base + rng.normal(scale=0.5, size=500)
    hub = base
    X = pd.DataFrame({'left': left, 'hub': hub, 'right': right})

    corr = CorrelationFilter(threshold=0.85).fit(X)

    assert corr.removed_ == ['hub']


def test_correlation_filter_ignores_constant_columns():
    X = pd.DataFrame({'constant': np.zeros(50), 'value': np.arange(50.0)})

    corr = CorrelationFilter().fit(X)

    assert corr.removed_ == []


def test_correlation_filter_rejects_bad_threshold():
    with pytest.raises(ValueError):
        CorrelationFilter(threshold=0).fit(pd.DataFrame({'a': [1.0, 2.0]}))


def test_recipe_output_is_scaled_frame(featured):
    recipe = build_recipe()
    out = recipe.fit_transform(featured[get_feature_columns()])

    assert isinstance(out, pd.DataFrame)
    assert len(out) == len(featured)
    np.testing.assert_allclose(out.mean(), 0, atol=1e-8)
    np.testing.assert_allclose(out.std(ddof=0), 1, atol=1e-8)
    assert any(col.startswith('cut_') for col in out.columns)


def test_recipe_removes_size_columns_correlated_with_carat(featured):
    recipe = build_recipe().fit(featured[get_feature_columns()])
    info = recipe_summary(recipe)

    size_cols = {'carat', 'x', 'y', 'z', 'volume'}
    kept = size_cols & set(info['features'])
    assert len(kept) == 1
    assert size_cols - kept <= set(info['corr'])


def test_recipe_handles_unseen_levels(featured):
    recipe = build_recipe().fit(featured[get_feature_columns()])
    new = featured[get_feature_columns()].head(3).copy()
    new['cut'] = new['cut'].astype(str)
    new.loc[new.index[0], 'cut'] = 'Astor'

    out = recipe.transform(new)

    assert out.shape == (3, len(recipe_summary(recipe)['features']))
    assert np.isfinite(out.to_numpy()).all()
