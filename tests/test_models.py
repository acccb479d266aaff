import pytest
from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import ElasticNet, LinearRegression

from diamond_price.config import MODEL_NAMES, TUNED_MODELS
from diamond_price.models import build_model, display_name, get_param_grid, is_tuned
from diamond_price.neural_net import TorchMLPRegressor
from diamond_price.preprocessing import get_feature_columns


@pytest.mark.parametrize('name, estimator', [
    ('linear', LinearRegression),
    ('elastic_net', ElasticNet),
    ('random_forest', RandomForestRegressor),
    ('neural_net', TorchMLPRegressor),
])
def test_build_model(name, estimator):
    model = build_model(name)

    assert list(model.named_steps) == ['recipe', 'model']
    assert isinstance(model.named_steps['model'], estimator)


def test_build_model_unknown():
    with pytest.raises(ValueError, match="Unknown model"):
        build_model('gradient_boosting')


def test_quick_models_are_smaller():
    assert build_model('random_forest', quick=True).named_steps['model'].n_estimators < \
        build_model('random_forest').named_steps['model'].n_estimators
    assert build_model('neural_net', quick=True).named_steps['model'].epochs < \
        build_model('neural_net').named_steps['model'].epochs


@pytest.mark.parametrize('name', ['elastic_net', 'random_forest', 'neural_net'])
def test_param_grid_keys_are_valid_pipeline_params(name):
    model = build_model(name)
    grid = get_param_grid(name)

    assert grid
    for param, values in grid.items():
        assert param in model.get_params()
        assert len(values) >= 2
    model.set_params(**{p: v[0] for p, v in grid.items()})


def test_linear_has_no_grid():
    with pytest.raises(ValueError, match="no hyperparameter grid"):
        get_param_grid('linear')


def test_tuned_models():
    assert set(TUNED_MODELS) <= set(MODEL_NAMES)
    assert is_tuned('elastic_net')
    assert not is_tuned('linear')
    assert display_name('random_forest') == 'Random Forest'


def test_linear_pipeline_fits(featured):
    model = build_model('linear').fit(featured[get_feature_columns()], featured['price_log'])

    assert model.score(featured[get_feature_columns()], featured['price_log']) > 0.8
