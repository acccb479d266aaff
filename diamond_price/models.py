"""
Model Factories
Each model is a Pipeline of the preprocessing recipe followed by one estimator:
- linear: ordinary least squares
- elastic_net: regularized linear regression (alpha = penalty, l1_ratio = mixture)
- random_forest: random forest ensemble
- neural_net: single hidden layer MLP (PyTorch)
"""

from sklearn.ensemble import RandomForestRegressor
from sklearn.linear_model import ElasticNet, LinearRegression
from sklearn.pipeline import Pipeline

from diamond_price.config import (
    MODEL_NAMES,
    NN_PARAMS,
    NUM_JOBS,
    PARAM_GRIDS,
    QUICK_NN_EPOCHS,
    QUICK_PARAM_GRIDS,
    QUICK_RF_N_ESTIMATORS,
    RF_N_ESTIMATORS,
    SEED,
    TUNED_MODELS,
)
from diamond_price.neural_net import TorchMLPRegressor
from diamond_price.recipe import build_recipe

DISPLAY_NAMES = {
    'linear': 'Linear Regression',
    'elastic_net': 'Elastic Net',
    'random_forest': 'Random Forest',
    'neural_net': 'Neural Network',
}


def _check_name(name):
    if name not in MODEL_NAMES:
        raise ValueError(f"Unknown model '{name}', expected one of {MODEL_NAMES}")


def build_estimator(name, seed=SEED, quick=False):
    """Unfitted estimator for a model name."""
    _check_name(name)

    if name == 'linear':
        return LinearRegression()
    if name == 'elastic_net':
        return ElasticNet(alpha=1e-3, l1_ratio=0.5, max_iter=10000, random_state=seed)
    if name == 'random_forest':
        return RandomForestRegressor(
            n_estimators=QUICK_RF_N_ESTIMATORS if quick else RF_N_ESTIMATORS,
            max_features=1 / 3,
            min_samples_leaf=5,
            n_jobs=NUM_JOBS,
            random_state=seed,
        )

    nn_params = dict(NN_PARAMS)
    if quick:
        nn_params['epochs'] = QUICK_NN_EPOCHS
    return TorchMLPRegressor(random_state=seed, **nn_params)


def build_model(name, seed=SEED, quick=False, **recipe_kwargs):
    """
    Build recipe + estimator pipeline.

    Args:
        name: One of MODEL_NAMES
        seed: Random state for stochastic estimators
        quick: Fewer trees / epochs for smoke runs
        recipe_kwargs: Forwarded to build_recipe

    Returns:
        Unfitted sklearn Pipeline with steps 'recipe' and 'model'
    """
    return Pipeline([
        ('recipe', build_recipe(**recipe_kwargs)),
        ('model', build_estimator(name, seed=seed, quick=quick)),
    ])


def get_param_grid(name, quick=False):
    """Hyperparameter grid keyed by pipeline parameter name."""
    _check_name(name)
    grids = QUICK_PARAM_GRIDS if quick else PARAM_GRIDS
    if name not in grids:
        raise ValueError(f"Model '{name}' has no hyperparameter grid")
    return {param: list(values) for param, values in grids[name].items()}


def is_tuned(name, tuned_models=TUNED_MODELS):
    return name in tuned_models


def display_name(name):
    return DISPLAY_NAMES.get(name, name)
