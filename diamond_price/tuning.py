"""
Resampling and Hyperparameter Tuning
- Folds come from the precomputed fold column (PredefinedSplit), so every model
  sees the same resamples
- Untuned models are cross-validated with fixed hyperparameters
- Tuned models run GridSearchCV and refit on RMSE
"""

import numpy as np
import pandas as pd
from sklearn.model_selection import GridSearchCV, PredefinedSplit, cross_validate

from diamond_price.config import FOLD_COL, NUM_JOBS, SEED, TARGET_LOG
from diamond_price.models import build_model, display_name, get_param_grid
from diamond_price.preprocessing import get_feature_columns

SCORING = {
    'rsq': 'r2',
    'mae': 'neg_mean_absolute_error',
    'rmse': 'neg_root_mean_squared_error',
}
METRICS = list(SCORING)


def make_cv(train):
    """PredefinedSplit over the fold column."""
    if FOLD_COL not in train.columns:
        raise ValueError(f"Training data has no '{FOLD_COL}' column; run assign_folds first")
    return PredefinedSplit(test_fold=train[FOLD_COL].to_numpy())


def _xy(train):
    return train[get_feature_columns()], train[TARGET_LOG].to_numpy()


def _n_jobs(name, n_jobs):
    # torch already parallelises internally
    return 1 if name == 'neural_net' else n_jobs


def resample_model(name, train, seed=SEED, quick=False, n_jobs=NUM_JOBS, params=None):
    """
    Cross-validate one model with fixed hyperparameters.

    Returns:
        dict with per-fold scores ('folds' DataFrame) and fold means / stds
    """
    model = build_model(name, seed=seed, quick=quick)
    if params:
        model.set_params(**params)

    X, y = _xy(train)
    scores = cross_validate(
        model, X, y,
        cv=make_cv(train),
        scoring=SCORING,
        n_jobs=_n_jobs(name, n_jobs),
        error_score='raise',
    )

    folds = pd.DataFrame({m: scores[f'test_{m}'] for m in METRICS})
    # sklearn scorers are "greater is better"
    folds['mae'] = -folds['mae']
    folds['rmse'] = -folds['rmse']
    folds.insert(0, 'fold', range(len(folds)))

    result = {
        'model': name,
        'folds': folds,
        'params': dict(params or {}),
        'tuned': False,
    }
    for m in METRICS:
        result[f'mean_{m}'] = float(folds[m].mean())
        result[f'std_{m}'] = float(folds[m].std(ddof=1)) if len(folds) > 1 else 0.0

    print(f"  {display_name(name)}: R² {result['mean_rsq']:.4f}, "
          f"MAE {result['mean_mae']:.4f}, RMSE {result['mean_rmse']:.4f} (log price)")
    return result


def tune_model(name, train, grid=None, seed=SEED, quick=False, n_jobs=NUM_JOBS):
    """
    Grid search over the fold column.

    Args:
        name: Model name
        train: Training frame with fold column
        grid: Parameter grid; defaults to get_param_grid(name, quick)

    Returns:
        Fitted GridSearchCV (refit on lowest RMSE)
    """
    grid = grid if grid is not None else get_param_grid(name, quick=quick)
    n_candidates = int(np.prod([len(v) for v in grid.values()]))
    print(f"  Tuning {display_name(name)} over {n_candidates} candidates...")

    search = GridSearchCV(
        build_model(name, seed=seed, quick=quick),
        param_grid=grid,
        scoring=SCORING,
        refit='rmse',
        cv=make_cv(train),
        n_jobs=_n_jobs(name, n_jobs),
        error_score='raise',
    )
    X, y = _xy(train)
    search.fit(X, y)

    best = select_best(search)
    print(f"  ✅ Best params: {best}")
    print(f"  ✅ Best CV RMSE (log): {-search.best_score_:.4f}")
    return search


def tuning_results(search):
    """One row per grid combination, ranked by RMSE."""
    cv = pd.DataFrame(search.cv_results_)
    param_cols = [c for c in cv.columns if c.startswith('param_')]

    results = cv[param_cols].copy()
    results.columns = [c[len('param_model__'):] if c.startswith('param_model__') else c[len('param_'):]
                       for c in param_cols]
    for m in METRICS:
        sign = 1 if m == 'rsq' else -1
        results[f'mean_{m}'] = sign * cv[f'mean_test_{m}']
        results[f'std_{m}'] = cv[f'std_test_{m}']

    results = results.sort_values('mean_rmse').reset_index(drop=True)
    results.insert(0, 'rank', range(1, len(results) + 1))
    return results


def select_best(search):
    """Best parameter combination of a fitted search."""
    return dict(search.best_params_)


def search_to_record(name, search):
    """Summarise the best candidate of a search like a resample_model result."""
    idx = search.best_index_
    cv = search.cv_results_
    n_splits = search.n_splits_

    folds = pd.DataFrame({
        m: [cv[f'split{k}_test_{m}'][idx] for k in range(n_splits)] for m in METRICS
    })
    folds['mae'] = -folds['mae']
    folds['rmse'] = -folds['rmse']
    folds.insert(0, 'fold', range(n_splits))

    record = {
        'model': name,
        'folds': folds,
        'params': select_best(search),
        'tuned': True,
    }
    for m in METRICS:
        record[f'mean_{m}'] = float(folds[m].mean())
        record[f'std_{m}'] = float(folds[m].std(ddof=1)) if n_splits > 1 else 0.0
    return record
