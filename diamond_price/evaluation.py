"""
Evaluation and Model Comparison
- Goodness of fit: R², MAE, RMSE
- Metrics on log price (modeling scale) and on dollars (reporting scale)
- Winner = highest mean cross-validated R²
- Final fit: refit the winner on the whole training set, score the held-out test set
"""

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, r2_score, root_mean_squared_error

from diamond_price.config import SEED, TARGET_LOG
from diamond_price.models import build_model, display_name
from diamond_price.preprocessing import get_feature_columns


def regression_metrics(y_true, y_pred):
    """R², MAE and RMSE."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Shape mismatch: {y_true.shape} vs {y_pred.shape}")

    return {
        'rsq': float(r2_score(y_true, y_pred)),
        'mae': float(mean_absolute_error(y_true, y_pred)),
        'rmse': float(root_mean_squared_error(y_true, y_pred)),
    }


def price_metrics(y_true_log, y_pred_log):
    """regression_metrics after mapping log price back to dollars."""
    return regression_metrics(np.exp(y_true_log), np.exp(y_pred_log))


def summarize_cv(name, cv_result):
    """Flatten a resample/tuning record into one comparison row."""
    row = {
        'model': name,
        'display_name': display_name(name),
        'tuned': bool(cv_result.get('tuned', False)),
        'params': cv_result.get('params', {}),
    }
    for m in ('rsq', 'mae', 'rmse'):
        row[f'mean_{m}'] = cv_result[f'mean_{m}']
        row[f'std_{m}'] = cv_result[f'std_{m}']
    return row


def compare_models(records):
    """
    Comparison table of cross-validated metrics.

    Args:
        records: Iterable of resample_model / search_to_record results

    Returns:
        DataFrame sorted by mean R² (best first)
    """
    rows = [summarize_cv(r['model'], r) for r in records]
    if not rows:
        raise ValueError("No model results to compare")

    comparison = pd.DataFrame(rows)
    comparison = comparison.sort_values(['mean_rsq', 'mean_rmse'], ascending=[False, True])
    return comparison.reset_index(drop=True)


def pick_winner(comparison):
    """Name of the model with the highest mean cross-validated R²."""
    return comparison.sort_values('mean_rsq', ascending=False).iloc[0]['model']


def last_fit(name, params, train, test, seed=SEED, quick=False):
    """
    Refit a model on the full training set and evaluate on the test set.

    Returns:
        dict with the fitted pipeline, per-row predictions and test metrics
        on both the log and dollar scales
    """
    print(f"  Refitting {display_name(name)} on {len(train)} training rows...")
    model = build_model(name, seed=seed, quick=quick)
    if params:
        model.set_params(**params)

    features = get_feature_columns()
    model.fit(train[features], train[TARGET_LOG].to_numpy())

    pred_log = model.predict(test[features])
    y_log = test[TARGET_LOG].to_numpy()

    predictions = pd.DataFrame({
        'actual_log': y_log,
        'predicted_log': pred_log,
        'actual': np.exp(y_log),
        'predicted': np.exp(pred_log),
    })
    predictions['residual'] = predictions['actual'] - predictions['predicted']

    metrics_log = regression_metrics(y_log, pred_log)
    metrics_price = price_metrics(y_log, pred_log)

    print(f"  Test R² (log): {metrics_log['rsq']:.4f}")
    print(f"  Test MAE (log): {metrics_log['mae']:.4f}")
    print(f"  Test RMSE (log): {metrics_log['rmse']:.4f}")
    print(f"  Test MAE ($): {metrics_price['mae']:,.2f}")
    print(f"  Test RMSE ($): {metrics_price['rmse']:,.2f}")

    return {
        'model_name': name,
        'params': dict(params or {}),
        'pipeline': model,
        'predictions': predictions,
        'metrics_log': metrics_log,
        'metrics_price': metrics_price,
    }


def metrics_table(final):
    """Two-row frame of test metrics (log and dollar scale)."""
    rows = [
        {'scale': 'log price', **final['metrics_log']},
        {'scale': 'price ($)', **final['metrics_price']},
    ]
    table = pd.DataFrame(rows)
    table.insert(0, 'model', display_name(final['model_name']))
    return table


def predict_price(model, frame):
    """
    Dollar price predictions for new diamond records.

    Args:
        model: Fitted pipeline from last_fit (trained on log price)
        frame: Diamond records with the raw attribute columns

    Returns:
        numpy array of prices
    """
    frame = frame.copy()
    if 'volume' not in frame.columns:
        frame['volume'] = frame['x'] * frame['y'] * frame['z']
    return np.exp(model.predict(frame[get_feature_columns()]))
