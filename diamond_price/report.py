"""
Report Figures and Tables
EDA plots, model comparison, predicted vs actual, and a markdown report tying them together
"""

import os

import matplotlib

matplotlib.use('Agg')

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from diamond_price.config import CATEGORICAL_COLS, REPORT_DIR, TARGET, TARGET_LOG
from diamond_price.evaluation import metrics_table
from diamond_price.models import display_name


def _save(fig, path):
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=100)
    plt.close(fig)
    return path


def plot_price_distribution(df, path):
    """Histogram of price and of log price."""
    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    sns.histplot(data=df, x=TARGET, bins=50, kde=True, ax=axes[0])
    axes[0].set_title('Distribution of Diamond Prices')
    sns.histplot(data=df, x=TARGET_LOG, bins=50, kde=True, ax=axes[1])
    axes[1].set_title('Distribution of log(price)')
    return _save(fig, path)


def plot_carat_vs_price(df, path):
    fig, ax = plt.subplots(figsize=(8, 6))
    sns.scatterplot(data=df, x='carat', y=TARGET, hue='clarity', alpha=0.5, s=10, ax=ax)
    ax.set_yscale('log')
    ax.set_title('Carat vs Price')
    return _save(fig, path)


def plot_price_by_category(df, path):
    fig, axes = plt.subplots(1, len(CATEGORICAL_COLS), figsize=(16, 5))
    for ax, col in zip(axes, CATEGORICAL_COLS):
        sns.boxplot(data=df, x=col, y=TARGET_LOG, ax=ax)
        ax.set_title(f'log(price) by {col}')
        ax.tick_params(axis='x', rotation=45)
    return _save(fig, path)


def plot_correlations(df, path):
    numeric = df.select_dtypes(include=[np.number])
    fig, ax = plt.subplots(figsize=(9, 7))
    sns.heatmap(numeric.corr(), annot=True, fmt='.2f', cmap='coolwarm', center=0, ax=ax)
    ax.set_title('Correlation Matrix of Numerical Variables')
    return _save(fig, path)


def plot_eda(df, figure_dir):
    """All exploratory figures. Returns {name: path}."""
    return {
        'price_distribution': plot_price_distribution(df, os.path.join(figure_dir, 'price_distribution.png')),
        'carat_vs_price': plot_carat_vs_price(df, os.path.join(figure_dir, 'carat_vs_price.png')),
        'price_by_category': plot_price_by_category(df, os.path.join(figure_dir, 'price_by_category.png')),
        'correlations': plot_correlations(df, os.path.join(figure_dir, 'correlations.png')),
    }


def plot_model_comparison(comparison, path):
    """Bar chart of mean CV R², MAE and RMSE with fold std error bars."""
    fig, axes = plt.subplots(1, 3, figsize=(15, 5))
    labels = [display_name(m) for m in comparison['model']]
    for ax, metric, title in zip(axes, ('rsq', 'mae', 'rmse'), ('R²', 'MAE (log)', 'RMSE (log)')):
        ax.bar(labels, comparison[f'mean_{metric}'], yerr=comparison[f'std_{metric}'],
               color=sns.color_palette('deep', len(labels)), capsize=4)
        ax.set_title(f'Cross-validated {title}')
        ax.tick_params(axis='x', rotation=30)
    return _save(fig, path)


def plot_predicted_vs_actual(predictions, path, title='Predicted vs Actual (test set)'):
    """Scatter of predicted against actual price with the identity line."""
    fig, ax = plt.subplots(figsize=(7, 7))
    ax.scatter(predictions['actual'], predictions['predicted'], alpha=0.4, s=10)

    lo = min(predictions['actual'].min(), predictions['predicted'].min())
    hi = max(predictions['actual'].max(), predictions['predicted'].max())
    ax.plot([lo, hi], [lo, hi], color='red', linestyle='--', label='Perfect prediction')

    ax.set_xscale('log')
    ax.set_yscale('log')
    ax.set_xlabel('Actual price ($)')
    ax.set_ylabel('Predicted price ($)')
    ax.set_title(title)
    ax.legend()
    return _save(fig, path)


def _table(frame, floatfmt='{:.4f}'.format):
    return '```\n' + frame.to_string(index=False, float_format=floatfmt) + '\n```'


def write_report(comparison, final, output_dir=REPORT_DIR, tuning=None, recipe_info=None,
                 summary=None, figures=None):
    """
    Write CSV tables and report.md.

    Args:
        comparison: compare_models output
        final: last_fit output
        output_dir: Report directory (figures go in output_dir/figures)
        tuning: {model_name: tuning_results frame}
        recipe_info: recipe_summary of the final pipeline's recipe
        summary: describe_data output
        figures: Extra {name: path} figures (EDA) to link

    Returns:
        {artifact name: path}
    """
    os.makedirs(output_dir, exist_ok=True)
    figure_dir = os.path.join(output_dir, 'figures')
    paths = {}
    tuning = tuning or {}
    figures = dict(figures or {})

    paths['model_comparison'] = os.path.join(output_dir, 'model_comparison.csv')
    comparison.to_csv(paths['model_comparison'], index=False)

    test_table = metrics_table(final)
    paths['test_metrics'] = os.path.join(output_dir, 'test_metrics.csv')
    test_table.to_csv(paths['test_metrics'], index=False)

    paths['test_predictions'] = os.path.join(output_dir, 'test_predictions.csv')
    final['predictions'].to_csv(paths['test_predictions'], index=False)

    for name, results in tuning.items():
        paths[f'tuning_{name}'] = os.path.join(output_dir, f'tuning_{name}.csv')
        results.to_csv(paths[f'tuning_{name}'], index=False)

    figures['model_comparison'] = plot_model_comparison(
        comparison, os.path.join(figure_dir, 'model_comparison.png'))
    figures['predicted_vs_actual'] = plot_predicted_vs_actual(
        final['predictions'], os.path.join(figure_dir, 'predicted_vs_actual.png'),
        title=f"Predicted vs Actual: {display_name(final['model_name'])} (test set)")

    lines = ['# Diamond Price Models', '']

    if summary is not None:
        lines += ['## Data', '',
                  f"{summary['shape'][0]} diamonds, {summary['shape'][1]} columns.", '',
                  _table(summary['numeric'].reset_index().rename(columns={'index': 'column'}),
                         '{:.2f}'.format), '',
                  f"Price skewness {summary['price_skew']:.2f}"
                  + (f", log price skewness {summary['price_log_skew']:.2f}."
                     if 'price_log_skew' in summary else '.'), '']

    if recipe_info is not None:
        lines += ['## Recipe', '',
                  'One-hot encode cut/color/clarity, drop near-zero variance columns, '
                  'drop highly correlated columns, center and scale.', '',
                  f"- Near-zero variance removed: {', '.join(recipe_info['nzv']) or 'none'}",
                  f"- Correlation filter removed: {', '.join(recipe_info['corr']) or 'none'}",
                  f"- Final predictors ({len(recipe_info['features'])}): {', '.join(recipe_info['features'])}",
                  '']

    shown = comparison[['display_name', 'tuned', 'mean_rsq', 'std_rsq', 'mean_mae', 'mean_rmse']]
    lines += ['## Cross-validated comparison (log price)', '', _table(shown), '']

    for name, results in tuning.items():
        lines += [f'### Tuning: {display_name(name)}', '', _table(results.head(10)), '']

    lines += [f"## Test set: {display_name(final['model_name'])}", '',
              f"Parameters: {final['params'] or 'defaults'}", '',
              _table(test_table), '']

    lines += ['## Figures', '']
    for name, path in figures.items():
        lines.append(f'![{name}]({os.path.relpath(path, output_dir)})')
    lines.append('')

    paths['report'] = os.path.join(output_dir, 'report.md')
    with open(paths['report'], 'w') as f:
        f.write('\n'.join(lines))

    paths.update({f'figure_{k}': v for k, v in figures.items()})
    return paths
