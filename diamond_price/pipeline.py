"""
End-to-End Workflow
load -> clean -> features -> split -> folds -> resample four models -> tune two
-> compare -> refit winner -> test evaluation -> figures/report -> save winner
"""

import os

import joblib

from diamond_price.config import (
    DATA_PATH,
    MODEL_DIR,
    MODEL_NAMES,
    N_FOLDS,
    NUM_JOBS,
    REPORT_DIR,
    SEED,
    TEST_SIZE,
    TUNED_MODELS,
)
from diamond_price.evaluation import compare_models, last_fit, pick_winner
from diamond_price.models import display_name, is_tuned
from diamond_price.preprocessing import describe_data, prepare_data
from diamond_price.recipe import recipe_summary
from diamond_price.report import plot_eda, write_report
from diamond_price.tuning import resample_model, search_to_record, tune_model, tuning_results


def print_banner(text):
    """Print formatted banner."""
    print("\n" + "="*70)
    print(f"  {text}")
    print("="*70 + "\n")


def fit_models(train, models=MODEL_NAMES, tuned_models=TUNED_MODELS, seed=SEED,
               quick=False, skip_tuning=False, n_jobs=NUM_JOBS):
    """
    Cross-validate every model; grid-search the tuned ones.

    Returns:
        (records, tuning) where records feed compare_models and tuning maps
        model name -> tuning_results frame
    """
    unknown = [m for m in list(models) + list(tuned_models) if m not in MODEL_NAMES]
    if unknown:
        raise ValueError(f"Unknown models {unknown}, expected from {MODEL_NAMES}")

    records = []
    tuning = {}
    for i, name in enumerate(models, 1):
        print(f"\n[Model {i}/{len(models)}] {display_name(name)}")
        if is_tuned(name, tuned_models) and not skip_tuning:
            search = tune_model(name, train, seed=seed, quick=quick, n_jobs=n_jobs)
            tuning[name] = tuning_results(search)
            records.append(search_to_record(name, search))
        else:
            records.append(resample_model(name, train, seed=seed, quick=quick, n_jobs=n_jobs))
    return records, tuning


def run_eda(data_path=DATA_PATH, output_dir=REPORT_DIR, test_size=TEST_SIZE,
            n_folds=N_FOLDS, seed=SEED):
    """Exploratory figures only."""
    df, _, _ = prepare_data(data_path, test_size=test_size, n_folds=n_folds, seed=seed)
    figures = plot_eda(df, os.path.join(output_dir, 'figures'))
    for name, path in figures.items():
        print(f"  ✅ {name}: {path}")
    return figures


def run_pipeline(data_path=DATA_PATH, output_dir=REPORT_DIR, model_dir=MODEL_DIR,
                 test_size=TEST_SIZE, n_folds=N_FOLDS, seed=SEED, models=MODEL_NAMES,
                 tuned_models=TUNED_MODELS, quick=False, skip_tuning=False,
                 n_jobs=NUM_JOBS, make_eda=True):
    """
    Run the full modeling workflow.

    Returns:
        dict with 'comparison', 'winner', 'final' (last_fit output), 'tuning'
        and 'paths' (every written artifact)
    """
    print_banner("PHASE 1: DATA PREPARATION")
    df, train, test = prepare_data(data_path, test_size=test_size, n_folds=n_folds, seed=seed)
    summary = describe_data(df)

    figures = {}
    if make_eda:
        print_banner("PHASE 2: EXPLORATORY FIGURES")
        figures = plot_eda(df, os.path.join(output_dir, 'figures'))
        print(f"✅ {len(figures)} figures written")

    print_banner("PHASE 3: RESAMPLING AND TUNING")
    records, tuning = fit_models(train, models=models, tuned_models=tuned_models, seed=seed,
                                 quick=quick, skip_tuning=skip_tuning, n_jobs=n_jobs)

    print_banner("PHASE 4: MODEL COMPARISON")
    comparison = compare_models(records)
    print(comparison[['display_name', 'tuned', 'mean_rsq', 'mean_mae', 'mean_rmse']]
          .to_string(index=False, float_format='{:.4f}'.format))
    winner = pick_winner(comparison)
    winner_params = comparison.loc[comparison['model'] == winner, 'params'].iloc[0]
    print(f"\n✅ Winner: {display_name(winner)} (highest cross-validated R²)")

    print_banner("PHASE 5: FINAL FIT AND TEST EVALUATION")
    final = last_fit(winner, winner_params, train, test, seed=seed, quick=quick)

    print_banner("PHASE 6: REPORT")
    recipe_info = recipe_summary(final['pipeline'].named_steps['recipe'])
    paths = write_report(comparison, final, output_dir=output_dir, tuning=tuning,
                         recipe_info=recipe_info, summary=summary, figures=figures)

    os.makedirs(model_dir, exist_ok=True)
    paths['model'] = os.path.join(model_dir, f'{winner}_final.pkl')
    joblib.dump(final['pipeline'], paths['model'])
    print(f"✅ Report: {paths['report']}")
    print(f"✅ Model saved: {paths['model']}")

    return {
        'comparison': comparison,
        'winner': winner,
        'final': final,
        'tuning': tuning,
        'paths': paths,
    }
