"""
Main Execution Script
Run the complete diamond price workflow from raw data to the rendered report.
Four models (linear, elastic net, random forest, neural network) are compared
on cross-validated R², MAE and RMSE of log price; the winner is refit and
scored on the held-out test set.
"""

import argparse
import time
from datetime import datetime

from diamond_price.config import DATA_PATH, MODEL_DIR, N_FOLDS, REPORT_DIR, SEED, TEST_SIZE
from diamond_price.models import display_name
from diamond_price.pipeline import print_banner, run_eda, run_pipeline
from diamond_price.preprocessing import data_exists


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Run the diamond price modeling pipeline')
    parser.add_argument('--data', type=str, default=DATA_PATH,
                        help='Diamonds CSV, or "seaborn" for the full dataset')
    parser.add_argument('--output-dir', type=str, default=REPORT_DIR, help='Report directory')
    parser.add_argument('--model-dir', type=str, default=MODEL_DIR, help='Saved model directory')
    parser.add_argument('--test-size', type=float, default=TEST_SIZE, help='Held-out fraction')
    parser.add_argument('--folds', type=int, default=N_FOLDS, help='Cross-validation folds')
    parser.add_argument('--seed', type=int, default=SEED, help='Random seed')
    parser.add_argument('--skip-tuning', action='store_true',
                        help='Cross-validate every model with default hyperparameters')
    parser.add_argument('--quick', action='store_true',
                        help='Small grids, fewer trees and epochs')
    parser.add_argument('--only-eda', action='store_true',
                        help='Only write the exploratory figures')
    return parser.parse_args(argv)


def main(argv=None):
    """Execute complete pipeline."""
    args = parse_args(argv)
    start_time = time.time()

    if not data_exists(args.data):
        raise FileNotFoundError(f"Data file not found: {args.data}")

    if args.only_eda:
        print_banner("EXPLORATORY FIGURES ONLY")
        return run_eda(args.data, output_dir=args.output_dir, test_size=args.test_size,
                       n_folds=args.folds, seed=args.seed)

    print_banner("DIAMOND PRICE MODELS")
    print(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"Data: {args.data}")
    print(f"Target: log(price), {args.folds}-fold CV, {args.test_size:.0%} held out")

    result = run_pipeline(
        data_path=args.data,
        output_dir=args.output_dir,
        model_dir=args.model_dir,
        test_size=args.test_size,
        n_folds=args.folds,
        seed=args.seed,
        quick=args.quick,
        skip_tuning=args.skip_tuning,
    )

    elapsed_time = time.time() - start_time
    minutes = int(elapsed_time // 60)
    seconds = int(elapsed_time % 60)

    metrics = result['final']['metrics_price']
    print_banner("PIPELINE COMPLETE!")
    print(f"Total execution time: {minutes}m {seconds}s")
    print(f"Winner: {display_name(result['winner'])}")
    print(f"  Test R² (log): {result['final']['metrics_log']['rsq']:.4f}")
    print(f"  Test MAE: ${metrics['mae']:,.2f}")
    print(f"  Test RMSE: ${metrics['rmse']:,.2f}")
    print(f"Report: {result['paths']['report']}")
    return result


if __name__ == "__main__":
    main()
