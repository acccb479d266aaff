"""
Data Loading and Feature Engineering
Load, validate, clean, add derived features, log transform, split and create folds
"""

import os

import numpy as np
import pandas as pd
from sklearn.model_selection import StratifiedKFold, train_test_split

from diamond_price.config import (
    CATEGORICAL_COLS,
    CATEGORY_LEVELS,
    DATA_PATH,
    FOLD_COL,
    N_FOLDS,
    NUMERIC_COLS,
    REQUIRED_COLS,
    SEED,
    TARGET,
    TARGET_LOG,
    TEST_SIZE,
)


def load_diamonds(path=DATA_PATH):
    """
    Load the diamonds table.

    Args:
        path: CSV file path, or "seaborn" to load seaborn's copy of the full dataset

    Returns:
        DataFrame with ordered categoricals for cut, color and clarity
    """
    if path == "seaborn":
        import seaborn as sns
        df = sns.load_dataset("diamonds")
    else:
        df = pd.read_csv(path)

    # Some exports carry the R row index as an unnamed first column
    df = df.drop(columns=[c for c in df.columns if c.startswith("Unnamed")])

    missing = [c for c in REQUIRED_COLS if c not in df.columns]
    if missing:
        raise ValueError(f"Diamonds data is missing required columns: {missing}")

    for col in CATEGORICAL_COLS:
        df[col] = pd.Categorical(
            df[col].astype(str), categories=CATEGORY_LEVELS[col], ordered=True
        )

    print(f"Loaded diamonds: {df.shape}")
    return df[REQUIRED_COLS].copy()


def clean_diamonds(df):
    """Drop incomplete rows, rows with a zero dimension and non-positive prices."""
    n_before = len(df)

    df = df.dropna(subset=REQUIRED_COLS)
    n_missing = n_before - len(df)

    zero_dims = (df["x"] == 0) | (df["y"] == 0) | (df["z"] == 0)
    df = df[~zero_dims]

    bad_price = df[TARGET] <= 0
    df = df[~bad_price].reset_index(drop=True)

    print(f"  Removed {n_missing} incomplete rows, {int(zero_dims.sum())} zero-dimension rows, "
          f"{int(bad_price.sum())} non-positive prices")

    if df.empty:
        raise ValueError("No diamonds left after cleaning")

    assert n_before == len(df) + n_missing + zero_dims.sum() + bad_price.sum(), \
        "Cleaning did not account for every removed row"
    return df


def add_features(df):
    """
    Add derived columns.

    Features:
    - volume: x * y * z (mm^3)
    - price_log: natural log of price, the modeling target
    """
    if (df[TARGET] <= 0).any():
        raise ValueError("price must be positive to take its log")

    df = df.copy()
    df["volume"] = df["x"] * df["y"] * df["z"]
    df[TARGET_LOG] = np.log(df[TARGET])
    return df


def _price_bins(df, q=10):
    return pd.qcut(df[TARGET_LOG], q=q, labels=False, duplicates="drop")


def split_data(df, test_size=TEST_SIZE, seed=SEED):
    """
    Train/test partition stratified on deciles of log price.

    Returns:
        (train, test) with fresh indexes
    """
    train, test = train_test_split(
        df,
        test_size=test_size,
        random_state=seed,
        stratify=_price_bins(df),
    )

    assert len(train.index.intersection(test.index)) == 0, "Train and test overlap"
    assert len(train) + len(test) == len(df), "Train and test do not cover the data"

    print(f"Train size: {len(train)}, Test size: {len(test)}")
    return train.reset_index(drop=True), test.reset_index(drop=True)


def assign_folds(train, n_folds=N_FOLDS, seed=SEED):
    """Add a fold column from StratifiedKFold on binned log price."""
    train = train.reset_index(drop=True)
    bins = _price_bins(train)

    skf = StratifiedKFold(n_splits=n_folds, shuffle=True, random_state=seed)
    train[FOLD_COL] = -1

    for fold_id, (_, val_idx) in enumerate(skf.split(train, bins)):
        train.loc[val_idx, FOLD_COL] = fold_id

    assert train[FOLD_COL].between(0, n_folds - 1).all(), "Every row needs exactly one fold"

    for fold in range(n_folds):
        fold_data = train[train[FOLD_COL] == fold]
        print(f"  Fold {fold}: {len(fold_data)} samples, "
              f"median price {fold_data[TARGET].median():.0f}")

    return train


def describe_data(df):
    """Summary tables for the exploratory section of the report."""
    summary = {
        "shape": df.shape,
        "numeric": df[[c for c in NUMERIC_COLS + [TARGET] if c in df.columns]].describe().T,
        "categorical": {col: df[col].value_counts().sort_index() for col in CATEGORICAL_COLS},
        "price_skew": float(df[TARGET].skew()),
    }
    if TARGET_LOG in df.columns:
        summary["price_log_skew"] = float(df[TARGET_LOG].skew())
    return summary


def prepare_data(path=DATA_PATH, test_size=TEST_SIZE, n_folds=N_FOLDS, seed=SEED):
    """
    Preprocessing phase:
    1. Load the diamonds table
    2. Clean invalid rows
    3. Add derived features and the log target
    4. Split train/test
    5. Create folds on the training set
    """
    print("\n[1/5] Loading data...")
    df = load_diamonds(path)

    print("\n[2/5] Cleaning...")
    df = clean_diamonds(df)

    print("\n[3/5] Adding features and log transforming price...")
    df = add_features(df)
    print(f"  Price skewness: {df[TARGET].skew():.2f} -> log price skewness: {df[TARGET_LOG].skew():.2f}")

    print("\n[4/5] Splitting train/test...")
    train, test = split_data(df, test_size=test_size, seed=seed)

    print("\n[5/5] Creating folds...")
    train = assign_folds(train, n_folds=n_folds, seed=seed)

    print("\n✅ PREPROCESSING COMPLETE!")
    return df, train, test


def get_feature_columns():
    """Return list of predictor column names."""
    return NUMERIC_COLS + CATEGORICAL_COLS


def data_exists(path=DATA_PATH):
    return path == "seaborn" or os.path.exists(path)
