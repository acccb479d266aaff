"""
Feature Preprocessing Recipe
dummy -> nzv -> corr -> normalize, fit inside every resample so no fold leaks
"""

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.compose import ColumnTransformer
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler
from sklearn.utils.validation import check_is_fitted

from diamond_price.config import (
    CATEGORICAL_COLS,
    CORR_THRESHOLD,
    NUMERIC_COLS,
    NZV_FREQ_CUT,
    NZV_UNIQUE_CUT,
)


def _as_frame(X, columns=None):
    if isinstance(X, pd.DataFrame):
        return X
    X = np.asarray(X)
    if columns is None:
        columns = [f"x{i}" for i in range(X.shape[1])]
    return pd.DataFrame(X, columns=columns)


class NearZeroVarianceFilter(TransformerMixin, BaseEstimator):
    """
    Drop columns that are constant or nearly so.

    A column is near-zero variance when the ratio of its most common value's
    count to the second most common exceeds freq_cut AND the percentage of
    distinct values is below unique_cut.
    """

    def __init__(self, freq_cut=NZV_FREQ_CUT, unique_cut=NZV_UNIQUE_CUT):
        self.freq_cut = freq_cut
        self.unique_cut = unique_cut

    def fit(self, X, y=None):
        if self.freq_cut <= 1:
            raise ValueError(f"freq_cut must be greater than 1, got {self.freq_cut}")
        if not 0 <= self.unique_cut <= 100:
            raise ValueError(f"unique_cut must be in [0, 100], got {self.unique_cut}")

        X = _as_frame(X)
        self.feature_names_in_ = np.asarray(X.columns, dtype=object)
        self.n_features_in_ = X.shape[1]

        removed = []
        for col in X.columns:
            counts = X[col].value_counts(dropna=False)
            if len(counts) <= 1:
                removed.append(col)
                continue
            freq_ratio = counts.iloc[0] / counts.iloc[1]
            unique_pct = 100 * len(counts) / len(X)
            if freq_ratio > self.freq_cut and unique_pct < self.unique_cut:
                removed.append(col)

        self.removed_ = removed
        self.selected_ = [c for c in X.columns if c not in removed]
        return self

    def transform(self, X):
        check_is_fitted(self, "selected_")
        X = _as_frame(X, columns=self.feature_names_in_)
        return X[self.selected_]

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, "selected_")
        return np.asarray(self.selected_, dtype=object)


class CorrelationFilter(TransformerMixin, BaseEstimator):
    """
    Drop columns until no pair has absolute correlation above threshold.

    For the most correlated remaining pair, the member with the larger mean
    absolute correlation against every other remaining column is dropped.
    """

    def __init__(self, threshold=CORR_THRESHOLD):
        self.threshold = threshold

    def fit(self, X, y=None):
        if not 0 < self.threshold <= 1:
            raise ValueError(f"threshold must be in (0, 1], got {self.threshold}")

        X = _as_frame(X)
        self.feature_names_in_ = np.asarray(X.columns, dtype=object)
        self.n_features_in_ = X.shape[1]

        values = X.astype(float).corr().abs().fillna(0.0).to_numpy(copy=True)
        np.fill_diagonal(values, 0.0)
        corr = pd.DataFrame(values, index=X.columns, columns=X.columns)

        removed = []
        while len(corr) > 1:
            values = corr.to_numpy()
            i, j = np.unravel_index(np.argmax(values), values.shape)
            if values[i, j] <= self.threshold:
                break
            mean_corr = corr.mean(axis=1)
            a, b = corr.index[i], corr.index[j]
            drop = a if mean_corr.loc[a] > mean_corr.loc[b] else b
            removed.append(drop)
            corr = corr.drop(index=drop, columns=drop)

        self.removed_ = removed
        self.selected_ = [c for c in X.columns if c not in removed]
        return self

    def transform(self, X):
        check_is_fitted(self, "selected_")
        X = _as_frame(X, columns=self.feature_names_in_)
        return X[self.selected_]

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, "selected_")
        return np.asarray(self.selected_, dtype=object)


def build_recipe(numeric=None, categorical=None, corr_threshold=CORR_THRESHOLD,
                 freq_cut=NZV_FREQ_CUT, unique_cut=NZV_UNIQUE_CUT):
    """
    Build the preprocessing recipe.

    Args:
        numeric: Numeric predictor columns (passed through, then filtered and scaled)
        categorical: Categorical predictor columns (one-hot encoded)
        corr_threshold: Absolute correlation above which one of a pair is dropped
        freq_cut: Most/second most common value ratio for near-zero variance
        unique_cut: Percent distinct values below which a column may be near-zero variance

    Returns:
        Unfitted sklearn Pipeline producing a pandas DataFrame
    """
    numeric = list(NUMERIC_COLS if numeric is None else numeric)
    categorical = list(CATEGORICAL_COLS if categorical is None else categorical)

    dummy = ColumnTransformer(
        [
            ("onehot", OneHotEncoder(handle_unknown="ignore", sparse_output=False), categorical),
            ("numeric", "passthrough", numeric),
        ],
        remainder="drop",
        verbose_feature_names_out=False,
    )

    recipe = Pipeline([
        ("dummy", dummy),
        ("nzv", NearZeroVarianceFilter(freq_cut=freq_cut, unique_cut=unique_cut)),
        ("corr", CorrelationFilter(threshold=corr_threshold)),
        ("normalize", StandardScaler()),
    ])
    recipe.set_output(transform="pandas")
    return recipe


def recipe_summary(recipe):
    """Columns removed by each filtering step of a fitted recipe."""
    return {
        "nzv": list(recipe.named_steps["nzv"].removed_),
        "corr": list(recipe.named_steps["corr"].removed_),
        "features": list(recipe.named_steps["corr"].selected_),
    }
