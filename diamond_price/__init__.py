"""
Diamond Price Modeling
======================

A tabular regression pipeline for predicting diamond prices from their cut,
color, clarity and physical dimensions.

Modules:
--------
- preprocessing: Data loading, cleaning, feature engineering, splits and folds
- recipe: Feature preprocessing recipe (dummy, nzv, corr, normalize)
- models: Model factories and hyperparameter grids
- neural_net: PyTorch MLP regressor with a scikit-learn interface
- tuning: Cross-validation and grid search
- evaluation: Metrics, model comparison and the final test fit
- report: Figures and the rendered report
- pipeline: End-to-end workflow
"""

__version__ = "1.0.0"
