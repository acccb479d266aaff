"""
Neural Network Regressor
- Single hidden layer MLP (ReLU) in PyTorch
- Weight decay penalty via AdamW
- Target standardised internally, predictions returned on the caller's scale
- scikit-learn estimator interface so it fits in the recipe pipeline and GridSearchCV
"""

import numpy as np
import torch
import torch.nn as nn
from sklearn.base import BaseEstimator, RegressorMixin
from sklearn.utils.validation import check_is_fitted
from torch.optim import AdamW
from torch.utils.data import DataLoader, Dataset
from tqdm import tqdm


class PriceDataset(Dataset):
    """PyTorch Dataset over a preprocessed feature matrix."""

    def __init__(self, features, targets=None):
        self.features = torch.tensor(np.asarray(features, dtype=np.float32))
        self.targets = None
        if targets is not None:
            self.targets = torch.tensor(np.asarray(targets, dtype=np.float32))

    def __len__(self):
        return len(self.features)

    def __getitem__(self, idx):
        item = {'features': self.features[idx]}
        if self.targets is not None:
            item['target'] = self.targets[idx]
        return item


class MLP(nn.Module):
    """One hidden layer feed-forward network with a linear output."""

    def __init__(self, n_features, hidden_units=10, dropout=0.0):
        super().__init__()
        self.hidden = nn.Linear(n_features, hidden_units)
        self.activation = nn.ReLU()
        self.dropout = nn.Dropout(dropout)
        self.regressor = nn.Linear(hidden_units, 1)

    def forward(self, features):
        x = self.dropout(self.activation(self.hidden(features)))
        return self.regressor(x).squeeze(-1)


class TorchMLPRegressor(RegressorMixin, BaseEstimator):
    """
    MLP regressor trained with MSELoss and AdamW.

    Args:
        hidden_units: Width of the hidden layer
        weight_decay: L2 penalty applied by AdamW
        dropout: Dropout rate after the hidden layer
        epochs: Number of passes over the training data
        batch_size: Mini-batch size
        learning_rate: Optimizer learning rate
        random_state: Seed for weight init and batch shuffling
        verbose: Show a tqdm progress bar over epochs
    """

    def __init__(self, hidden_units=10, weight_decay=1e-2, dropout=0.0, epochs=100,
                 batch_size=64, learning_rate=1e-2, random_state=42, verbose=False):
        self.hidden_units = hidden_units
        self.weight_decay = weight_decay
        self.dropout = dropout
        self.epochs = epochs
        self.batch_size = batch_size
        self.learning_rate = learning_rate
        self.random_state = random_state
        self.verbose = verbose

    def fit(self, X, y):
        X = np.asarray(X, dtype=np.float32)
        y = np.asarray(y, dtype=np.float32).ravel()
        if len(X) != len(y):
            raise ValueError(f"X has {len(X)} rows but y has {len(y)}")

        self.n_features_in_ = X.shape[1]
        self.y_mean_ = float(y.mean())
        self.y_std_ = float(y.std()) or 1.0
        y_scaled = (y - self.y_mean_) / self.y_std_

        torch.manual_seed(self.random_state)
        generator = torch.Generator().manual_seed(self.random_state)
        loader = DataLoader(PriceDataset(X, y_scaled), batch_size=self.batch_size,
                            shuffle=True, generator=generator)

        self.device_ = torch.device('cuda' if torch.cuda.is_available() else 'cpu')
        model = MLP(self.n_features_in_, self.hidden_units, self.dropout).to(self.device_)
        optimizer = AdamW(model.parameters(), lr=self.learning_rate,
                          weight_decay=self.weight_decay)
        criterion = nn.MSELoss()

        self.loss_curve_ = []
        epochs = tqdm(range(self.epochs), desc='Training MLP', disable=not self.verbose)
        for _ in epochs:
            model.train()
            epoch_loss = 0.0
            for batch in loader:
                features = batch['features'].to(self.device_)
                target = batch['target'].to(self.device_)

                optimizer.zero_grad()
                loss = criterion(model(features), target)
                loss.backward()
                torch.nn.utils.clip_grad_norm_(model.parameters(), 1.0)
                optimizer.step()

                epoch_loss += loss.item() * len(target)

            self.loss_curve_.append(epoch_loss / len(X))
            epochs.set_postfix({'loss': f'{self.loss_curve_[-1]:.4f}'})

        self.model_ = model
        return self

    def predict(self, X):
        check_is_fitted(self, 'model_')
        X = np.asarray(X, dtype=np.float32)
        loader = DataLoader(PriceDataset(X), batch_size=1024, shuffle=False)

        predictions = []
        self.model_.eval()
        with torch.no_grad():
            for batch in loader:
                preds = self.model_(batch['features'].to(self.device_))
                predictions.append(preds.cpu().numpy())

        scaled = np.concatenate(predictions) if predictions else np.empty(0, dtype=np.float32)
        return scaled.astype(np.float64) * self.y_std_ + self.y_mean_
