import numpy as np
import pytest
from sklearn.base import clone
from sklearn.exceptions import NotFittedError

from diamond_price.neural_net import MLP, PriceDataset, TorchMLPRegressor


@pytest.fixture
def linear_data():
    rng = np.random.default_rng(0)
    X = rng.normal(size=(400, 3))
    y = 5.0 + X @ np.array([1.5, -2.0, 0.5]) + rng.normal(scale=0.05, size=400)
    return X, y


def test_dataset_items():
    ds = PriceDataset(np.zeros((4, 2)), np.arange(4))

    assert len(ds) == 4
    item = ds[2]
    assert item['features'].shape == (2,)
    assert float(item['target']) == 2.0
    assert 'target' not in PriceDataset(np.zeros((4, 2)))[0]


def test_mlp_forward_shape():
    import torch

    model = MLP(n_features=3, hidden_units=4)
    out = model(torch.zeros(5, 3))

    assert out.shape == (5,)


def test_regressor_learns_linear_signal(linear_data):
    X, y = linear_data
    model = TorchMLPRegressor(hidden_units=16, epochs=60, learning_rate=1e-2,
                              weight_decay=1e-4, random_state=0)

    model.fit(X, y)
    preds = model.predict(X)

    assert preds.shape == (len(y),)
    assert model.score(X, y) > 0.95
    assert model.loss_curve_[-1] < model.loss_curve_[0]


def test_regressor_is_deterministic(linear_data):
    X, y = linear_data
    kwargs = dict(hidden_units=4, epochs=5, random_state=3)

    a = TorchMLPRegressor(**kwargs).fit(X, y).predict(X)
    b = TorchMLPRegressor(**kwargs).fit(X, y).predict(X)

    np.testing.assert_allclose(a, b, rtol=1e-5)


def test_regressor_supports_clone_and_set_params():
    model = TorchMLPRegressor(hidden_units=7)
    copy = clone(model).set_params(weight_decay=0.5)

    assert copy.get_params()['hidden_units'] == 7
    assert copy.weight_decay == 0.5
    assert model.weight_decay != 0.5


def test_predict_before_fit():
    with pytest.raises(NotFittedError):
        TorchMLPRegressor().predict(np.zeros((2, 3)))


def test_fit_rejects_mismatched_lengths():
    with pytest.raises(ValueError, match="rows"):
        TorchMLPRegressor().fit(np.zeros((3, 2)), np.zeros(4))
