# config.py
DATA_PATH = "Data/diamonds.csv"
MODEL_DIR = "models"
REPORT_DIR = "reports"
SEED = 42
TEST_SIZE = 0.25
N_FOLDS = 5
NUM_JOBS = -1  # all CPUs

# Columns
TARGET = "price"
TARGET_LOG = "price_log"
FOLD_COL = "fold"
NUMERIC_COLS = ["carat", "depth", "table", "x", "y", "z", "volume"]
CATEGORICAL_COLS = ["cut", "color", "clarity"]
REQUIRED_COLS = ["carat", "cut", "color", "clarity", "depth", "table", "price", "x", "y", "z"]

# Ordered quality grades, worst to best
CATEGORY_LEVELS = {
    "cut": ["Fair", "Good", "Very Good", "Premium", "Ideal"],
    "color": ["J", "I", "H", "G", "F", "E", "D"],
    "clarity": ["I1", "SI2", "SI1", "VS2", "VS1", "VVS2", "VVS1", "IF"],
}

# Recipe thresholds
CORR_THRESHOLD = 0.9
NZV_FREQ_CUT = 95 / 5
NZV_UNIQUE_CUT = 10

# Models
MODEL_NAMES = ["linear", "elastic_net", "random_forest", "neural_net"]
TUNED_MODELS = ["elastic_net", "random_forest"]

PARAM_GRIDS = {
    "elastic_net": {
        "model__alpha": [1e-4, 1e-3, 1e-2, 1e-1, 1.0],
        "model__l1_ratio": [0.0, 0.25, 0.5, 0.75, 1.0],
    },
    "random_forest": {
        "model__max_features": [0.33, 0.66, 1.0],
        "model__min_samples_leaf": [1, 5, 10],
    },
    "neural_net": {
        "model__hidden_units": [5, 10, 20],
        "model__weight_decay": [1e-4, 1e-2],
    },
}

QUICK_PARAM_GRIDS = {
    "elastic_net": {
        "model__alpha": [1e-3, 1e-1],
        "model__l1_ratio": [0.0, 1.0],
    },
    "random_forest": {
        "model__max_features": [0.5, 1.0],
        "model__min_samples_leaf": [5],
    },
    "neural_net": {
        "model__hidden_units": [10],
        "model__weight_decay": [1e-2],
    },
}

RF_N_ESTIMATORS = 500
QUICK_RF_N_ESTIMATORS = 50

NN_PARAMS = {
    "hidden_units": 10,
    "weight_decay": 1e-2,
    "dropout": 0.0,
    "epochs": 100,
    "batch_size": 64,
    "learning_rate": 1e-2,
}
QUICK_NN_EPOCHS = 20
