import numpy as np
import pandas as pd
import pytest

from digit_recognizer.config import Config

NUM_PIXELS = 784


def write_digits_csv(path, num_samples, labeled=True, seed=0):
    """Write a Kaggle style CSV with random pixels (and random labels)"""
    rng = np.random.RandomState(seed)
    pixels = rng.randint(0, 256, size=(num_samples, NUM_PIXELS))
    frame = pd.DataFrame(pixels, columns=[f"pixel{i}" for i in range(NUM_PIXELS)])
    if labeled:
        frame.insert(0, "label", rng.randint(0, 10, size=num_samples))
    frame.to_csv(path, index=False)
    return path


@pytest.fixture
def train_csv(tmp_path):
    """Header + 99 labeled samples, 785 columns"""
    return str(write_digits_csv(tmp_path / "train.csv", 99))


@pytest.fixture
def test_csv(tmp_path):
    """Header + 1 unlabeled sample"""
    return str(write_digits_csv(tmp_path / "test.csv", 1, labeled=False, seed=1))


@pytest.fixture
def fast_config(tmp_path, train_csv, test_csv):
    return Config(
        training_dataset=train_csv,
        testing_datatest=test_csv,
        prediction_result=str(tmp_path / "out" / "results.csv"),
        ratio=0.2,
        batch_size=16,
        patience=2,
        max_epochs=3,
        device="cpu",
        verbose=False,
    )
