import numpy as np
import pandas as pd
import torch
from pandas.api.types import is_bool_dtype, is_numeric_dtype
from sklearn.model_selection import train_test_split
from torch.utils.data import DataLoader, TensorDataset

from .config import NUM_CLASSES, PIXEL_MAX


def load_csv(path, expected_columns=None):
    """
    Load a Kaggle style CSV file into a numeric table

    The header row is discarded. Rows are samples, columns are features.

    Args:
        path: Path to the CSV file
        expected_columns: Required number of columns (not checked if None)

    Returns:
        np.ndarray: Table of shape (num_samples, num_columns)

    Raises:
        IOError: If the file is missing, unreadable or malformed
    """
    try:
        frame = pd.read_csv(path, header=0)
    except FileNotFoundError as e:
        raise IOError(f"Cannot open file '{path}'") from e
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise IOError(f"Malformed CSV file '{path}': {e}") from e

    if frame.empty:
        raise IOError(f"No data rows in '{path}'")

    non_numeric = [
        col
        for col in frame.columns
        if not is_numeric_dtype(frame[col]) or is_bool_dtype(frame[col])
    ]
    if non_numeric:
        raise IOError(f"Non-numeric values in '{path}', columns: {non_numeric[:5]}")

    if frame.isnull().values.any():
        raise IOError(f"Missing values in '{path}'")

    if expected_columns is not None and frame.shape[1] != expected_columns:
        raise IOError(
            f"Expected {expected_columns} columns in '{path}', found {frame.shape[1]}"
        )

    return frame.to_numpy(dtype=np.float64)


def load_training_set(path):
    """Load a labeled CSV whose first column holds digits 0-9"""
    table = load_csv(path)

    if table.shape[1] < 2:
        raise IOError(f"'{path}' needs a label column and at least one feature")

    labels = table[:, 0]
    if np.any(labels != np.round(labels)) or labels.min() < 0 or labels.max() >= NUM_CLASSES:
        raise IOError(f"Labels in '{path}' must be integers in 0..{NUM_CLASSES - 1}")

    return table


def split_dataset(data, ratio=0.1, seed=42):
    """
    Randomly split a table into training and validation rows

    Args:
        data: Table with one sample per row
        ratio: Fraction of rows that go to the validation part
        seed: Random seed for reproducibility

    Returns:
        tuple: (train, valid)
    """
    if not 0.0 < ratio < 1.0:
        raise ValueError(f"ratio must be in (0, 1), got {ratio}")

    train, valid = train_test_split(data, test_size=ratio, random_state=seed, shuffle=True)
    return train, valid


def normalize(features):
    """Scale pixel intensities from 0-255 to 0-1"""
    return features / PIXEL_MAX


def shift_labels(labels):
    """Map digits 0-9 to class ids 1-10"""
    return np.asarray(labels).astype(np.int64) + 1


def unshift_labels(labels):
    """Map class ids 1-10 back to digits 0-9"""
    return np.asarray(labels).astype(np.int64) - 1


def split_features_labels(table):
    """
    Separate a labeled table into normalized features and class ids

    Returns:
        tuple: (features, labels)
    """
    return normalize(table[:, 1:]), shift_labels(table[:, 0])


def to_tensors(features, labels):
    return (
        torch.as_tensor(features, dtype=torch.float32),
        torch.as_tensor(labels, dtype=torch.long),
    )


def get_dataloaders(train_x, train_y, valid_x, valid_y, batch_size=64, shuffle=True):
    """
    Wrap training and validation arrays into dataloaders

    Args:
        train_x, train_y: Training features and class ids
        valid_x, valid_y: Validation features and class ids
        batch_size: Training batch size
        shuffle: Draw training batches in random order

    Returns:
        tuple: (train_loader, valid_loader)
    """
    train_dataset = TensorDataset(*to_tensors(train_x, train_y))
    valid_dataset = TensorDataset(*to_tensors(valid_x, valid_y))

    train_loader = DataLoader(train_dataset, batch_size=batch_size, shuffle=shuffle)
    valid_loader = DataLoader(valid_dataset, batch_size=batch_size, shuffle=False)

    return train_loader, valid_loader
