import os
import random

import numpy as np
import pandas as pd
import torch

from .config import SUBMISSION_HEADER


def set_seed(seed):
    """Set random seed for reproducibility."""
    random.seed(seed)
    np.random.seed(seed)
    torch.manual_seed(seed)
    if torch.cuda.is_available():
        torch.cuda.manual_seed_all(seed)
        torch.backends.cudnn.deterministic = True
        torch.backends.cudnn.benchmark = False


def get_device(name=None):
    if name is not None:
        return torch.device(name)
    return torch.device("cuda" if torch.cuda.is_available() else "cpu")


def to_class_index(labels):
    """Class ids 1-10 to output indices 0-9"""
    return labels - 1


def get_labels(output):
    """Class id (1-based) with the highest log-probability for every row"""
    return output.argmax(dim=1) + 1


def accuracy(predicted, labels):
    """
    Percentage of predictions equal to the ground truth

    Args:
        predicted: Predicted class ids
        labels: Ground truth class ids of the same length

    Returns:
        float: Accuracy in [0, 100]
    """
    predicted = torch.as_tensor(predicted).flatten()
    labels = torch.as_tensor(labels).flatten()

    if predicted.numel() == 0:
        raise ValueError("Cannot compute accuracy of an empty prediction")
    if predicted.numel() != labels.numel():
        raise ValueError(
            f"Got {predicted.numel()} predictions for {labels.numel()} labels"
        )

    correct = (predicted.to(labels.dtype) == labels).sum().item()
    return 100.0 * correct / labels.numel()


def predict(model, device, features, batch_size=1000):
    """
    Forward pass in evaluation mode

    Args:
        model: Trained network
        device: Device the model lives on
        features: Tensor or array of shape (num_samples, num_features)
        batch_size: Number of samples per forward pass

    Returns:
        torch.Tensor: Log-probabilities of shape (num_samples, num_classes), on CPU
    """
    model.eval()
    features = torch.as_tensor(features, dtype=torch.float32)

    outputs = []
    with torch.no_grad():
        for start in range(0, len(features), batch_size):
            batch = features[start : start + batch_size].to(device)
            outputs.append(model(batch).cpu())

    return torch.cat(outputs)


def predict_labels(model, device, features, batch_size=1000):
    return get_labels(predict(model, device, features, batch_size))


def evaluate_model(model, device, data_loader):
    """Accuracy of the model over a dataset, in percent"""
    model.eval()
    predicted = []
    targets = []

    with torch.no_grad():
        for data, target in data_loader:
            outputs = model(data.to(device))
            predicted.append(get_labels(outputs).cpu())
            targets.append(target)

    if not targets:
        raise ValueError("Cannot evaluate on an empty dataset")

    return accuracy(torch.cat(predicted), torch.cat(targets))


def save_predictions(path, labels, header=SUBMISSION_HEADER):
    """
    Write predictions in Kaggle submission format

    The first column is the 1-based position of the sample, the second the
    predicted label.
    """
    labels = np.asarray(labels).astype(np.int64).ravel()
    id_column, label_column = header

    submission = pd.DataFrame(
        {id_column: np.arange(1, len(labels) + 1), label_column: labels}
    )

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    submission.to_csv(path, index=False)

    return submission
