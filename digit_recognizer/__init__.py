"""
Digit recognizer package: feed-forward network training and Kaggle submission
"""

from .config import Config
from .model import DigitRecognizerNet
from .dataset import load_csv, split_dataset, get_dataloaders
from .train import Trainer, train_epoch, test_epoch
from .callbacks import EarlyStopAtMinLoss, StoreBestCoordinates, PrintLoss
from .utils import accuracy, evaluate_model, predict_labels, save_predictions
from .recognizer import run_digit_recognizer

__all__ = [
    'Config', 'DigitRecognizerNet', 'load_csv', 'split_dataset', 'get_dataloaders',
    'Trainer', 'train_epoch', 'test_epoch', 'EarlyStopAtMinLoss', 'StoreBestCoordinates',
    'PrintLoss', 'accuracy', 'evaluate_model', 'predict_labels', 'save_predictions',
    'run_digit_recognizer',
]
