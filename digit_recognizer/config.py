from dataclasses import dataclass
from typing import Optional

# Network topology
HIDDEN1 = 200
HIDDEN2 = 100
NUM_CLASSES = 10
DROPOUT_RATE = 0.2

# Adam update rule
STEP_SIZE = 5e-3
ADAM_EPS = 1e-8
ADAM_BETAS = (0.9, 0.999)

# 8-bit pixel intensities
PIXEL_MAX = 255.0

SUBMISSION_HEADER = ("ImageId", "Label")

MONITORS = ("loss", "val_loss")


@dataclass
class Config:
    """
    Run configuration for the digit recognizer pipeline

    Args:
        training_dataset: Path to the labeled training CSV
        testing_datatest: Path to the unlabeled test CSV
        prediction_result: Path of the submission CSV to write
        ratio: Fraction of the training CSV held out for validation
        batch_size: Number of samples per optimizer step
        seed: Seed for splitting, shuffling, dropout and initialization
        shuffle: Whether training batches are drawn in random order
        patience: Epochs without improvement before early stopping fires
        monitor: Metric watched by early stopping ("loss" or "val_loss")
        max_epochs: Hard epoch limit, 0 means train until early stopping
        reset_optimizer: Recreate the optimizer state on every fit call
        restore_digit_labels: Save predictions as digits 0-9 instead of 1-10
        device: Torch device name (auto-detected if None)
        verbose: Print per-batch progress
    """

    training_dataset: str = "../Kaggle/data/train.csv"
    testing_datatest: str = "../Kaggle/data/test.csv"
    prediction_result: str = "../Kaggle/results.csv"
    ratio: float = 0.1
    batch_size: int = 64
    seed: int = 42
    shuffle: bool = True
    patience: int = 10
    monitor: str = "loss"
    max_epochs: int = 0
    reset_optimizer: bool = False
    restore_digit_labels: bool = False
    device: Optional[str] = None
    verbose: bool = True

    def __post_init__(self):
        if not 0.0 < self.ratio < 1.0:
            raise ValueError(f"ratio must be in (0, 1), got {self.ratio}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.patience < 1:
            raise ValueError(f"patience must be positive, got {self.patience}")
        if self.max_epochs < 0:
            raise ValueError(f"max_epochs must be >= 0, got {self.max_epochs}")
        if self.monitor not in MONITORS:
            raise ValueError(
                f"monitor must be one of {', '.join(MONITORS)}, got '{self.monitor}'"
            )
