import torch
import torch.nn.functional as F
import torch.optim as optim

from .config import ADAM_BETAS, ADAM_EPS, STEP_SIZE
from .utils import get_labels, to_class_index


def nll_loss(output, target, reduction="mean"):
    """Negative log-likelihood of 1-based class ids"""
    return F.nll_loss(output, to_class_index(target), reduction=reduction)


def train_epoch(model, device, train_loader, optimizer, epoch, verbose=True):
    """Train for one epoch"""
    model.train()
    train_loss = 0
    correct = 0

    for batch_idx, (data, target) in enumerate(train_loader):
        data, target = data.to(device), target.to(device)

        optimizer.zero_grad()
        output = model(data)
        loss = nll_loss(output, target)
        loss.backward()
        optimizer.step()

        train_loss += loss.item()
        correct += (get_labels(output) == target).sum().item()

        if verbose and batch_idx % 100 == 0:
            print(
                f"Train Epoch: {epoch} [{batch_idx * len(data)}/{len(train_loader.dataset)} "
                f"({100.0 * batch_idx / len(train_loader):.0f}%)]\tLoss: {loss.item():.6f}"
            )

    train_loss /= len(train_loader)
    accuracy = 100.0 * correct / len(train_loader.dataset)

    return train_loss, accuracy


def test_epoch(model, device, test_loader):
    """Mean loss and accuracy without dropout or gradients"""
    model.eval()
    test_loss = 0
    correct = 0

    with torch.no_grad():
        for data, target in test_loader:
            data, target = data.to(device), target.to(device)
            output = model(data)
            test_loss += nll_loss(output, target, reduction="sum").item()
            correct += (get_labels(output) == target).sum().item()

    test_loss /= len(test_loader.dataset)
    accuracy = 100.0 * correct / len(test_loader.dataset)

    return test_loss, accuracy


class Trainer:
    """
    Mini-batch Adam training driven by callbacks

    The optimizer is created lazily and reused by later `fit` calls, so
    moment estimates carry over between training stages unless
    `reset_optimizer` is set.
    """

    def __init__(
        self,
        model,
        device,
        step_size=STEP_SIZE,
        betas=ADAM_BETAS,
        eps=ADAM_EPS,
        reset_optimizer=False,
        verbose=True,
    ):
        self.model = model
        self.device = device
        self.step_size = step_size
        self.betas = betas
        self.eps = eps
        self.reset_optimizer = reset_optimizer
        self.verbose = verbose
        self.optimizer = None

    def _make_optimizer(self):
        return optim.Adam(
            self.model.parameters(), lr=self.step_size, betas=self.betas, eps=self.eps
        )

    def fit(self, train_loader, valid_loader=None, callbacks=(), max_epochs=0):
        """
        Train until a callback stops the loop

        Args:
            train_loader: Loader over (features, class id) batches
            valid_loader: Optional loader used for val_loss/val_accuracy
            callbacks: Sequence of Callback objects
            max_epochs: Hard epoch limit, 0 means no limit

        Returns:
            dict: Per-epoch history of loss, accuracy, val_loss, val_accuracy
        """
        if self.optimizer is None or self.reset_optimizer:
            self.optimizer = self._make_optimizer()

        history = {"loss": [], "accuracy": [], "val_loss": [], "val_accuracy": []}

        for callback in callbacks:
            callback.on_train_begin(self.model)

        epoch = 0
        while not max_epochs or epoch < max_epochs:
            epoch += 1
            loss, acc = train_epoch(
                self.model,
                self.device,
                train_loader,
                self.optimizer,
                epoch,
                verbose=self.verbose,
            )
            logs = {"loss": loss, "accuracy": acc, "val_loss": None, "val_accuracy": None}

            if valid_loader is not None:
                logs["val_loss"], logs["val_accuracy"] = test_epoch(
                    self.model, self.device, valid_loader
                )

            for key, value in logs.items():
                history[key].append(value)

            # Every callback sees the epoch even when an earlier one stops
            stop = [callback.on_epoch_end(self.model, epoch, logs) for callback in callbacks]
            if any(stop):
                break

        for callback in callbacks:
            callback.on_train_end(self.model)

        history["epochs"] = epoch
        return history
