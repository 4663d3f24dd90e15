"""
Observers attached to the training loop

Each callback sees the metrics of every finished epoch. Stopping the loop
and keeping the best parameters are separate callbacks so either can be
used without the other.
"""

import copy
import math


class Callback:
    """Base class, every hook is a no-op"""

    def on_train_begin(self, model):
        pass

    def on_epoch_end(self, model, epoch, logs):
        """Return True to stop training"""
        return False

    def on_train_end(self, model):
        pass


def _monitored(logs, monitor):
    value = logs.get(monitor)
    if value is None:
        raise KeyError(f"Metric '{monitor}' is not available, got: {sorted(logs)}")
    return value


class EarlyStopAtMinLoss(Callback):
    """
    Stop once the monitored loss has not reached a new minimum for
    `patience` consecutive epochs

    Args:
        monitor: Key of the metric to watch ("loss" or "val_loss")
        patience: Number of epochs without improvement that ends training
    """

    def __init__(self, monitor="loss", patience=10):
        self.monitor = monitor
        self.patience = patience
        self.best = math.inf
        self.wait = 0
        self.stopped_epoch = None

    def on_train_begin(self, model):
        self.best = math.inf
        self.wait = 0
        self.stopped_epoch = None

    def on_epoch_end(self, model, epoch, logs):
        value = _monitored(logs, self.monitor)

        if value < self.best:
            self.best = value
            self.wait = 0
            return False

        self.wait += 1
        if self.wait >= self.patience:
            self.stopped_epoch = epoch
            return True
        return False


class StoreBestCoordinates(Callback):
    """
    Keep a copy of the parameters with the lowest monitored loss and load
    them back into the model when training ends
    """

    def __init__(self, monitor="loss"):
        self.monitor = monitor
        self.best = math.inf
        self.best_epoch = None
        self.best_state = None

    def on_train_begin(self, model):
        self.best = math.inf
        self.best_epoch = None
        self.best_state = None

    def on_epoch_end(self, model, epoch, logs):
        value = _monitored(logs, self.monitor)
        if value < self.best:
            self.best = value
            self.best_epoch = epoch
            self.best_state = copy.deepcopy(model.state_dict())
        return False

    def on_train_end(self, model):
        if self.best_state is not None:
            model.load_state_dict(self.best_state)


class PrintLoss(Callback):
    """Print the metrics of every epoch"""

    def on_epoch_end(self, model, epoch, logs):
        line = f"Epoch {epoch}: loss = {logs['loss']:.6f}, accuracy = {logs['accuracy']:.2f}%"
        if logs.get("val_loss") is not None:
            line += f", val_loss = {logs['val_loss']:.6f}, val_accuracy = {logs['val_accuracy']:.2f}%"
        print(line)
        return False
