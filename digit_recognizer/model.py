import torch.nn as nn
import torch.nn.functional as F

from .config import DROPOUT_RATE, HIDDEN1, HIDDEN2, NUM_CLASSES


class DigitRecognizerNet(nn.Module):
    """
    Feed-forward network for Kaggle digit recognition

    Linear -> ReLU -> Linear -> ReLU -> Dropout -> Linear -> LogSoftmax.
    Output k holds the log-probability of class id k + 1.
    """

    def __init__(
        self,
        input_size=784,
        hidden1=HIDDEN1,
        hidden2=HIDDEN2,
        num_classes=NUM_CLASSES,
        dropout_rate=DROPOUT_RATE,
    ):
        super(DigitRecognizerNet, self).__init__()
        self.input_size = input_size
        self.fc1 = nn.Linear(input_size, hidden1)
        self.fc2 = nn.Linear(hidden1, hidden2)
        self.fc3 = nn.Linear(hidden2, num_classes)
        self.dropout = nn.Dropout(dropout_rate)

        self.reset_parameters()

    def reset_parameters(self):
        """Glorot uniform weights, zero biases"""
        for layer in (self.fc1, self.fc2, self.fc3):
            nn.init.xavier_uniform_(layer.weight)
            nn.init.zeros_(layer.bias)

    def forward(self, x):
        # Flatten the image if needed
        if len(x.shape) > 2:
            x = x.view(x.size(0), -1)

        x = F.relu(self.fc1(x))
        x = F.relu(self.fc2(x))
        x = self.dropout(x)
        x = self.fc3(x)

        return F.log_softmax(x, dim=1)


def count_parameters(model):
    return sum(p.numel() for p in model.parameters() if p.requires_grad)
