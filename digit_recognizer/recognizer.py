from .callbacks import EarlyStopAtMinLoss, PrintLoss, StoreBestCoordinates
from .dataset import (
    get_dataloaders,
    load_csv,
    load_training_set,
    normalize,
    split_dataset,
    split_features_labels,
    unshift_labels,
)
from .model import DigitRecognizerNet, count_parameters
from .train import Trainer
from .utils import (
    evaluate_model,
    get_device,
    predict_labels,
    save_predictions,
    set_seed,
)


def train_digit_recognizer(config, device=None):
    """
    Load the training CSV, train a network and measure its accuracy

    Args:
        config: Config with dataset path and training options
        device: Device to train on (taken from config if None)

    Returns:
        dict: model, device, history, train_accuracy, valid_accuracy
    """
    if device is None:
        device = get_device(config.device)

    print(f"Reading dataset from: {config.training_dataset}")
    dataset = load_training_set(config.training_dataset)

    train, valid = split_dataset(dataset, config.ratio, config.seed)
    train_x, train_y = split_features_labels(train)
    valid_x, valid_y = split_features_labels(valid)
    print(f"Training samples: {len(train_x)}, validation samples: {len(valid_x)}")

    train_loader, valid_loader = get_dataloaders(
        train_x, train_y, valid_x, valid_y, config.batch_size, config.shuffle
    )

    model = DigitRecognizerNet(input_size=train_x.shape[1]).to(device)
    print(f"Model created: {count_parameters(model):,} trainable parameters")

    trainer = Trainer(
        model,
        device,
        reset_optimizer=config.reset_optimizer,
        verbose=config.verbose,
    )

    print(f"Training on device: {device}")
    history = trainer.fit(
        train_loader,
        valid_loader,
        callbacks=[
            PrintLoss(),
            EarlyStopAtMinLoss(monitor=config.monitor, patience=config.patience),
            StoreBestCoordinates(monitor=config.monitor),
        ],
        max_epochs=config.max_epochs,
    )
    print(f"Training finished after {history['epochs']} epochs")

    train_accuracy = evaluate_model(model, device, train_loader)
    valid_accuracy = evaluate_model(model, device, valid_loader)
    print(f"Accuracy: train = {train_accuracy:.2f}%, valid = {valid_accuracy:.2f}%")

    return {
        "model": model,
        "device": device,
        "history": history,
        "num_features": train_x.shape[1],
        "train_accuracy": train_accuracy,
        "valid_accuracy": valid_accuracy,
    }


def predict_test_set(model, device, config, num_features):
    """
    Predict the unlabeled test CSV and save a submission file

    Returns:
        np.ndarray: Saved labels, class ids 1-10 unless
        config.restore_digit_labels is set
    """
    print("Predicting ...")
    test_x = normalize(load_csv(config.testing_datatest, expected_columns=num_features))

    predictions = predict_labels(model, device, test_x).numpy()
    if config.restore_digit_labels:
        predictions = unshift_labels(predictions)

    print(f"Saving predicted labels to \"{config.prediction_result}\" ...")
    save_predictions(config.prediction_result, predictions)

    return predictions


def run_digit_recognizer(config):
    """
    Run the complete pipeline: load, split, train, evaluate, predict, save

    Args:
        config: Config for the run

    Returns:
        dict: Complete run results
    """
    set_seed(config.seed)

    results = train_digit_recognizer(config)
    predictions = predict_test_set(
        results["model"], results["device"], config, results["num_features"]
    )

    print(f"Results were saved to \"{config.prediction_result}\"")

    results["predictions"] = predictions
    results["prediction_result"] = config.prediction_result
    return results
