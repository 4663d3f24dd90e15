import argparse
import sys

from digit_recognizer.config import MONITORS, Config
from digit_recognizer.recognizer import run_digit_recognizer


def build_parser():
    parser = argparse.ArgumentParser(
        description=(
            "Train a feed-forward network on the Kaggle Digit Recognizer data set "
            "and write predictions for the test set. Data: "
            "https://www.kaggle.com/c/digit-recognizer/data"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    defaults = Config()

    # Data files
    parser.add_argument(
        "-t",
        "--training_dataset",
        type=str,
        default=defaults.training_dataset,
        help="Full path to the file containing the training set",
    )
    parser.add_argument(
        "-l",
        "--testing_datatest",
        type=str,
        default=defaults.testing_datatest,
        help="Full path to the file containing the test set",
    )
    parser.add_argument(
        "-P",
        "--prediction_result",
        type=str,
        default=defaults.prediction_result,
        help="File name in which prediction will be saved",
    )

    # Training configuration
    parser.add_argument(
        "-r",
        "--Ratio",
        dest="ratio",
        type=float,
        default=defaults.ratio,
        help="Fraction of the training set used for validation (default: 0.1)",
    )
    parser.add_argument(
        "-b",
        "--Batch_size",
        dest="batch_size",
        type=int,
        default=defaults.batch_size,
        help="Number of data points in each optimizer iteration (default: 64)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults.seed,
        help="Random seed for splitting, shuffling and initialization (default: 42)",
    )
    parser.add_argument(
        "--patience",
        type=int,
        default=defaults.patience,
        help="Epochs without improvement before training stops (default: 10)",
    )
    parser.add_argument(
        "--monitor",
        choices=MONITORS,
        default=defaults.monitor,
        help="Loss watched by early stopping (default: loss)",
    )
    parser.add_argument(
        "--max-epochs",
        type=int,
        default=defaults.max_epochs,
        help="Upper bound on epochs, 0 trains until early stopping (default: 0)",
    )
    parser.add_argument(
        "--no-shuffle",
        action="store_true",
        help="Draw training batches in file order",
    )
    parser.add_argument(
        "--reset-optimizer",
        action="store_true",
        help="Reset optimizer state between training stages",
    )
    parser.add_argument(
        "--restore-digit-labels",
        action="store_true",
        help="Save predicted labels as digits 0-9 instead of class ids 1-10",
    )
    parser.add_argument(
        "--device",
        type=str,
        default=None,
        help="Torch device (default: cuda if available, else cpu)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Don't print per-batch progress",
    )

    return parser


def config_from_args(args):
    return Config(
        training_dataset=args.training_dataset,
        testing_datatest=args.testing_datatest,
        prediction_result=args.prediction_result,
        ratio=args.ratio,
        batch_size=args.batch_size,
        seed=args.seed,
        shuffle=not args.no_shuffle,
        patience=args.patience,
        monitor=args.monitor,
        max_epochs=args.max_epochs,
        reset_optimizer=args.reset_optimizer,
        restore_digit_labels=args.restore_digit_labels,
        device=args.device,
        verbose=not args.quiet,
    )


def main(argv=None):
    """Main function with command line interface"""
    args = build_parser().parse_args(argv)

    print("Digit Recognizer")
    print("=" * 50)
    print(f"Training set: {args.training_dataset}")
    print(f"Test set: {args.testing_datatest}")
    print(f"Predictions: {args.prediction_result}")
    print(f"Validation ratio: {args.ratio}")
    print(f"Batch size: {args.batch_size}")
    print()

    try:
        config = config_from_args(args)
        results = run_digit_recognizer(config)

        print(f"\n✓ Finished successfully!")
        print(f"  Train accuracy: {results['train_accuracy']:.2f}%")
        print(f"  Valid accuracy: {results['valid_accuracy']:.2f}%")
        print(f"  Results saved to: {results['prediction_result']}")

    except KeyboardInterrupt:
        print(f"\n\nTraining interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n✗ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
