"""
test_dataset.py
~~~~~~~~~~~~~~~

Unit tests for CSV loading and preprocessing.
"""

import numpy as np
import pytest

from digit_recognizer.dataset import (
    get_dataloaders,
    load_csv,
    load_training_set,
    normalize,
    shift_labels,
    split_dataset,
    split_features_labels,
    to_tensors,
    unshift_labels,
)


def write_text(tmp_path, text, name="data.csv"):
    path = tmp_path / name
    path.write_text(text)
    return str(path)


@pytest.mark.unit
class TestLoadCsv:
    """Test reading Kaggle CSV files."""

    def test_header_is_discarded(self, tmp_path):
        path = write_text(tmp_path, "label,pixel0,pixel1\n3,0,255\n7,10,20\n")

        table = load_csv(path)

        assert table.shape == (2, 3)
        np.testing.assert_array_equal(table[0], [3, 0, 255])

    def test_missing_file_raises_ioerror(self, tmp_path):
        with pytest.raises(IOError):
            load_csv(str(tmp_path / "nope.csv"))

    def test_non_numeric_cell_raises_ioerror(self, tmp_path):
        path = write_text(tmp_path, "label,pixel0\n1,2\n3,abc\n")
        with pytest.raises(IOError, match="Non-numeric"):
            load_csv(path)

    def test_short_row_raises_ioerror(self, tmp_path):
        path = write_text(tmp_path, "label,pixel0,pixel1\n1,2,3\n4,5\n")
        with pytest.raises(IOError, match="Missing"):
            load_csv(path)

    def test_long_row_raises_ioerror(self, tmp_path):
        path = write_text(tmp_path, "label,pixel0\n1,2\n3,4,5\n")
        with pytest.raises(IOError, match="Malformed"):
            load_csv(path)

    def test_invalid_encoding_raises_ioerror(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_bytes(b"label,pixel0\n1,\xff\xfe\n")

        with pytest.raises(IOError, match="Malformed"):
            load_csv(str(path))

    def test_boolean_cells_raise_ioerror(self, tmp_path):
        path = write_text(tmp_path, "label,pixel0\nTrue,1\nFalse,2\n")
        with pytest.raises(IOError, match="Non-numeric"):
            load_csv(path)

    def test_empty_file_raises_ioerror(self, tmp_path):
        with pytest.raises(IOError):
            load_csv(write_text(tmp_path, ""))

    def test_header_only_raises_ioerror(self, tmp_path):
        with pytest.raises(IOError, match="No data rows"):
            load_csv(write_text(tmp_path, "label,pixel0\n"))

    def test_unexpected_column_count(self, tmp_path):
        path = write_text(tmp_path, "pixel0,pixel1\n1,2\n")
        with pytest.raises(IOError, match="Expected 3 columns"):
            load_csv(path, expected_columns=3)

    def test_training_set_rejects_bad_labels(self, tmp_path):
        path = write_text(tmp_path, "label,pixel0\n10,2\n")
        with pytest.raises(IOError, match="Labels"):
            load_training_set(path)

    def test_training_set_needs_features(self, tmp_path):
        path = write_text(tmp_path, "label\n1\n")
        with pytest.raises(IOError):
            load_training_set(path)

    def test_loads_generated_training_file(self, train_csv):
        table = load_training_set(train_csv)
        assert table.shape == (99, 785)


@pytest.mark.unit
class TestSplit:
    """Test the train/validation split."""

    @pytest.mark.parametrize("ratio", [0.05, 0.1, 0.2, 0.5, 0.9])
    def test_sizes_add_up(self, ratio):
        data = np.arange(99 * 3).reshape(99, 3)

        train, valid = split_dataset(data, ratio, seed=0)

        assert len(train) + len(valid) == len(data)
        assert abs(len(valid) - ratio * len(data)) <= 1

    def test_partitions_are_disjoint(self):
        data = np.arange(50).reshape(50, 1)

        train, valid = split_dataset(data, 0.3, seed=1)

        assert set(train[:, 0]).isdisjoint(valid[:, 0])
        assert set(train[:, 0]) | set(valid[:, 0]) == set(range(50))

    def test_same_seed_same_split(self):
        data = np.arange(40).reshape(40, 1)

        first = split_dataset(data, 0.25, seed=7)
        second = split_dataset(data, 0.25, seed=7)

        np.testing.assert_array_equal(first[1], second[1])

    @pytest.mark.parametrize("ratio", [0.0, 1.0, -0.1, 1.5])
    def test_invalid_ratio(self, ratio):
        with pytest.raises(ValueError):
            split_dataset(np.zeros((10, 2)), ratio)


@pytest.mark.unit
class TestPreprocessing:
    """Test normalization and label shifting."""

    def test_normalize_range(self):
        values = np.arange(256, dtype=np.float64)

        normalized = normalize(values)

        np.testing.assert_allclose(normalized, values / 255.0)
        assert normalized.min() == 0.0
        assert normalized.max() == 1.0

    def test_normalize_does_not_clamp(self):
        assert normalize(np.array([510.0]))[0] == pytest.approx(2.0)

    def test_label_shift_is_bijection(self):
        digits = np.arange(10)

        shifted = shift_labels(digits)

        np.testing.assert_array_equal(shifted, np.arange(1, 11))
        np.testing.assert_array_equal(unshift_labels(shifted), digits)

    def test_split_features_labels(self):
        table = np.array([[0, 0, 255], [9, 51, 102]], dtype=np.float64)

        features, labels = split_features_labels(table)

        np.testing.assert_allclose(features, [[0.0, 1.0], [0.2, 0.4]])
        np.testing.assert_array_equal(labels, [1, 10])
        assert labels.dtype == np.int64


@pytest.mark.unit
class TestDataloaders:
    """Test tensor wrapping."""

    def test_batches_and_types(self):
        x = np.random.rand(10, 4)
        y = np.arange(1, 11)

        train_loader, valid_loader = get_dataloaders(x, y, x[:3], y[:3], batch_size=4)

        data, target = next(iter(train_loader))
        assert data.shape == (4, 4)
        assert str(data.dtype) == "torch.float32"
        assert str(target.dtype) == "torch.int64"
        assert len(train_loader) == 3
        assert len(valid_loader.dataset) == 3

    def test_validation_order_is_kept(self):
        x = np.random.rand(6, 2)
        y = np.array([1, 2, 3, 4, 5, 6])

        _, valid_loader = get_dataloaders(x, y, x, y, batch_size=6)

        _, target = next(iter(valid_loader))
        assert target.tolist() == [1, 2, 3, 4, 5, 6]

    def test_to_tensors(self):
        features, labels = to_tensors(np.zeros((2, 3)), np.array([1, 10]))

        assert str(features.dtype) == "torch.float32"
        assert str(labels.dtype) == "torch.int64"
        assert labels.tolist() == [1, 10]
