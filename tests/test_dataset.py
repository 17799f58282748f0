"""
Unit tests for attributes, instances and datasets.
"""
import numpy as np
import pytest

from kstar.dataset import Attribute, AttributeType, Dataset, Instance
from kstar.exceptions import InvalidInputError, SchemaMismatchError


class TestAttribute:
    """Test suite for Attribute."""

    def test_nominal(self):
        attr = Attribute.nominal('outlook', ['sunny', 'rainy'])
        assert attr.type is AttributeType.NOMINAL
        assert attr.num_values == 2
        assert attr.index_of('rainy') == 1

    def test_duplicate_labels_rejected(self):
        with pytest.raises(InvalidInputError):
            Attribute.nominal('outlook', ['sunny', 'sunny'])

    def test_unknown_label(self):
        attr = Attribute.nominal('outlook', ['sunny', 'rainy'])
        with pytest.raises(InvalidInputError):
            attr.encode('overcast')

    def test_encode_missing(self):
        attr = Attribute.numeric('temperature')
        for raw in (None, '?', '', float('nan')):
            assert np.isnan(attr.encode(raw))

    def test_encode_non_numeric(self):
        with pytest.raises(InvalidInputError):
            Attribute.numeric('temperature').encode('hot')

    def test_decode(self):
        attr = Attribute.nominal('outlook', ['sunny', 'rainy'])
        assert attr.decode(1.0) == 'rainy'
        assert attr.decode(float('nan')) is None
        assert Attribute.numeric('t').decode(3.5) == 3.5


class TestDataset:
    """Test suite for Dataset."""

    def test_from_rows(self, yes_no_dataset):
        assert yes_no_dataset.num_instances == 5
        assert yes_no_dataset.num_attributes == 2
        assert yes_no_dataset.num_classes == 2
        np.testing.assert_array_equal(yes_no_dataset.class_column(), [0, 0, 0, 1, 1])

    def test_negative_class_index(self, mixed_dataset):
        assert mixed_dataset.class_index == 3
        assert mixed_dataset.class_attribute.name == 'class'

    def test_class_index_out_of_range(self, yes_no_dataset):
        with pytest.raises(InvalidInputError):
            yes_no_dataset.class_index = 5

    def test_numeric_class_has_one_class(self, numeric_class_dataset):
        assert numeric_class_dataset.num_classes == 1

    def test_wrong_row_width(self):
        attributes = [Attribute.numeric('x'), Attribute.numeric('y')]
        with pytest.raises(InvalidInputError):
            Dataset.from_rows('bad', attributes, [[1.0]])

    def test_missing_values(self):
        attributes = [Attribute.numeric('x'), Attribute.nominal('c', ['a', 'b'])]
        data = Dataset.from_rows('m', attributes, [['?', 'a'], [2.0, None]], class_index=1)
        assert data.instance(0).is_missing(0)
        assert data.instance(1).class_is_missing()

    def test_values_read_only(self, yes_no_dataset):
        with pytest.raises(ValueError):
            yes_no_dataset.values[0, 0] = 1.0

    def test_add(self, yes_no_dataset):
        yes_no_dataset.add([1.0, 1.0])
        assert yes_no_dataset.num_instances == 6

    def test_add_wrong_width(self, yes_no_dataset):
        with pytest.raises(SchemaMismatchError):
            yes_no_dataset.add([1.0, 1.0, 0.0])

    def test_add_other_schema(self, yes_no_dataset, mixed_dataset):
        with pytest.raises(SchemaMismatchError):
            yes_no_dataset.add(mixed_dataset.instance(0))

    def test_copy_is_independent(self, yes_no_dataset):
        copy = yes_no_dataset.copy()
        copy.add([0.0, 0.0])
        assert yes_no_dataset.num_instances == 5
        assert copy.equal_headers(yes_no_dataset)

    def test_subset(self, yes_no_dataset):
        subset = yes_no_dataset.subset([4, 0])
        np.testing.assert_array_equal(subset.class_column(), [1, 0])

    def test_delete_with_missing_class(self):
        attributes = [Attribute.numeric('x'), Attribute.nominal('c', ['a', 'b'])]
        data = Dataset.from_rows('m', attributes,
                                 [[1.0, 'a'], [2.0, '?'], [3.0, 'b']], class_index=1)
        assert data.delete_with_missing_class() == 1
        np.testing.assert_array_equal(data.column(0), [1.0, 3.0])

    def test_string_attributes(self):
        attributes = [Attribute.string('text'), Attribute.nominal('c', ['a', 'b'])]
        data = Dataset.from_rows('s', attributes, [['hello', 'a']], class_index=1)
        assert data.check_for_string_attributes()


class TestInstance:
    """Test suite for Instance."""

    def test_values_read_only(self):
        instance = Instance([1.0, 2.0])
        with pytest.raises(ValueError):
            instance.values[0] = 5.0

    def test_class_value_needs_dataset(self):
        with pytest.raises(InvalidInputError):
            Instance([1.0, 2.0]).class_value()

    def test_class_value(self, yes_no_dataset):
        assert yes_no_dataset.instance(3).class_value() == 1.0
        assert len(yes_no_dataset.instance(3)) == 2
