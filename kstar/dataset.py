"""
In-memory datasets for the K* classifier.

Implements:
- Attribute descriptors (nominal with a fixed label set, numeric, string)
- Instances stored as float vectors, NaN marking a missing value
- Datasets holding instances that share one schema and class position

Nominal values are stored as the index of their label, so every instance
is a plain float64 vector and a dataset is a 2-D array.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import InvalidInputError, SchemaMismatchError

MISSING = float('nan')
MISSING_LABELS = ('?', '')


class AttributeType(Enum):
    """Kinds of attribute values."""
    NOMINAL = 'nominal'
    NUMERIC = 'numeric'
    STRING = 'string'


@dataclass(frozen=True)
class Attribute:
    """
    Schema entry for one column.

    Attributes:
        name: Attribute name
        type: Value kind
        values: Labels of a nominal attribute, in index order
    """
    name: str
    type: AttributeType
    values: Tuple[str, ...] = ()

    @classmethod
    def nominal(cls, name: str, values: Iterable) -> 'Attribute':
        """Create a nominal attribute with the given labels."""
        labels = tuple(str(v) for v in values)
        if len(set(labels)) != len(labels):
            raise InvalidInputError(f"Duplicate labels for attribute '{name}'")
        return cls(name, AttributeType.NOMINAL, labels)

    @classmethod
    def numeric(cls, name: str) -> 'Attribute':
        """Create a numeric attribute."""
        return cls(name, AttributeType.NUMERIC)

    @classmethod
    def string(cls, name: str) -> 'Attribute':
        """Create a string attribute (not usable for training)."""
        return cls(name, AttributeType.STRING)

    @property
    def num_values(self) -> int:
        return len(self.values)

    @property
    def is_nominal(self) -> bool:
        return self.type is AttributeType.NOMINAL

    @property
    def is_numeric(self) -> bool:
        return self.type is AttributeType.NUMERIC

    @property
    def is_string(self) -> bool:
        return self.type is AttributeType.STRING

    def index_of(self, label) -> int:
        """Index of a nominal label."""
        try:
            return self.values.index(str(label))
        except ValueError:
            raise InvalidInputError(
                f"Unknown value '{label}' for attribute '{self.name}'") from None

    def encode(self, raw) -> float:
        """
        Convert a raw cell into its stored float.

        None, NaN, '?' and '' are missing. String contents are not retained.
        """
        if raw is None or (isinstance(raw, str) and raw.strip() in MISSING_LABELS):
            return MISSING
        if isinstance(raw, float) and np.isnan(raw):
            return MISSING
        if self.is_nominal:
            return float(self.index_of(raw))
        if self.is_numeric:
            try:
                return float(raw)
            except (TypeError, ValueError):
                raise InvalidInputError(
                    f"Non-numeric value '{raw}' for attribute '{self.name}'") from None
        return MISSING

    def decode(self, value: float):
        """Convert a stored float back into a label, number or None."""
        if np.isnan(value):
            return None
        if self.is_nominal:
            return self.values[int(value)]
        return float(value)


class Instance:
    """
    One row of attribute values.

    The values are read-only once the instance is created.
    """

    def __init__(self, values: Sequence[float], dataset: Optional['Dataset'] = None):
        """
        Args:
            values: Stored values, NaN for missing
            dataset: Dataset whose schema the values follow (optional)
        """
        self._values = np.array(values, dtype=np.float64).ravel()
        self._values.flags.writeable = False
        self.dataset = dataset

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def num_attributes(self) -> int:
        return self._values.shape[0]

    def value(self, index: int) -> float:
        return float(self._values[index])

    def is_missing(self, index: int) -> bool:
        return bool(np.isnan(self._values[index]))

    def _class_index(self) -> int:
        if self.dataset is None or self.dataset.class_index is None:
            raise InvalidInputError("Instance has no class attribute assigned")
        return self.dataset.class_index

    def class_value(self) -> float:
        return self.value(self._class_index())

    def class_is_missing(self) -> bool:
        return self.is_missing(self._class_index())

    def __len__(self) -> int:
        return self.num_attributes

    def __repr__(self) -> str:
        if self.dataset is None:
            return f"Instance({self._values.tolist()})"
        cells = [attr.decode(v) for attr, v in zip(self.dataset.attributes, self._values)]
        return f"Instance({cells})"


class Dataset:
    """
    Ordered collection of instances sharing a schema.

    Usage:
        weather = Dataset.from_rows('weather', attributes, rows, class_index=2)
        for instance in weather:
            ...
    """

    def __init__(self, name: str, attributes: Sequence[Attribute],
                 class_index: Optional[int] = None,
                 data: Optional[np.ndarray] = None):
        """
        Args:
            name: Relation name
            attributes: Schema, one entry per column
            class_index: Position of the class attribute (None if unassigned)
            data: Stored values, shape (n_instances, n_attributes)
        """
        self.name = name
        self._attributes = tuple(attributes)
        n_attributes = len(self._attributes)

        if data is None:
            self._data = np.empty((0, n_attributes), dtype=np.float64)
        else:
            data = np.array(data, dtype=np.float64)
            if data.ndim == 1 and data.size == 0:
                data = data.reshape(0, n_attributes)
            if data.ndim != 2 or data.shape[1] != n_attributes:
                raise InvalidInputError(
                    f"Expected rows of {n_attributes} values, got shape {data.shape}")
            self._data = data

        self._class_index: Optional[int] = None
        self.class_index = class_index

    @classmethod
    def from_rows(cls, name: str, attributes: Sequence[Attribute],
                  rows: Iterable[Sequence], class_index: Optional[int] = None) -> 'Dataset':
        """
        Build a dataset from raw rows of labels and numbers.

        Args:
            name: Relation name
            attributes: Schema
            rows: Raw cells per row; None or '?' for missing
            class_index: Position of the class attribute

        Returns:
            Dataset
        """
        attributes = tuple(attributes)
        encoded = []
        for row in rows:
            row = list(row)
            if len(row) != len(attributes):
                raise InvalidInputError(
                    f"Row {row} has {len(row)} values, expected {len(attributes)}")
            encoded.append([attr.encode(cell) for attr, cell in zip(attributes, row)])
        data = np.array(encoded, dtype=np.float64).reshape(len(encoded), len(attributes))
        return cls(name, attributes, class_index=class_index, data=data)

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    @property
    def class_index(self) -> Optional[int]:
        return self._class_index

    @class_index.setter
    def class_index(self, index: Optional[int]):
        if index is not None:
            if index < 0:
                index += self.num_attributes
            if not 0 <= index < self.num_attributes:
                raise InvalidInputError(f"Class index {index} out of range")
        self._class_index = index

    @property
    def attributes(self) -> Tuple[Attribute, ...]:
        return self._attributes

    @property
    def num_attributes(self) -> int:
        return len(self._attributes)

    def attribute(self, index: int) -> Attribute:
        return self._attributes[index]

    @property
    def class_attribute(self) -> Attribute:
        if self._class_index is None:
            raise InvalidInputError("No class attribute assigned to instances")
        return self._attributes[self._class_index]

    @property
    def num_classes(self) -> int:
        """Number of class labels (1 for a numeric class)."""
        class_attribute = self.class_attribute
        if class_attribute.is_nominal:
            return class_attribute.num_values
        return 1

    def equal_headers(self, other: 'Dataset') -> bool:
        """Whether both datasets share attributes and class position."""
        return (self._attributes == other._attributes
                and self._class_index == other._class_index)

    def check_for_string_attributes(self) -> bool:
        return any(attr.is_string for attr in self._attributes)

    # -------------------------------------------------------------------------
    # Instances
    # -------------------------------------------------------------------------

    @property
    def num_instances(self) -> int:
        return self._data.shape[0]

    def __len__(self) -> int:
        return self.num_instances

    def __iter__(self) -> Iterator[Instance]:
        for i in range(self.num_instances):
            yield self.instance(i)

    def instance(self, index: int) -> Instance:
        return Instance(self._data[index], self)

    @property
    def values(self) -> np.ndarray:
        """Read-only view of the stored values."""
        view = self._data.view()
        view.flags.writeable = False
        return view

    def column(self, index: int) -> np.ndarray:
        return self._data[:, index].copy()

    def class_column(self) -> np.ndarray:
        if self._class_index is None:
            raise InvalidInputError("No class attribute assigned to instances")
        return self.column(self._class_index)

    def add(self, instance: Union[Instance, Sequence[float]]) -> None:
        """Append an instance with the same schema."""
        if isinstance(instance, Instance):
            if instance.dataset is not None and not self.equal_headers(instance.dataset):
                raise SchemaMismatchError("Incompatible instance types")
            values = instance.values
        else:
            values = np.asarray(instance, dtype=np.float64)
        if values.shape != (self.num_attributes,):
            raise SchemaMismatchError(
                f"Instance has {values.size} values, expected {self.num_attributes}")
        # vstack allocates a new array, so views handed out earlier stay intact
        self._data = np.vstack([self._data, values[np.newaxis, :]])

    def copy(self) -> 'Dataset':
        return Dataset(self.name, self._attributes, self._class_index, self._data.copy())

    def subset(self, indices: Sequence[int]) -> 'Dataset':
        """Dataset with the given rows, in the given order."""
        indices = np.asarray(indices, dtype=np.intp)
        return Dataset(self.name, self._attributes, self._class_index,
                       self._data[indices].copy())

    def delete_with_missing_class(self) -> int:
        """
        Remove instances whose class value is missing.

        Returns:
            Number of instances removed
        """
        keep = ~np.isnan(self.class_column())
        removed = int(np.sum(~keep))
        if removed:
            self._data = self._data[keep]
        return removed

    def __repr__(self) -> str:
        return (f"Dataset(name={self.name!r}, instances={self.num_instances}, "
                f"attributes={self.num_attributes}, class_index={self._class_index})")
