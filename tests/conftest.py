"""
Pytest fixtures for the K* classifier tests.

Provides small in-memory datasets covering nominal, numeric, mixed and
numeric-class schemas.
"""
import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kstar.dataset import Attribute, Dataset


@pytest.fixture
def yes_no_dataset():
    """One nominal attribute, nominal class: A=yes with yes three times, A=no with no twice."""
    attributes = [
        Attribute.nominal('A', ['yes', 'no']),
        Attribute.nominal('class', ['yes', 'no']),
    ]
    rows = [
        ['yes', 'yes'],
        ['yes', 'yes'],
        ['yes', 'yes'],
        ['no', 'no'],
        ['no', 'no'],
    ]
    return Dataset.from_rows('yes-no', attributes, rows, class_index=1)


@pytest.fixture
def mixed_dataset():
    """Nominal and numeric attributes, two well separated classes."""
    attributes = [
        Attribute.nominal('colour', ['red', 'green', 'blue']),
        Attribute.numeric('size'),
        Attribute.numeric('weight'),
        Attribute.nominal('class', ['small', 'big']),
    ]
    rows = [
        ['red', 1.0, 10.0, 'small'],
        ['red', 1.2, 11.0, 'small'],
        ['green', 0.8, 9.5, 'small'],
        ['red', 1.1, 10.5, 'small'],
        ['green', 0.9, 9.0, 'small'],
        ['red', 1.3, 12.0, 'small'],
        ['green', 1.0, 10.2, 'small'],
        ['red', 0.7, 11.5, 'small'],
        ['green', 1.4, 9.8, 'small'],
        ['red', 1.05, 10.8, 'small'],
        ['blue', 3.0, 20.0, 'big'],
        ['blue', 3.2, 21.0, 'big'],
        ['green', 2.8, 19.5, 'big'],
        ['blue', 3.1, 20.5, 'big'],
        ['green', 2.9, 19.0, 'big'],
        ['blue', 3.3, 22.0, 'big'],
        ['green', 3.0, 20.2, 'big'],
        ['blue', 2.7, 21.5, 'big'],
        ['green', 3.4, 19.8, 'big'],
        ['blue', 3.05, 20.8, 'big'],
    ]
    return Dataset.from_rows('mixed', attributes, rows, class_index=-1)


@pytest.fixture
def numeric_class_dataset():
    """Numeric attribute and numeric class, class roughly twice the attribute."""
    attributes = [
        Attribute.numeric('x'),
        Attribute.nominal('group', ['a', 'b']),
        Attribute.numeric('y'),
    ]
    rows = [
        [1.0, 'a', 2.1],
        [2.0, 'a', 3.9],
        [3.0, 'a', 6.2],
        [4.0, 'b', 8.1],
        [5.0, 'b', 9.8],
        [6.0, 'b', 12.2],
        [7.0, 'b', 13.9],
        [8.0, 'a', 16.1],
        [9.0, 'b', 18.0],
        [10.0, 'a', 20.2],
    ]
    return Dataset.from_rows('linear', attributes, rows, class_index=2)
