"""
Random class-column permutations for entropic blending.

The entropic blend compares how well a decay parameter separates the true
classes against how well it separates randomly relabelled copies of the
training set. The relabelled copies are drawn once per training-set
generation from a generator seeded with a fixed value, so repeated runs
give the same table.
"""

import numpy as np

from config import NUM_RAND_COLS, RANDOM_SEED


def randomize(array: np.ndarray, generator: np.random.Generator) -> np.ndarray:
    """
    Copy of the array with its elements randomly redistributed.

    Walks from the last position down, swapping each element with one
    drawn from the positions before it.
    """
    shuffled = np.array(array, copy=True)
    for j in range(len(shuffled) - 1, 0, -1):
        index = int(generator.random() * j)
        shuffled[j], shuffled[index] = shuffled[index], shuffled[j]
    return shuffled


class RandomClassPermutationTable:
    """
    Permuted class columns plus the original.

    ``columns`` has ``num_rand_cols + 1`` rows: rows ``0 .. num_rand_cols-1``
    hold permutations, the last row holds the true class values.
    """

    def __init__(self, columns: np.ndarray, generation: int):
        self._columns = np.asarray(columns, dtype=np.intp)
        self._columns.flags.writeable = False
        self.generation = generation

    @classmethod
    def build(cls, class_values: np.ndarray, generation: int,
              seed: int = RANDOM_SEED,
              num_rand_cols: int = NUM_RAND_COLS) -> 'RandomClassPermutationTable':
        """
        Generate the table for one training-set generation.

        Args:
            class_values: Class index of every training instance
            generation: Generation the table belongs to
            seed: Seed of the generator used for the permutations
            num_rand_cols: Number of permuted columns

        Returns:
            RandomClassPermutationTable
        """
        original = np.asarray(class_values).astype(np.intp)
        generator = np.random.default_rng(seed)
        columns = np.empty((num_rand_cols + 1, original.shape[0]), dtype=np.intp)
        for k in range(num_rand_cols):
            columns[k] = randomize(original, generator)
        columns[num_rand_cols] = original
        return cls(columns, generation)

    @property
    def columns(self) -> np.ndarray:
        return self._columns

    @property
    def num_rand_cols(self) -> int:
        return self._columns.shape[0] - 1

    @property
    def original(self) -> np.ndarray:
        return self._columns[-1]

    def restrict(self, mask: np.ndarray) -> np.ndarray:
        """Columns limited to the training instances selected by mask."""
        return self._columns[:, mask]
