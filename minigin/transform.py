"""2D affine transforms as 3x3 homogeneous matrices."""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

import numpy as np


def _vec2(value: Iterable[float]) -> np.ndarray:
    vector = np.asarray(value, dtype=float).reshape(-1)
    if vector.shape != (2,):
        raise ValueError("expected a 2D vector")
    return vector


def _translation_matrix(translation: Iterable[float]) -> np.ndarray:
    tx, ty = _vec2(translation)
    return np.array([[1.0, 0.0, tx], [0.0, 1.0, ty], [0.0, 0.0, 1.0]])


def _rotation_matrix(rotation: float) -> np.ndarray:
    c, s = math.cos(rotation), math.sin(rotation)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def _scale_matrix(scale: Iterable[float]) -> np.ndarray:
    sx, sy = _vec2(scale)
    return np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])


class Transform:
    """A 2D transform; the identity unless a 3x3 matrix is given."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, matrix: Optional[Any] = None) -> None:
        if isinstance(matrix, Transform):
            matrix = matrix.matrix
        array = np.identity(3) if matrix is None else np.array(matrix, dtype=float)
        if array.shape != (3, 3):
            raise ValueError("a transform matrix must be 3x3")
        self._set(array)

    def _set(self, array: np.ndarray) -> None:
        array.setflags(write=False)
        self._matrix = array

    @property
    def position(self) -> np.ndarray:
        """Translation part of the transform."""
        return self._matrix[:2, 2].copy()

    @property
    def matrix(self) -> np.ndarray:
        """The read-only 3x3 matrix."""
        return self._matrix

    def translate(self, translation: Iterable[float]) -> "Transform":
        """This transform followed, in local space, by a translation."""
        return Transform(self._matrix @ _translation_matrix(translation))

    def rotate(self, rotation: float) -> "Transform":
        """This transform followed, in local space, by a rotation in radians."""
        return Transform(self._matrix @ _rotation_matrix(rotation))

    def scale(self, scale: Iterable[float]) -> "Transform":
        """This transform followed, in local space, by a scale."""
        return Transform(self._matrix @ _scale_matrix(scale))

    def combine(self, other: "Transform") -> None:
        """Post-multiply this transform by ``other`` in place."""
        self._set(self._matrix @ other.matrix)

    def __mul__(self, other: "Transform") -> "Transform":
        if not isinstance(other, Transform):
            return NotImplemented
        result = Transform(self._matrix)
        result.combine(other)
        return result

    __matmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Transform):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other._matrix))

    def __repr__(self) -> str:
        return f"Transform({self._matrix.tolist()!r})"

    @staticmethod
    def from_translation(translation: Iterable[float]) -> "Transform":
        """A pure translation."""
        return Transform(_translation_matrix(translation))

    @staticmethod
    def from_rotation(rotation: float) -> "Transform":
        """A pure rotation in radians."""
        return Transform(_rotation_matrix(rotation))

    @staticmethod
    def from_scale(scale: Iterable[float]) -> "Transform":
        """A pure scale."""
        return Transform(_scale_matrix(scale))


class TransformOperator:
    """Applies incremental changes to a game object's local transform."""

    def __init__(self, game_object: Any) -> None:
        self._game_object = game_object

    def translate(self, translation: Iterable[float]) -> None:
        """Move the object by ``translation`` in its local space."""
        moved = self._game_object.local_transform * Transform.from_translation(translation)
        self._game_object.set_local_transform(moved)

    def rotate(self, rotation: float) -> None:
        """Rotate the object by ``rotation`` radians in its local space."""
        rotated = self._game_object.local_transform * Transform.from_rotation(rotation)
        self._game_object.set_local_transform(rotated)