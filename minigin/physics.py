"""Axis-aligned box colliders, overlap tracking and simple rigid-body motion."""

from __future__ import annotations

import itertools
from abc import abstractmethod
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Callable, Iterable, Union

import numpy as np

from minigin.events import Dispatcher, MulticastDelegate
from minigin.gameobject import Component, GameObject


def _vec2(value: Iterable[float]) -> np.ndarray:
    vector = np.array(value, dtype=float).reshape(-1)
    if vector.shape != (2,):
        raise ValueError("expected a 2D vector")
    return vector


class CollisionStatus(Enum):
    """Outcome of a hit test."""

    NONE = auto()
    CACHED = auto()
    FULL = auto()


@dataclass(eq=False)
class CollisionInfo:
    """Result of a hit test between two colliders."""

    status: CollisionStatus = CollisionStatus.NONE
    contact_point: np.ndarray = field(default_factory=lambda: np.zeros(2))
    normal: np.ndarray = field(default_factory=lambda: np.zeros(2))
    depth: float = 0.0

    def has_collided(self) -> bool:
        """Whether the colliders overlap, freshly or from the cache."""
        return self.status is not CollisionStatus.NONE


class ColliderComponent(Component):
    """A collider registered for pairwise overlap checks.

    ``on_begin_overlap`` delegates receive (self, other, info);
    ``on_end_overlap`` delegates receive (self, other).
    """

    _colliders: list["ColliderComponent"] = []

    def __init__(self, owner: GameObject, position: Iterable[float] = (0.0, 0.0)) -> None:
        super().__init__(owner)
        self._on_begin_overlap_dispatcher = Dispatcher()
        self._on_end_overlap_dispatcher = Dispatcher()
        self.on_begin_overlap = MulticastDelegate(self._on_begin_overlap_dispatcher)
        self.on_end_overlap = MulticastDelegate(self._on_end_overlap_dispatcher)

        self._overlapping: dict[ColliderComponent, None] = {}
        self._offset = np.zeros(2)
        self._enabled = True

        ColliderComponent._colliders.append(self)
        self.offset_to(position)

    @classmethod
    def registered(cls) -> tuple["ColliderComponent", ...]:
        """Every live collider, in creation order."""
        return tuple(ColliderComponent._colliders)

    @staticmethod
    def late_tick() -> None:
        """Test every pair of enabled colliders, starting and ending overlaps."""
        colliders = tuple(ColliderComponent._colliders)
        for first, second in itertools.combinations(colliders, 2):
            if not first.enabled or not second.enabled:
                continue
            if second in first._overlapping:
                first._handle_persist_overlap(second)
            else:
                first.hit_test(second)

    def offset_by(self, offset: Iterable[float]) -> None:
        """Move the collider relative to its owner by ``offset``."""
        self._offset = self._offset + _vec2(offset)

    def offset_to(self, offset: Iterable[float]) -> None:
        """Set the collider's offset from its owner."""
        self._offset = _vec2(offset)

    @property
    def offset(self) -> np.ndarray:
        """Offset from the owner's world position."""
        return self._offset.copy()

    def set_enabled(self, enabled: bool) -> None:
        """Enable or disable the collider; disabling ends every overlap."""
        self._enabled = enabled
        if not enabled:
            for collider in list(self._overlapping):
                self.clear_overlap(collider)

    @property
    def enabled(self) -> bool:
        """Whether the collider takes part in overlap checks."""
        return self._enabled

    @property
    def position(self) -> np.ndarray:
        """Position of the collider in world space."""
        return self._offset + self.owner.world_transform.position

    @property
    def overlapping(self) -> tuple["ColliderComponent", ...]:
        """Colliders currently overlapping this one."""
        return tuple(self._overlapping)

    def clear_overlap(self, other: "ColliderComponent") -> None:
        """End the overlap between this collider and ``other`` on both sides."""
        self._handle_end_overlap(other)
        other._handle_end_overlap(self)

    def hit_test(self, other: "ColliderComponent", ignore_cache: bool = False) -> CollisionInfo:
        """Test against ``other``.

        Unless ``ignore_cache`` is set, a known overlap returns CACHED and a new
        one starts the overlap on both colliders; the returned info then carries
        the normal as seen from ``other``.
        """
        if not ignore_cache and other in self._overlapping:
            return CollisionInfo(status=CollisionStatus.CACHED)

        info = self._hit_test_impl(other)
        if not info.has_collided():
            return CollisionInfo(status=CollisionStatus.NONE)

        if not ignore_cache:
            self._handle_begin_overlap(other, info)
            info = replace(info, normal=-info.normal)
            other._handle_begin_overlap(self, info)
        return info

    @property
    @abstractmethod
    def pivots(self) -> tuple[np.ndarray, ...]:
        """Corner points of the shape relative to the collider position."""

    @abstractmethod
    def _hit_test_impl(self, other: "ColliderComponent") -> CollisionInfo:
        ...

    def destroy(self) -> None:
        """Unregister the collider and release it."""
        ColliderComponent._colliders[:] = [c for c in ColliderComponent._colliders if c is not self]
        super().destroy()

    def _handle_persist_overlap(self, other: "ColliderComponent") -> None:
        if not self.hit_test(other, True).has_collided():
            self.clear_overlap(other)

    def _handle_begin_overlap(self, other: "ColliderComponent", info: CollisionInfo) -> None:
        self._on_begin_overlap_dispatcher.broadcast(self, other, info)
        self._overlapping[other] = None

    def _handle_end_overlap(self, other: "ColliderComponent") -> None:
        self._on_end_overlap_dispatcher.broadcast(self, other)
        self._overlapping.pop(other, None)


class BoxColliderComponent(ColliderComponent):
    """An axis-aligned box; edges that touch count as overlapping."""

    def __init__(
        self,
        owner: GameObject,
        size: Iterable[float],
        position: Iterable[float] = (0.0, 0.0),
    ) -> None:
        width, height = _vec2(size)
        self._pivots = (
            np.array([0.0, 0.0]),
            np.array([width, 0.0]),
            np.array([width, height]),
            np.array([0.0, height]),
        )
        super().__init__(owner, position)

    @property
    def pivots(self) -> tuple[np.ndarray, ...]:
        """The four corners: origin, right, opposite and top."""
        return tuple(p.copy() for p in self._pivots)

    def _hit_test_impl(self, other: ColliderComponent) -> CollisionInfo:
        self_position = self.position
        other_position = other.position

        a_min = self_position + self._pivots[0]
        a_max = self_position + self._pivots[2]

        other_pivots = other.pivots
        b_min = other_position + other_pivots[0]
        b_max = other_position + other_pivots[2]

        if (
            a_max[0] < b_min[0]
            or a_min[0] > b_max[0]
            or a_max[1] < b_min[1]
            or a_min[1] > b_max[1]
        ):
            return CollisionInfo(status=CollisionStatus.NONE)

        overlap_x = min(a_max[0], b_max[0]) - max(a_min[0], b_min[0])
        overlap_y = min(a_max[1], b_max[1]) - max(a_min[1], b_min[1])

        if overlap_x < overlap_y:
            normal = np.array([-1.0, 0.0]) if self_position[0] < other_position[0] else np.array([1.0, 0.0])
            depth = float(overlap_x)
        else:
            normal = np.array([0.0, -1.0]) if self_position[1] < other_position[1] else np.array([0.0, 1.0])
            depth = float(overlap_y)

        contact_min = np.maximum(a_min, b_min)
        contact_max = np.minimum(a_max, b_max)
        contact_point = (contact_min + contact_max) * 0.5

        return CollisionInfo(
            status=CollisionStatus.FULL,
            contact_point=contact_point,
            normal=normal,
            depth=depth,
        )


DeltaTime = Union[float, Callable[[], float]]


class PhysicsComponent(Component):
    """Moves its owner by a velocity, optionally pulled by gravity.

    ``gravity`` is the downward acceleration added on each fixed tick while
    physics is simulated; ``delta_time`` is the step length, or a callable
    returning it.
    """

    def __init__(self, owner: GameObject, gravity: float = 0.0, delta_time: DeltaTime = 0.0) -> None:
        super().__init__(owner)
        self._gravity = float(gravity)
        self._delta_time = delta_time
        self._simulate_physics = True
        self._velocity = np.zeros(2)

    def _dt(self) -> float:
        return float(self._delta_time() if callable(self._delta_time) else self._delta_time)

    def fixed_tick(self) -> None:
        """Apply gravity if simulated, then move the owner by velocity times the step."""
        if self._simulate_physics:
            self.add_force((0.0, self._gravity), True)
        displacement = self._velocity * self._dt()
        self.owner.transform_operator.translate(displacement)

    @property
    def simulate_physics(self) -> bool:
        """Whether gravity is applied."""
        return self._simulate_physics

    @simulate_physics.setter
    def simulate_physics(self, simulate: bool) -> None:
        self._simulate_physics = simulate

    @property
    def velocity(self) -> np.ndarray:
        """The current velocity."""
        return self._velocity.copy()

    def add_force(self, force: Iterable[float], acceleration: bool = False) -> None:
        """Add ``force`` to the velocity, scaled by the step when it is an acceleration."""
        vector = _vec2(force)
        if acceleration:
            self._velocity = self._velocity + vector * self._dt()
        else:
            self._velocity = self._velocity + vector