"""Conditions that combine other conditions with boolean logic."""

from __future__ import annotations

from typing import Any, Union

from minigin.fsm import Condition

ConditionLike = Union[Condition, type]


def _instantiate(condition: ConditionLike) -> Condition:
    if isinstance(condition, type):
        condition = condition()
    if not isinstance(condition, Condition):
        raise TypeError("expected a Condition or a Condition subclass")
    return condition


class Combine(Condition):
    """Base of conditions built from a sequence of sub-conditions.

    Each argument is a Condition or a Condition subclass, which is
    instantiated with no arguments.
    """

    def __init__(self, *conditions: ConditionLike) -> None:
        self._conditions: list[Condition] = [_instantiate(c) for c in conditions]

    @property
    def conditions(self) -> tuple[Condition, ...]:
        """The sub-conditions, in evaluation order."""
        return tuple(self._conditions)


class And(Combine):
    """Holds when every sub-condition holds."""

    def evaluate(self, blackboard: Any) -> bool:
        return all(condition.evaluate(blackboard) for condition in self._conditions)


class Or(Combine):
    """Holds when any sub-condition holds."""

    def evaluate(self, blackboard: Any) -> bool:
        return any(condition.evaluate(blackboard) for condition in self._conditions)


class Nand(Combine):
    """Holds when any sub-condition fails."""

    def evaluate(self, blackboard: Any) -> bool:
        return any(not condition.evaluate(blackboard) for condition in self._conditions)


class Nor(Combine):
    """Holds when no sub-condition holds."""

    def evaluate(self, blackboard: Any) -> bool:
        return not any(condition.evaluate(blackboard) for condition in self._conditions)


class Not(Condition):
    """Holds when the wrapped condition fails."""

    def __init__(self, condition: ConditionLike) -> None:
        self._condition = _instantiate(condition)

    def evaluate(self, blackboard: Any) -> bool:
        return not self._condition.evaluate(blackboard)


class Negate(Not):
    """Holds when the wrapped condition fails; another name for :class:`Not`."""

    def evaluate(self, blackboard: Any) -> bool:
        return not self._condition.evaluate(blackboard)