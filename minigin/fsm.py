"""Finite state machines driven by conditions evaluated against a blackboard."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable, Optional, Union

NULL_UID: Optional[Hashable] = None

Hook = Optional[Callable[[Any], None]]


class State:
    """A state of a state machine.

    Hooks may be given as callables or provided by overriding the methods;
    a hook that is not given does nothing.
    """

    _enter_hook: Hook = None
    _exit_hook: Hook = None
    _tick_hook: Hook = None

    def __init__(self, on_enter: Hook = None, on_exit: Hook = None, on_tick: Hook = None) -> None:
        self._enter_hook = on_enter
        self._exit_hook = on_exit
        self._tick_hook = on_tick

    @staticmethod
    def _run(hook: Hook, blackboard: Any) -> None:
        if hook is not None:
            hook(blackboard)

    def on_enter(self, blackboard: Any) -> None:
        """Called when the machine enters this state."""
        self._run(self._enter_hook, blackboard)

    def on_exit(self, blackboard: Any) -> None:
        """Called when the machine leaves this state."""
        self._run(self._exit_hook, blackboard)

    def tick(self, blackboard: Any) -> None:
        """Called on every machine tick while this state is current."""
        self._run(self._tick_hook, blackboard)


class Condition(ABC):
    """A predicate over the blackboard that guards a transition."""

    @abstractmethod
    def evaluate(self, blackboard: Any) -> bool:
        """Whether the condition holds for ``blackboard``."""


ConditionLike = Union[Condition, type]
TransitionPair = tuple[Condition, Hashable]


def _instantiate_condition(condition: ConditionLike) -> Condition:
    if isinstance(condition, type):
        condition = condition()
    if not isinstance(condition, Condition):
        raise TypeError("a transition needs a Condition or a Condition subclass")
    return condition


@dataclass
class SingleStateStack:
    """One state together with its outgoing transitions."""

    state: Optional[State] = None
    transitions: list[TransitionPair] = field(default_factory=list)

    def _require_state(self) -> State:
        if self.state is None:
            raise LookupError("no state has been created for this stack")
        return self.state

    def trigger_on_enter(self, blackboard: Any) -> None:
        """Enter the state."""
        self._require_state().on_enter(blackboard)

    def trigger_on_exit(self, blackboard: Any) -> None:
        """Leave the state."""
        self._require_state().on_exit(blackboard)

    def trigger_tick(self, blackboard: Any) -> None:
        """Tick the state."""
        self._require_state().tick(blackboard)


@dataclass
class MultiStateStack:
    """Several states sharing one id, together with their outgoing transitions."""

    states: list[State] = field(default_factory=list)
    transitions: list[TransitionPair] = field(default_factory=list)

    def trigger_on_enter(self, blackboard: Any) -> None:
        """Enter every state, in creation order."""
        for state in self.states:
            state.on_enter(blackboard)

    def trigger_on_exit(self, blackboard: Any) -> None:
        """Leave every state, in creation order."""
        for state in self.states:
            state.on_exit(blackboard)

    def trigger_tick(self, blackboard: Any) -> None:
        """Tick every state, in creation order."""
        for state in self.states:
            state.tick(blackboard)


class BaseFiniteStateMachine(ABC):
    """Common interface of the state machines."""

    def __init__(self) -> None:
        self._intermediate_states: set[Hashable] = set()

    def create_state(self, state_id: Hashable, state: Union[State, type]) -> State:
        """Create a state under ``state_id``; a State subclass is instantiated.

        Returns the stored state.
        """
        if isinstance(state, type):
            state = state()
        if not isinstance(state, State):
            raise TypeError("create_state needs a State or a State subclass")
        return self._create_state_impl(state_id, state)

    def mark_intermediate_state(self, state_id: Hashable) -> None:
        """Mark a state whose transitions are followed within the same tick."""
        self._intermediate_states.add(state_id)

    def is_intermediate(self, state_id: Hashable) -> bool:
        """Whether ``state_id`` was marked as intermediate."""
        return state_id in self._intermediate_states

    def add_transition(self, from_id: Hashable, to_id: Hashable, condition: ConditionLike) -> None:
        """Transition from ``from_id`` to ``to_id`` when ``condition`` holds.

        A Condition subclass is instantiated with no arguments.
        """
        self._add_transition_impl(from_id, to_id, _instantiate_condition(condition))

    @abstractmethod
    def start(self, start_state_id: Hashable) -> None:
        """Enter the start state; the machine ticks from then on."""

    @abstractmethod
    def force_transition(self, state_id: Hashable) -> None:
        """Change to ``state_id`` regardless of conditions."""

    @abstractmethod
    def tick(self) -> None:
        """Follow the first satisfied transition, then tick the current state."""

    @abstractmethod
    def _create_state_impl(self, state_id: Hashable, state: State) -> State:
        ...

    @abstractmethod
    def _add_transition_impl(self, from_id: Hashable, to_id: Hashable, condition: Condition) -> None:
        ...


class FiniteStateMachine(BaseFiniteStateMachine):
    """A state machine with exactly one state per id."""

    def __init__(self, blackboard: Any) -> None:
        super().__init__()
        self._blackboard = blackboard
        self._stacks: dict[Hashable, SingleStateStack] = {}
        self._started = False
        self._current_state_id: Optional[Hashable] = NULL_UID

    def start(self, start_state_id: Hashable) -> None:
        """Enter the start state.

        Raises RuntimeError if the machine was already started.
        """
        if self._started:
            raise RuntimeError("state machine already started")
        self._change_state(start_state_id)
        self._started = True

    def force_transition(self, state_id: Hashable) -> None:
        """Change to ``state_id`` regardless of conditions."""
        self._change_state(state_id)

    def tick(self) -> None:
        """Evaluate transitions and tick, repeating while the state is intermediate."""
        if not self._started:
            return
        while True:
            self._evaluate_transitions()
            self._stacks[self._current_state_id].trigger_tick(self._blackboard)
            if not self.is_intermediate(self._current_state_id):
                break

    @property
    def current_state(self) -> Optional[State]:
        """The current state, or None before the machine has started."""
        if self._current_state_id is NULL_UID:
            return None
        return self._stacks[self._current_state_id].state

    @property
    def current_state_id(self) -> Optional[Hashable]:
        """The id of the current state, or None before the machine has started."""
        return self._current_state_id

    def _create_state_impl(self, state_id: Hashable, state: State) -> State:
        stack = self._stacks.setdefault(state_id, SingleStateStack())
        if stack.state is not None:
            raise ValueError(f"state {state_id!r} already exists")
        stack.state = state
        return state

    def _add_transition_impl(self, from_id: Hashable, to_id: Hashable, condition: Condition) -> None:
        self._stacks.setdefault(from_id, SingleStateStack()).transitions.append((condition, to_id))

    def _evaluate_transitions(self) -> None:
        stack = self._stacks.get(self._current_state_id)
        if stack is None:
            return
        for condition, target in stack.transitions:
            if condition.evaluate(self._blackboard):
                self._change_state(target)
                break

    def _change_state(self, uid: Hashable) -> None:
        stack = self._stacks.get(uid)
        if stack is None or stack.state is None:
            raise KeyError(f"unknown state {uid!r}")
        if self._current_state_id == uid:
            return
        if self._current_state_id is not NULL_UID:
            self._stacks[self._current_state_id].trigger_on_exit(self._blackboard)
        self._current_state_id = uid
        stack.trigger_on_enter(self._blackboard)


class FiniteMultiStateMachine(BaseFiniteStateMachine):
    """A state machine where several states may share one id and act together."""

    def __init__(self, blackboard: Any) -> None:
        super().__init__()
        self._blackboard = blackboard
        self._stacks: dict[Hashable, MultiStateStack] = {}
        self._started = False
        self._current_state_id: Optional[Hashable] = NULL_UID

    @property
    def current_state_id(self) -> Optional[Hashable]:
        """The id of the current states, or None before the machine has started."""
        return self._current_state_id

    def start(self, start_state_id: Hashable) -> None:
        """Enter the start states.

        Raises RuntimeError if the machine was already started.
        """
        if self._started:
            raise RuntimeError("state machine already started")
        self._change_state(start_state_id)
        self._started = True

    def force_transition(self, state_id: Hashable) -> None:
        """Change to ``state_id`` regardless of conditions."""
        self._change_state(state_id)

    def tick(self) -> None:
        """Follow the first satisfied transition, then tick every current state."""
        if not self._started:
            return
        stack = self._stacks.get(self._current_state_id)
        if stack is not None:
            for condition, target in stack.transitions:
                if condition.evaluate(self._blackboard):
                    self._change_state(target)
                    break
        self._stacks[self._current_state_id].trigger_tick(self._blackboard)

    def _create_state_impl(self, state_id: Hashable, state: State) -> State:
        self._stacks.setdefault(state_id, MultiStateStack()).states.append(state)
        return state

    def _add_transition_impl(self, from_id: Hashable, to_id: Hashable, condition: Condition) -> None:
        self._stacks.setdefault(from_id, MultiStateStack()).transitions.append((condition, to_id))

    def _change_state(self, uid: Hashable) -> None:
        stack = self._stacks.get(uid)
        if stack is None or not stack.states:
            raise KeyError(f"unknown state {uid!r}")
        if self._current_state_id == uid:
            return
        if self._current_state_id is not NULL_UID:
            self._stacks[self._current_state_id].trigger_on_exit(self._blackboard)
        self._current_state_id = uid
        stack.trigger_on_enter(self._blackboard)