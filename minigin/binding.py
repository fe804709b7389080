"""Input bindings: raw input codes mapped to actions and dispatched to commands."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum, Flag, auto
from typing import Any, Callable, Hashable, Optional, Union

import numpy as np

InputValue = Union[bool, float, np.ndarray]
ValueType = type

_CO_VARARGS = 0x04


class TriggerEvent(Enum):
    """Phase of an input that a command reacts to."""

    TRIGGERED = auto()
    PRESSED = auto()
    RELEASED = auto()


class DeviceType(Enum):
    """Kind of input device."""

    KEYBOARD = auto()
    GAMEPAD = auto()


class Modifier(Flag):
    """Transformations applied to a raw input value."""

    NONE = 0
    NEGATE = auto()
    SWIZZLE = auto()


@dataclass(frozen=True)
class DeviceInfo:
    """A device kind and, for gamepads, its id."""

    type: DeviceType
    id: int = 0


@dataclass(frozen=True)
class InputAction:
    """An action id and the modifiers applied to values signalled for it."""

    uid: Hashable
    modifiers: Modifier = Modifier.NONE


@dataclass
class InputSnapshot:
    """An input value waiting to be dispatched; equal when uid and trigger match."""

    uid: Hashable
    value: Any = field(compare=False)
    trigger: TriggerEvent


@dataclass
class CommandInfo:
    """A command and the trigger it reacts to.

    ``value_type`` is the type the command receives (bool, float or
    numpy.ndarray); when None it is read from the command's first parameter
    annotation, and defaults to float.
    """

    command: Callable[[Any], Any]
    trigger: TriggerEvent
    value_type: Optional[ValueType] = None


class InputBuffer:
    """The set of (code, device id) pairs currently held down."""

    def __init__(self) -> None:
        self._pressed: set[tuple[Hashable, int]] = set()

    def trigger(self, code: Hashable, device_id: int) -> None:
        """Record ``code`` as pressed on ``device_id``."""
        self._pressed.add((code, device_id))

    def release(self, code: Hashable, device_id: int) -> None:
        """Record ``code`` as released on ``device_id``."""
        self._pressed.discard((code, device_id))

    def is_pressed(self, code: Hashable, device_id: int) -> bool:
        """Whether ``code`` is held on ``device_id``."""
        return (code, device_id) in self._pressed

    @property
    def pressed_this_frame(self) -> frozenset[tuple[Hashable, int]]:
        """Every (code, device id) pair currently held."""
        return frozenset(self._pressed)


def trigger_to_value(trigger: TriggerEvent) -> bool:
    """The boolean value an input carries for ``trigger``: False only on release."""
    if not isinstance(trigger, TriggerEvent):
        raise ValueError(f"invalid trigger event {trigger!r}")
    return trigger is not TriggerEvent.RELEASED


def _is_vec2(value: Any) -> bool:
    return isinstance(value, np.ndarray)


def convert_input_value(value: InputValue, target_type: ValueType) -> InputValue:
    """Convert an input value to bool, float or a 2D vector (numpy.ndarray).

    A vector becomes True when any component is non-zero and becomes its
    length as a float; a scalar becomes a vector along x.
    """
    if target_type is bool:
        if _is_vec2(value):
            return bool(np.any(value != 0))
        return bool(value)
    if target_type is float:
        if _is_vec2(value):
            return float(np.linalg.norm(value))
        return float(value)
    if target_type is np.ndarray:
        if _is_vec2(value):
            return np.array(value, dtype=float)
        return np.array([float(value), 0.0])
    raise TypeError(f"unsupported input value type {target_type!r}")


def apply_modifiers_to_value(value: Union[bool, float], modifiers: Modifier) -> InputValue:
    """Apply ``modifiers`` to a scalar input value.

    NEGATE flips the sign; SWIZZLE moves the value to the y axis of a vector.
    """
    result = float(value)
    if Modifier.NEGATE in modifiers:
        result = -1 * result
    if Modifier.SWIZZLE in modifiers:
        return np.array([0.0, result])
    return result


def merge_value_to_snapshot(snapshot: InputSnapshot, value: InputValue) -> None:
    """Accumulate ``value`` into ``snapshot``; vectors win, booleans become floats."""
    start = snapshot.value
    if _is_vec2(value):
        snapshot.value = convert_input_value(start, np.ndarray) + value
    elif isinstance(start, bool):
        snapshot.value = float(start) + convert_input_value(value, float)
    elif _is_vec2(start):
        snapshot.value = start + convert_input_value(value, np.ndarray)
    else:
        snapshot.value = float(start) + convert_input_value(value, float)


_ANNOTATION_NAMES: dict[str, ValueType] = {
    "bool": bool,
    "float": float,
    "int": float,
    "np.ndarray": np.ndarray,
    "numpy.ndarray": np.ndarray,
    "ndarray": np.ndarray,
}


def _resolve_function(command: Callable[[Any], Any]) -> tuple[Any, bool]:
    """The plain function behind ``command`` and whether its first parameter is bound."""
    if hasattr(command, "__code__"):
        return command, False
    func = getattr(command, "__func__", None)
    if func is not None and hasattr(func, "__code__"):
        return func, True
    call = getattr(type(command), "__call__", None)
    if call is not None and hasattr(call, "__code__"):
        return call, True
    return None, False


def _command_value_type(command: Callable[[Any], Any]) -> ValueType:
    func, bound = _resolve_function(command)
    if func is None:
        return float
    code = func.__code__
    params = list(code.co_varnames[: code.co_argcount])
    if bound:
        params = params[1:]
    if not params:
        if code.co_flags & _CO_VARARGS:
            return float
        raise TypeError("a command must accept the input value")
    annotation = getattr(func, "__annotations__", {}).get(params[0])
    if annotation is None:
        return float
    if isinstance(annotation, str):
        annotation = _ANNOTATION_NAMES.get(annotation, annotation)
    if annotation is int:
        return float
    if annotation in (bool, float, np.ndarray):
        return annotation
    raise TypeError(f"unsupported command parameter type {annotation!r}")


class CommandSet:
    """Commands bound to one action, grouped by trigger."""

    def __init__(self) -> None:
        self._commands: dict[TriggerEvent, list[tuple[Callable[[Any], Any], ValueType]]] = {
            trigger: [] for trigger in TriggerEvent
        }

    def set(self, info: CommandInfo) -> None:
        """Add a command for its trigger."""
        if not isinstance(info.trigger, TriggerEvent):
            raise ValueError(f"invalid trigger event {info.trigger!r}")
        value_type = info.value_type or _command_value_type(info.command)
        if value_type not in (bool, float, np.ndarray):
            raise TypeError(f"unsupported command value type {value_type!r}")
        self._commands[info.trigger].append((info.command, value_type))

    def execute(self, value: InputValue, trigger: TriggerEvent) -> None:
        """Call every command of ``trigger`` with ``value`` converted to its type."""
        if not isinstance(trigger, TriggerEvent):
            raise ValueError(f"invalid trigger event {trigger!r}")
        for command, value_type in tuple(self._commands[trigger]):
            command(convert_input_value(value, value_type))


class DeviceContext:
    """Commands and pending inputs of one controller on one device."""

    def __init__(self, controller: Any, device_info: DeviceInfo) -> None:
        self._controller = controller
        self._device_info = device_info
        self._command_sets: dict[Hashable, CommandSet] = {}
        self._queue: deque[InputSnapshot] = deque()

    @property
    def controller(self) -> Any:
        """The controller owning this context."""
        return self._controller

    @property
    def device_info(self) -> DeviceInfo:
        """The device this context listens to."""
        return self._device_info

    @property
    def pending(self) -> tuple[InputSnapshot, ...]:
        """Inputs signalled but not yet dispatched, oldest first."""
        return tuple(self._queue)

    def is_device_suitable(self, device_info: DeviceInfo) -> bool:
        """Whether input from ``device_info`` is meant for this context."""
        if device_info.type is DeviceType.KEYBOARD:
            return self._device_info.type is DeviceType.KEYBOARD
        if device_info.type is DeviceType.GAMEPAD:
            return self._device_info.type is DeviceType.GAMEPAD and self._device_info.id == device_info.id
        return False

    def bind_command(self, uid: Hashable, command_info: CommandInfo) -> None:
        """Bind a command to the action ``uid``."""
        self._command_sets.setdefault(uid, CommandSet()).set(command_info)

    def signal_input(self, snapshot: InputSnapshot) -> None:
        """Queue an input, merging it with a queued one of the same uid and trigger."""
        if snapshot.uid not in self._command_sets:
            return
        queued = next((item for item in self._queue if item == snapshot), None)
        if queued is None:
            value = snapshot.value
            if _is_vec2(value):
                value = value.copy()
            self._queue.append(replace(snapshot, value=value))
        else:
            merge_value_to_snapshot(queued, snapshot.value)

    def execute_commands(self) -> None:
        """Dispatch every queued input to its commands, in queue order."""
        while self._queue:
            snapshot = self._queue.popleft()
            self._command_sets[snapshot.uid].execute(snapshot.value, snapshot.trigger)


class InputMappingContext:
    """Maps input codes to actions and routes them to registered devices."""

    def __init__(self) -> None:
        self._action_binds: dict[Hashable, list[InputAction]] = {}
        self._device_contexts: list[DeviceContext] = []

    def register_input_action(self, action: Union[InputAction, Hashable], code: Hashable) -> None:
        """Bind an action, or an action uid, to an input code."""
        if not isinstance(action, InputAction):
            action = InputAction(action)
        self._action_binds.setdefault(code, []).append(action)

    def register_device(self, controller: Any, device_info: DeviceInfo) -> None:
        """Register a controller listening to a device."""
        self._device_contexts.append(DeviceContext(controller, device_info))

    def unregister_device(self, controller: Any) -> None:
        """Remove the first device context of ``controller``, if any."""
        context = self._find_device_context(controller)
        if context is not None:
            self._device_contexts.remove(context)

    def signal(self, code: Hashable, trigger: TriggerEvent, device_info: DeviceInfo) -> None:
        """Queue the actions bound to ``code`` on every suitable device."""
        actions = self._action_binds.get(code)
        if not actions:
            return
        value = trigger_to_value(trigger)
        for device in self._device_contexts:
            if not device.is_device_suitable(device_info):
                continue
            for action in actions:
                device.signal_input(
                    InputSnapshot(action.uid, apply_modifiers_to_value(value, action.modifiers), trigger)
                )

    def dispatch(self) -> None:
        """Run the commands of every queued input."""
        for device in tuple(self._device_contexts):
            device.execute_commands()

    @property
    def devices(self) -> tuple[DeviceContext, ...]:
        """The registered device contexts, in registration order."""
        return tuple(self._device_contexts)

    def bind_to_input_action(
        self,
        controller: Any,
        uid: Hashable,
        command: Callable[[Any], Any],
        trigger: TriggerEvent,
    ) -> None:
        """Bind ``command`` to action ``uid`` for ``controller``.

        Raises LookupError if the controller has no registered device.
        """
        context = self._find_device_context(controller)
        if context is None:
            raise LookupError("no device context is registered for this controller")
        context.bind_command(uid, CommandInfo(command, trigger))

    def _find_device_context(self, controller: Any) -> Optional[DeviceContext]:
        return next((c for c in self._device_contexts if c.controller is controller), None)