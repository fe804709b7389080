from __future__ import annotations

import numpy as np
import pytest

from minigin.binding import (
    CommandInfo,
    CommandSet,
    DeviceContext,
    DeviceInfo,
    DeviceType,
    InputAction,
    InputBuffer,
    InputMappingContext,
    InputSnapshot,
    Modifier,
    TriggerEvent,
    apply_modifiers_to_value,
    convert_input_value,
    merge_value_to_snapshot,
    trigger_to_value,
)

KEYBOARD = DeviceInfo(DeviceType.KEYBOARD)


class _Recorder:
    def __init__(self) -> None:
        self.floats: list[float] = []
        self.bools: list[bool] = []
        self.vectors: list[np.ndarray] = []

    def on_float(self, value: float) -> None:
        self.floats.append(value)

    def on_bool(self, value: bool) -> None:
        self.bools.append(value)

    def on_vector(self, value: np.ndarray) -> None:
        self.vectors.append(value)


def test_input_buffer_press_and_release():
    buffer = InputBuffer()
    buffer.trigger("space", 0)
    assert buffer.is_pressed("space", 0)
    assert not buffer.is_pressed("space", 1)
    assert buffer.pressed_this_frame == {("space", 0)}
    buffer.release("space", 0)
    assert not buffer.is_pressed("space", 0)
    assert buffer.pressed_this_frame == frozenset()


def test_input_buffer_release_unpressed_keeps_others():
    buffer = InputBuffer()
    buffer.trigger("a", 2)
    buffer.release("b", 2)
    assert buffer.pressed_this_frame == {("a", 2)}


def test_trigger_to_value():
    assert trigger_to_value(TriggerEvent.PRESSED) is True
    assert trigger_to_value(TriggerEvent.TRIGGERED) is True
    assert trigger_to_value(TriggerEvent.RELEASED) is False


def test_convert_scalar_to_vector_round_trip():
    vector = convert_input_value(2.5, np.ndarray)
    assert vector[1] == 0.0
    assert convert_input_value(vector, float) == 2.5


def test_convert_vector_to_bool():
    assert convert_input_value(np.array([0.0, 0.0]), bool) is False
    assert convert_input_value(np.array([0.0, -3.0]), bool) is True


def test_convert_unknown_type_raises():
    with pytest.raises(TypeError):
        convert_input_value(1.0, str)


@pytest.mark.parametrize("value", [True, False, 0.5])
def test_negate_flips_sign(value):
    plain = apply_modifiers_to_value(value, Modifier.NONE)
    assert apply_modifiers_to_value(value, Modifier.NEGATE) == -plain


@pytest.mark.parametrize("value", [True, 0.25])
def test_swizzle_moves_value_to_y(value):
    plain = apply_modifiers_to_value(value, Modifier.NONE)
    swizzled = apply_modifiers_to_value(value, Modifier.SWIZZLE)
    assert swizzled[0] == 0.0
    assert swizzled[1] == plain
    both = apply_modifiers_to_value(value, Modifier.SWIZZLE | Modifier.NEGATE)
    assert both[1] == -plain


def test_merge_bool_start_becomes_float():
    snapshot = InputSnapshot("jump", True, TriggerEvent.PRESSED)
    merge_value_to_snapshot(snapshot, 0.5)
    assert isinstance(snapshot.value, float)
    assert snapshot.value == 1.5


def test_merge_vector_dominates():
    snapshot = InputSnapshot("move", 0.5, TriggerEvent.PRESSED)
    merge_value_to_snapshot(snapshot, np.array([0.0, 2.0]))
    assert np.array_equal(snapshot.value, np.array([0.5, 2.0]))


def test_merge_into_vector_start():
    snapshot = InputSnapshot("move", np.array([0.0, 1.0]), TriggerEvent.PRESSED)
    merge_value_to_snapshot(snapshot, np.array([0.0, -1.0]))
    assert np.array_equal(snapshot.value, np.zeros(2))


def test_snapshot_equality_ignores_value():
    assert InputSnapshot("a", 1.0, TriggerEvent.PRESSED) == InputSnapshot("a", 3.0, TriggerEvent.PRESSED)
    assert not InputSnapshot("a", 1.0, TriggerEvent.PRESSED) == InputSnapshot("a", 1.0, TriggerEvent.RELEASED)


def test_command_set_runs_only_matching_trigger():
    recorder = _Recorder()
    commands = CommandSet()
    commands.set(CommandInfo(recorder.on_float, TriggerEvent.PRESSED))
    commands.set(CommandInfo(recorder.on_bool, TriggerEvent.RELEASED))
    commands.execute(True, TriggerEvent.PRESSED)
    assert recorder.floats == [1.0]
    assert recorder.bools == []
    commands.execute(False, TriggerEvent.RELEASED)
    assert recorder.bools == [False]


def test_command_set_converts_to_annotated_type():
    recorder = _Recorder()
    commands = CommandSet()
    commands.set(CommandInfo(recorder.on_vector, TriggerEvent.TRIGGERED))
    commands.execute(0.75, TriggerEvent.TRIGGERED)
    assert np.array_equal(recorder.vectors[0], convert_input_value(0.75, np.ndarray))


def test_command_set_rejects_invalid_trigger():
    commands = CommandSet()
    with pytest.raises(ValueError):
        commands.set(CommandInfo(lambda value: None, "pressed"))
    with pytest.raises(ValueError):
        commands.execute(1.0, "pressed")


def test_device_suitability():
    keyboard = DeviceContext(object(), KEYBOARD)
    gamepad = DeviceContext(object(), DeviceInfo(DeviceType.GAMEPAD, 1))
    assert keyboard.is_device_suitable(DeviceInfo(DeviceType.KEYBOARD, 7))
    assert not keyboard.is_device_suitable(DeviceInfo(DeviceType.GAMEPAD, 0))
    assert gamepad.is_device_suitable(DeviceInfo(DeviceType.GAMEPAD, 1))
    assert not gamepad.is_device_suitable(DeviceInfo(DeviceType.GAMEPAD, 2))
    assert not gamepad.is_device_suitable(KEYBOARD)


def test_device_context_ignores_unbound_action():
    context = DeviceContext(object(), KEYBOARD)
    context.signal_input(InputSnapshot("fire", 1.0, TriggerEvent.PRESSED))
    assert context.pending == ()


def test_device_context_merges_and_executes():
    recorder = _Recorder()
    context = DeviceContext(object(), KEYBOARD)
    context.bind_command("move", CommandInfo(recorder.on_float, TriggerEvent.PRESSED))
    first = InputSnapshot("move", 1.0, TriggerEvent.PRESSED)
    context.signal_input(first)
    context.signal_input(InputSnapshot("move", -1.0, TriggerEvent.PRESSED))
    assert len(context.pending) == 1
    assert first.value == 1.0
    context.execute_commands()
    assert recorder.floats == [0.0]
    assert context.pending == ()


def test_mapping_context_end_to_end():
    recorder = _Recorder()
    controller = object()
    context = InputMappingContext()
    context.register_input_action("jump", "space")
    context.register_input_action(InputAction("jump_down", Modifier.NEGATE), "space")
    context.register_device(controller, KEYBOARD)
    context.bind_to_input_action(controller, "jump", recorder.on_float, TriggerEvent.PRESSED)
    context.bind_to_input_action(controller, "jump_down", recorder.on_float, TriggerEvent.PRESSED)

    context.signal("space", TriggerEvent.PRESSED, KEYBOARD)
    context.dispatch()
    assert recorder.floats == [1.0, -1.0]

    context.dispatch()
    assert len(recorder.floats) == 2


def test_mapping_context_routes_gamepads_by_id():
    recorder = _Recorder()
    controller = object()
    context = InputMappingContext()
    context.register_input_action("fire", "a")
    context.register_device(controller, DeviceInfo(DeviceType.GAMEPAD, 0))
    context.bind_to_input_action(controller, "fire", recorder.on_bool, TriggerEvent.RELEASED)

    context.signal("a", TriggerEvent.RELEASED, DeviceInfo(DeviceType.GAMEPAD, 1))
    context.dispatch()
    assert recorder.bools == []

    context.signal("a", TriggerEvent.RELEASED, DeviceInfo(DeviceType.GAMEPAD, 0))
    context.dispatch()
    assert recorder.bools == [False]


def test_mapping_context_unknown_code_is_ignored():
    recorder = _Recorder()
    controller = object()
    context = InputMappingContext()
    context.register_device(controller, KEYBOARD)
    context.bind_to_input_action(controller, "fire", recorder.on_float, TriggerEvent.PRESSED)
    context.signal("unmapped", TriggerEvent.PRESSED, KEYBOARD)
    context.dispatch()
    assert recorder.floats == []


def test_unregister_device():
    first, second = object(), object()
    context = InputMappingContext()
    context.register_device(first, KEYBOARD)
    context.register_device(second, KEYBOARD)
    context.unregister_device(first)
    assert [device.controller for device in context.devices] == [second]
    context.unregister_device(first)
    assert len(context.devices) == 1


def test_bind_without_device_raises():
    context = InputMappingContext()
    with pytest.raises(LookupError):
        context.bind_to_input_action(object(), "fire", lambda value: None, TriggerEvent.PRESSED)