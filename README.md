# minigin

minigin is the core of a small 2D game engine, packaged as a plain Python
library. It covers the scene graph, transforms, events, state machines, box
collisions and input binding. The only dependency is numpy. Vectors and
matrices are numpy arrays.

## Modules

- **`minigin.transform`**
  - `Transform` is a 2D affine transform held as a read-only 3×3 matrix.
  - Its properties are `position` and `matrix`.
  - `translate`, `rotate` and `scale` return new transforms.
  - `combine` post-multiplies in place.
  - `*` (or ` @ `) composes two transforms.
  - The static constructors are `from_translation`, `from_rotation` and
    `from_scale`.
  - `TransformOperator` moves or rotates a game object in its local space.
- **`minigin.gameobject`**
  - `Scene` owns the game objects.
  - `GameObject` is a node with a parent and children, a local transform and
    a lazily computed world transform, components, visibility and a tag.
  - `Component` is the base class for behaviour. It has `tick`, `fixed_tick`
    and `render` hooks, and `begin_owner_deletion`.
  - `GameObjectView` is a restricted handle on a game object.
  - Deletion is deferred. `mark_for_deletion()` and `remove_component()` only
    schedule the removal; it happens in `Scene.cleanup()` or
    `GameObject.cleanup()`.
- **`minigin.events`**
  - `Subject` and `Observer` implement the observer pattern. The observer
    added most recently is notified first.
  - `Dispatcher` and `MulticastDelegate` are multicast delegates. Delegates
    are bound with `bind(delegate, binder=None)` and removed with
    `unbind(delegate)` or `unbind_binder(binder)`.
- **`minigin.event_queue`**
  - `EventQueue` is a FIFO of events with `push`, `front`, `pop`, `empty`,
    `clear` and `is_queued`.
  - `is_queued` takes either an event or a predicate.
- **`minigin.fsm`**
  - `State` can be given its hooks as callables or as overrides.
  - `Condition` is the base class for transition guards.
  - `FiniteStateMachine` allows one state per id. It supports intermediate
    states, which are re-evaluated within the same tick.
  - `FiniteMultiStateMachine` allows several states to share one id.
- **`minigin.logic`**
  - These are condition combinators: `And`, `Or`, `Nand`, `Nor`, `Not` and
    `Negate`, with the base class `Combine`.
  - Each accepts condition instances or condition classes.
- **`minigin.physics`**
  - `BoxColliderComponent` is an axis-aligned box.
  - `ColliderComponent.late_tick()` tests every pair of enabled colliders. It
    fires `on_begin_overlap` and `on_end_overlap`.
  - `PhysicsComponent` holds a velocity and applies forces. Gravity and the
    step length are given to it when it is created.
  - `CollisionInfo` and `CollisionStatus` describe the result of a hit test.
- **`minigin.sound`**
  - This module holds the abstract `SoundSystem` interface and the `Audio`
    handle.
  - It also holds the enums `ServiceType`, `SoundType`, `QueuePolicy`,
    `ChannelType` and `SampleRate`.
- **`minigin.binding`**
  - `InputMappingContext` maps input codes to actions and routes them to the
    devices registered by controllers.
  - `DeviceContext` queues the inputs for one device and merges them. The
    queued inputs are run by `dispatch()`.
  - The rest of the module is `InputBuffer`, `InputAction`, `Modifier`
    (`NEGATE`, `SWIZZLE`), `DeviceInfo`, `DeviceType`, `TriggerEvent`,
    `CommandSet`, and helper functions for converting values.

## Installation

```
pip install .
```

## Examples

### Scene graph

```python
from minigin.gameobject import Scene
from minigin.transform import Transform

scene = Scene("level")
parent = scene.create_object()
child = parent.create_child()

parent.set_local_transform(Transform.from_translation((10.0, 5.0)))
print(child.world_transform.position)   # [10.  5.]

child.mark_for_deletion()
scene.cleanup()                         # the child is destroyed here
```

### State machine

```python
from minigin.fsm import Condition, FiniteStateMachine, State

class Always(Condition):
    def evaluate(self, blackboard):
        return True

blackboard = {}
machine = FiniteStateMachine(blackboard)
machine.create_state("idle", State())
machine.create_state("run", State(on_enter=lambda bb: bb.update(running=True)))
machine.add_transition("idle", "run", Always)
machine.start("idle")
machine.tick()
assert machine.current_state_id == "run"
assert blackboard["running"] is True
```

### Collisions

```python
from minigin.gameobject import Scene
from minigin.physics import BoxColliderComponent, ColliderComponent

scene = Scene("arena")
a = scene.create_object().add_component(BoxColliderComponent, (10.0, 10.0))
b = scene.create_object().add_component(BoxColliderComponent, (10.0, 10.0), (5.0, 0.0))

hits = []
a.on_begin_overlap.bind(lambda me, other, info: hits.append(info.depth))
ColliderComponent.late_tick()
assert hits == [5.0]
```

Every live collider is held in one registry for the whole process. A
collider leaves the registry only when it is destroyed.

### Input binding

```python
from minigin.binding import DeviceInfo, DeviceType, InputMappingContext, TriggerEvent

context = InputMappingContext()
controller = object()
keyboard = DeviceInfo(DeviceType.KEYBOARD)
context.register_device(controller, keyboard)
context.register_input_action("jump", "space")

received = []
def on_jump(value: bool):
    received.append(value)

context.bind_to_input_action(controller, "jump", on_jump, TriggerEvent.PRESSED)
context.signal("space", TriggerEvent.PRESSED, keyboard)
context.dispatch()
assert received == [True]
```

The first parameter annotation of a command picks the value it receives:
`bool`, `float` or `numpy.ndarray`. A command with no annotation receives a
`float`.

## What the package does not do

minigin has no window, renderer, game loop or frame timer. It does not read
input from real devices and does not play sound.

- `SoundSystem` is an interface only.
- `render()` methods are hooks for your own drawing code.
- `PhysicsComponent` takes its step length and gravity from you, not from a
  clock.
- Input codes must be fed in through `InputMappingContext.signal()`.
- There is no resource manager and no text or texture component.

## Running the tests

```
pip install .[test]
pytest
```