"""Core of a small 2D game engine: scenes, transforms, events, state machines, collisions, sound interface and input binding."""

__version__ = "0.1.0"

__all__ = [
    "binding",
    "event_queue",
    "events",
    "fsm",
    "gameobject",
    "logic",
    "physics",
    "sound",
    "transform",
]