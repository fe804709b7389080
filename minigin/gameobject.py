"""Game objects, their components and the scenes that own them."""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Hashable, Iterable, Optional, TypeVar

import numpy as np

from minigin.events import Dispatcher, MulticastDelegate
from minigin.transform import Transform, TransformOperator

NULL_UID: Optional[Hashable] = None

E = TypeVar("E")
C = TypeVar("C", bound="Component")


class _Deleter(Generic[E]):
    """Collects elements marked for deletion until the next cleanup."""

    def __init__(self) -> None:
        self._marked: dict[int, E] = {}

    def mark(self, element: E) -> None:
        self._marked[id(element)] = element

    def cleanup_needed(self) -> bool:
        return bool(self._marked)

    def split(self, container: Iterable[E]) -> tuple[list[E], list[E]]:
        """Return the kept and the removed elements of ``container``, in order."""
        marked = self._marked
        self._marked = {}
        kept: list[E] = []
        removed: list[E] = []
        for element in container:
            (removed if id(element) in marked else kept).append(element)
        return kept, removed


class Deletable(ABC):
    """Something that can be scheduled for deletion at the next cleanup."""

    @abstractmethod
    def mark_for_deletion(self) -> None:
        """Schedule this object for deletion."""


class Component(Deletable):
    """Behaviour attached to a game object."""

    def __init__(self, owner: "GameObject") -> None:
        self._owner = owner
        self._owner_deleting = False
        owner.on_deletion.bind(self.begin_owner_deletion, self)

    @property
    def owner(self) -> "GameObject":
        """The game object this component belongs to."""
        return self._owner

    @property
    def owner_deleting(self) -> bool:
        """Whether the owner has started being destroyed."""
        return self._owner_deleting

    def fixed_tick(self) -> None:
        """Called on every fixed-rate update."""

    def tick(self) -> None:
        """Called once per frame."""

    def render(self) -> None:
        """Called when the owner is rendered."""

    def mark_for_deletion(self) -> None:
        """Remove this component from its owner at the next cleanup."""
        self._owner.remove_component(self)

    def begin_owner_deletion(self) -> None:
        """Called when the owner is being destroyed; records that it is."""
        self._owner_deleting = True

    def destroy(self) -> None:
        """Release the component; it no longer hears of its owner's deletion."""
        self._owner.on_deletion.unbind_binder(self)


class GameObject(Deletable):
    """A node of the scene hierarchy carrying a transform and components."""

    def __init__(self, scene: "Scene") -> None:
        self._on_deletion_dispatcher = Dispatcher()
        self.on_deletion = MulticastDelegate(self._on_deletion_dispatcher)

        self._scene = scene
        self._tag: Optional[Hashable] = NULL_UID
        self._visible = True
        self._parent: Optional[GameObject] = None
        self._children: list[GameObject] = []

        self._local_transform = Transform()
        self._world_transform = Transform()
        self._transform_dirty = False

        self._components: dict[type, list[Component]] = {}
        self._deleter: _Deleter[Component] = _Deleter()
        self._destroyed = False

    def _all_components(self) -> list[Component]:
        return [c for group in self._components.values() for c in group]

    def fixed_tick(self) -> None:
        """Fixed-rate update of every component."""
        for component in self._all_components():
            component.fixed_tick()

    def tick(self) -> None:
        """Per-frame update of every component."""
        for component in self._all_components():
            component.tick()

    def render(self) -> None:
        """Render every component, unless the object is hidden."""
        if not self._visible:
            return
        for component in self._all_components():
            component.render()

    def cleanup(self) -> None:
        """Delete the components marked for deletion."""
        if not self._deleter.cleanup_needed():
            return
        _, removed = self._deleter.split(self._all_components())
        removed_ids = {id(c) for c in removed}
        for key in list(self._components):
            kept = [c for c in self._components[key] if id(c) not in removed_ids]
            if kept:
                self._components[key] = kept
            else:
                del self._components[key]
        for component in removed:
            component.destroy()

    @property
    def owning_scene(self) -> "Scene":
        """The scene that owns this object."""
        return self._scene

    @property
    def tag(self) -> Optional[Hashable]:
        """A user-defined tag; None when unset."""
        return self._tag

    @tag.setter
    def tag(self, tag: Optional[Hashable]) -> None:
        self._tag = tag

    @property
    def visible(self) -> bool:
        """Whether the object is rendered."""
        return self._visible

    def set_visibility(self, visible: bool) -> None:
        """Show or hide this object and all its descendants."""
        self._visible = visible
        for child in self._children:
            child.set_visibility(visible)

    def set_parent(self, parent: Optional["GameObject"], keep_world_position: bool = True) -> None:
        """Attach to ``parent``, or detach with None.

        Attaching to itself, to a descendant or to the current parent does nothing.
        """
        if self._is_child(parent) or parent is self or parent is self._parent:
            return

        if parent is None:
            self.set_local_transform(self.world_transform)
        else:
            if keep_world_position:
                translation = self.world_transform.position - parent.world_transform.position
                self.set_local_transform(Transform.from_translation(translation))
            self._set_transform_dirty()

        if self._parent is not None:
            self._parent._remove_child(self)
        if parent is not None:
            parent._children.append(self)
        self._parent = parent

    @property
    def parent(self) -> Optional["GameObject"]:
        """The parent object, or None for a root object."""
        return self._parent

    @property
    def world_transform(self) -> Transform:
        """The transform in world space."""
        self._update_world_transform()
        return self._world_transform

    @property
    def local_transform(self) -> Transform:
        """The transform relative to the parent."""
        return self._local_transform

    def set_world_transform(self, transform: Transform) -> None:
        """Set the local transform so that the world transform equals ``transform``."""
        if self._parent is None:
            self.set_local_transform(transform)
        else:
            parent_inverse = np.linalg.inv(self._parent.world_transform.matrix)
            self.set_local_transform(Transform(parent_inverse @ transform.matrix))

    def set_local_transform(self, transform: Transform) -> None:
        """Replace the local transform."""
        self._local_transform = Transform(transform)
        self._set_transform_dirty()

    @property
    def transform_operator(self) -> TransformOperator:
        """An operator applying incremental moves to this object."""
        return TransformOperator(self)

    def add_component(self, component_type: type, *args: Any, **kwargs: Any) -> Any:
        """Create a component of ``component_type`` owned by this object and return it."""
        if not (isinstance(component_type, type) and issubclass(component_type, Component)):
            raise TypeError("add_component needs a Component subclass")
        component = component_type(self, *args, **kwargs)
        self._components.setdefault(component_type, []).append(component)
        return component

    def get_component(self, component_type: type) -> Optional[Any]:
        """The first component of exactly ``component_type``, or None."""
        group = self._components.get(component_type)
        return group[0] if group else None

    def remove_component(self, component: Component) -> None:
        """Delete ``component`` at the next cleanup."""
        self._deleter.mark(component)

    def create_child(self) -> "GameObject":
        """Create a new object in the same scene, parented to this one."""
        child = self._scene.create_object()
        child.set_parent(self, False)
        return child

    @property
    def children(self) -> tuple["GameObject", ...]:
        """The direct children."""
        return tuple(self._children)

    def collect_children(self) -> list["GameObject"]:
        """All descendants, depth first, each before its own children."""
        collected: list[GameObject] = []
        for child in self._children:
            collected.append(child)
            collected.extend(child.collect_children())
        return collected

    def mark_for_deletion(self) -> None:
        """Delete this object and its descendants at the next scene cleanup."""
        self._scene.remove(self)

    def destroy(self) -> None:
        """Detach from the hierarchy, notify listeners and release components."""
        if self._destroyed:
            return
        self._destroyed = True
        if self._parent is not None:
            self._parent._remove_child(self)
        for child in tuple(self._children):
            child.set_parent(None, False)
        self._on_deletion_dispatcher.broadcast()
        for component in self._all_components():
            component.destroy()
        self._components.clear()

    def _is_child(self, game_object: Optional["GameObject"]) -> bool:
        return any(child is game_object or child._is_child(game_object) for child in self._children)

    def _remove_child(self, game_object: "GameObject") -> None:
        self._children[:] = [child for child in self._children if child is not game_object]

    def _set_transform_dirty(self) -> None:
        self._transform_dirty = True
        for child in self._children:
            child._set_transform_dirty()

    def _update_world_transform(self) -> None:
        if not self._transform_dirty:
            return
        if self._parent is None:
            self._world_transform = self._local_transform
        else:
            self._world_transform = self._parent.world_transform * self._local_transform
        self._transform_dirty = False


class GameObjectView:
    """A restricted handle on a game object."""

    def __init__(self, game_object: GameObject) -> None:
        self._game_object = game_object

    @property
    def world_transform(self) -> Transform:
        """The viewed object's world transform."""
        return self._game_object.world_transform

    @property
    def local_transform(self) -> Transform:
        """The viewed object's local transform."""
        return self._game_object.local_transform

    def set_world_transform(self, transform: Transform) -> None:
        """Set the viewed object's world transform."""
        self._game_object.set_world_transform(transform)

    def set_local_transform(self, transform: Transform) -> None:
        """Set the viewed object's local transform."""
        self._game_object.set_local_transform(transform)

    def remove_component(self, component: Component) -> None:
        """Schedule a component of the viewed object for deletion."""
        self._game_object.remove_component(component)


class Scene:
    """Owns game objects and drives their updates."""

    _id_counter = itertools.count()

    def __init__(self, name: str) -> None:
        self._name = name
        self._id = next(Scene._id_counter) % 0x10000
        self._objects: list[GameObject] = []
        self._deleter: _Deleter[GameObject] = _Deleter()

    def add(self, game_object: GameObject) -> None:
        """Take ownership of an existing object."""
        if game_object is None:
            raise ValueError("object cannot be None")
        self._objects.append(game_object)

    def create_object(self) -> GameObject:
        """Create a root object owned by this scene."""
        game_object = GameObject(self)
        self._objects.append(game_object)
        return game_object

    @property
    def name(self) -> str:
        """The scene name."""
        return self._name

    @property
    def id(self) -> int:
        """A number unique to each scene created."""
        return self._id

    @property
    def objects(self) -> tuple[GameObject, ...]:
        """The owned objects, in creation order."""
        return tuple(self._objects)

    def remove(self, game_object: GameObject) -> None:
        """Delete ``game_object`` and its descendants at the next cleanup."""
        self._deleter.mark(game_object)
        for child in game_object.children:
            self.remove(child)

    def remove_all(self) -> None:
        """Delete every object at the next cleanup."""
        for game_object in self._objects:
            self._deleter.mark(game_object)

    def find_object(self, predicate: Callable[[GameObject], bool]) -> Optional[GameObject]:
        """The first object satisfying ``predicate``, or None."""
        return next((obj for obj in self._objects if predicate(obj)), None)

    def fixed_tick(self) -> None:
        """Fixed-rate update of every object."""
        for game_object in tuple(self._objects):
            game_object.fixed_tick()

    def tick(self) -> None:
        """Per-frame update of every object."""
        for game_object in tuple(self._objects):
            game_object.tick()

    def render(self) -> None:
        """Render every object."""
        for game_object in tuple(self._objects):
            game_object.render()

    def cleanup(self) -> None:
        """Destroy marked objects, then let each object clean up its components."""
        if self._deleter.cleanup_needed():
            kept, removed = self._deleter.split(self._objects)
            self._objects = kept
            for game_object in removed:
                game_object.destroy()
        for game_object in tuple(self._objects):
            game_object.cleanup()