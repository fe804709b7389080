"""Sound service interface, its enumerations and loaded audio handles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum, IntEnum, auto
from os import PathLike
from typing import Hashable, Optional, Union


class ServiceType(Enum):
    """Implementation behind a service."""

    SDL = auto()


class SoundType(Enum):
    """Kind of sound: short effects or long music tracks."""

    SOUND_EFFECT = auto()
    SOUND_TRACK = auto()


class QueuePolicy(Enum):
    """What to do when a new sound arrives and the queue is full."""

    DISCARD = auto()
    REPLACE_OLDEST = auto()
    REPLACE_NEWEST = auto()


class ChannelType(IntEnum):
    """Number of output channels."""

    MONO = 1
    STEREO = 2


class SampleRate(IntEnum):
    """Output sample rate in hertz."""

    HZ_8000 = 8000
    HZ_11025 = 11025
    HZ_16000 = 16000
    HZ_22050 = 22050
    HZ_32000 = 32000
    HZ_44100 = 44100
    HZ_48000 = 48000
    HZ_96000 = 96000
    HZ_192000 = 192000


class Audio:
    """A sound registered with a sound system."""

    __slots__ = ("_type", "_sound_id", "_tag_id")

    def __init__(self, sound_type: Union[SoundType, int], sound_id: Hashable, tag_id: Hashable) -> None:
        self._type = SoundType(sound_type)
        self._sound_id = sound_id
        self._tag_id = tag_id

    @property
    def sound_id(self) -> Hashable:
        """Identifier of the sound."""
        return self._sound_id

    @property
    def tag_id(self) -> Hashable:
        """Tag grouping the sound for volume control."""
        return self._tag_id

    @property
    def type(self) -> SoundType:
        """Whether this is an effect or a track."""
        return self._type

    def __repr__(self) -> str:
        return f"Audio({self._type.name}, sound_id={self._sound_id!r}, tag_id={self._tag_id!r})"


class SoundSystem(ABC):
    """Interface of a sound playback service."""

    @property
    @abstractmethod
    def service_type(self) -> ServiceType:
        """The underlying service type."""

    @abstractmethod
    def load_sound(
        self,
        path: Union[str, PathLike],
        sound_type: SoundType,
        tag_id: Hashable,
    ) -> Audio:
        """Register a sound file for later playback and return its handle."""

    @abstractmethod
    def play(self, audio: Audio, volume: float, loops: int = 0) -> int:
        """Play ``audio`` at ``volume`` in [0, 1], repeating ``loops`` times (-1 forever).

        Returns the channel used, or -1 if the sound is not playing.
        """

    @abstractmethod
    def stop(self, audio: Audio) -> bool:
        """Halt ``audio``; True if it was playing."""

    @abstractmethod
    def stop_all(self) -> None:
        """Halt every sound."""

    @abstractmethod
    def pause(self, audio: Audio) -> bool:
        """Pause ``audio``; True if it was playing."""

    @abstractmethod
    def resume(self, audio: Audio) -> bool:
        """Resume ``audio``, playing it if stopped; True if it was paused."""

    @abstractmethod
    def is_playing(self, audio: Audio) -> bool:
        """Whether ``audio`` is playing (not paused or stopped)."""

    @abstractmethod
    def is_paused(self, audio: Audio) -> bool:
        """Whether ``audio`` is paused."""

    @property
    @abstractmethod
    def current_track(self) -> Optional[Audio]:
        """The background track currently set, if any."""

    @abstractmethod
    def set_master_volume(self, volume: float) -> None:
        """Set the volume coefficient in [0, 1] applied to every sound."""

    @property
    @abstractmethod
    def master_volume(self) -> float:
        """The master volume coefficient in [0, 1]."""

    @abstractmethod
    def set_volume_by_tag(self, tag_id: Hashable, volume: float) -> None:
        """Set the volume coefficient in [0, 1] of a tag group; it combines with the master volume."""

    @abstractmethod
    def volume_by_tag(self, tag_id: Hashable) -> float:
        """The volume coefficient of a tag group."""