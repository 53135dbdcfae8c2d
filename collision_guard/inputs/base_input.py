import abc
from typing import Iterator

from collision_guard.utils.types import VehicleState


class BaseInput(abc.ABC):
    """Source of self-vehicle states at its own cadence."""

    @abc.abstractmethod
    def start(self) -> None:
        ...

    @abc.abstractmethod
    def stop(self) -> None:
        ...

    @abc.abstractmethod
    def positions(self) -> Iterator[VehicleState]:
        ...
