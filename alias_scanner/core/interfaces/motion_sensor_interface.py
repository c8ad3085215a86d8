"""
Motion Sensor Interface Module.

Defines the accelerometer sample type and the sensor source contract.
Samples are delivered on the sensor's own thread at a fixed interval.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class StabilitySample:
    """Single accelerometer reading (in g)."""
    x: float
    y: float
    z: float


class IMotionSensor(ABC):
    """
    Interface for a motion sensor source.
    """

    @abstractmethod
    def isAvailable(self) -> bool:
        """
        Check whether the sensor can deliver samples.

        Returns:
            bool: True if the sensor is present and authorized.
        """
        pass

    @abstractmethod
    def start(self, onSample: Callable[[StabilitySample], None]) -> bool:
        """
        Start delivering samples to a callback.

        Args:
            onSample: Called for every new sample, on the sensor's thread.

        Returns:
            bool: True if delivery started.
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering samples."""
        pass

    @property
    @abstractmethod
    def updateInterval(self) -> float:
        """Seconds between samples."""
        pass
