"""Motion sensor sources."""

from alias_scanner.core.sensor.motion_sensors import (
    PollingMotionSensor,
    StationaryMotionSensor
)

__all__ = ["PollingMotionSensor", "StationaryMotionSensor"]
