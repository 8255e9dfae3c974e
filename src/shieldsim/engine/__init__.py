"""Headless scheduling primitives shared by timer ticks and driver commands."""

from .clock import ScheduledHandle, SimulationClock

__all__ = ["ScheduledHandle", "SimulationClock"]
