from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by schedsim."""


class InvalidProcessError(SchedulerError, ValueError):
    """A process record is malformed or violates the input constraints."""


class UnsupportedPolicyError(SchedulerError, ValueError):
    """The requested scheduling policy does not exist."""


class InvalidQuantumError(SchedulerError, ValueError):
    """Round Robin was given a missing or non-positive quantum."""


class SimulationError(SchedulerError, RuntimeError):
    """
    Internal invariant violated while simulating.

    Raised instead of looping forever, e.g. when nothing is available to run
    although an unfinished process has already arrived.
    """
