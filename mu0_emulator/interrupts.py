"""
MU0 Emulator — Interrupt Signals

Each executed instruction yields at most one signal for the host:
  None               — keep going
  Halt()             — STP executed; stop before the next fetch
  NumberOutput(v)    — SWI 0 executed; print v, then keep going

The CPU never does I/O itself.
"""

from dataclasses import dataclass


class Interrupt:
    """Base class for signals returned by MU0Emulator.step()."""
    __slots__ = ()


@dataclass(frozen=True)
class Halt(Interrupt):
    pass


@dataclass(frozen=True)
class NumberOutput(Interrupt):
    value: int
