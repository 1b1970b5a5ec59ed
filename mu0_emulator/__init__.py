# MU0 Virtual Emulator — fetch/decode/execute core for the MU0 teaching CPU
# Part of the MU0 toolkit (pairs with mu0_assembler)
#
# Layout mirrors a real machine:
#   cpu/  — registers, ALU, decoder
#   mem/  — 4096-word memory
#   emu.py — the fetch/execute loop and instruction handlers
"""MU0 emulator package."""

from .emu import MU0Emulator, CPUError, CPUHaltedError
from .interrupts import Interrupt, Halt, NumberOutput
from .dump import dump_memory

__all__ = [
    "MU0Emulator",
    "CPUError",
    "CPUHaltedError",
    "Interrupt",
    "Halt",
    "NumberOutput",
    "dump_memory",
]
