"""
MU0 Emulator — 16-bit ALU

The accumulator is a 16-bit two's complement register. ADD and SUB wrap
on overflow exactly like fixed-width hardware: 32767 + 1 == -32768.

Each arithmetic function returns (result, flags) where flags is a CC word
(CC_N | CC_Z); the caller applies it with Registers.set_NZ().
"""

from mu0_assembler.opcodes import WORD_MASK

from .regs import CC_N, CC_Z


def to_signed16(value: int) -> int:
    """Interpret the low 16 bits of value as a signed integer."""
    value &= WORD_MASK
    return value - 0x10000 if value & 0x8000 else value


def to_unsigned16(value: int) -> int:
    """Two's complement word for a signed value."""
    return value & WORD_MASK


def nz_flags(value: int) -> int:
    """N and Z flags for a signed result."""
    flags = 0
    if value == 0:
        flags |= CC_Z
    if value < 0:
        flags |= CC_N
    return flags


def load16(word: int) -> tuple:
    """LDA: memory word → (signed ACC, flags)."""
    result = to_signed16(word)
    return result, nz_flags(result)


def add16(a: int, b: int) -> tuple:
    """ACC + M with 16-bit wraparound."""
    result = to_signed16(a + b)
    return result, nz_flags(result)


def sub16(a: int, b: int) -> tuple:
    """ACC - M with 16-bit wraparound."""
    result = to_signed16(a - b)
    return result, nz_flags(result)
