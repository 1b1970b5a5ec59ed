"""
MU0 Emulator — Instruction Decoder

Splits an instruction word into its opcode (bits 15-12) and operand
(bits 11-0). The mnemonic table is the assembler's own OPCODE_MAP
reversed, so both sides always agree on the encoding.

Opcodes 9-15 decode with mnemonic None; the CPU treats them as no-ops.
"""

from typing import NamedTuple, Optional

from mu0_assembler.opcodes import ADDR_MASK, MNEMONICS, OPCODE_SHIFT


class Decoded(NamedTuple):
    opcode: int
    operand: int
    mnemonic: Optional[str]


def decode(word: int) -> Decoded:
    """Decode one 16-bit instruction word."""
    opcode = (word >> OPCODE_SHIFT) & 0xF
    operand = word & ADDR_MASK
    return Decoded(opcode, operand, MNEMONICS.get(opcode))

