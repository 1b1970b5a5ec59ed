"""
MU0 Assembler
=============
Two-pass assembler for the MU0 teaching computer: one accumulator,
4096 words of 16-bit memory, nine instructions.

Architecture:
    ┌────────────┐    ┌──────────┐    ┌──────────┐    ┌──────────────┐
    │ MU0 Source │───>│  Pass 1  │───>│  Pass 2  │───>│ Memory Image │
    │ (.asm)     │    │ (labels) │    │ (encode) │    │ (4096 words) │
    └────────────┘    └──────────┘    └──────────┘    └──────────────┘

    - opcodes.py:   Opcode table + field masks, shared with mu0_emulator
    - assembler.py: Tokenizer, symbol table, both passes, listing
"""

from pathlib import Path
from typing import List, Union

__version__ = "0.1.0"

from .opcodes import OPCODE_MAP, MEM_SIZE, Opcode
from .assembler import (
    Assembler, AssemblerError, UndefinedSymbolError, InvalidLiteralError,
    MalformedLineError, DuplicateSymbolError, assemble,
)


def assemble_file(path: Union[str, Path]) -> List[int]:
    """Read an MU0 source file (UTF-8) and return its memory image."""
    source = Path(path).read_text(encoding="utf-8")
    return assemble(source)
