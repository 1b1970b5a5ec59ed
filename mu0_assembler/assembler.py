"""
MU0 Two-Pass Assembler.

Assembles MU0 mnemonic source text into a 4096-word memory image.

Input:  Assembly text, one statement per line
Output: List of 4096 16-bit words (the memory image), plus a listing

Source format (tokens are case-insensitive, ';' starts a comment):
  org  <address>            — set the assembly address counter
  name equ <value>          — define a named constant
  [label] lda|sta|add|sub|jmp|jge|jne <name>
  [label] stp
  [label] defw <literal>    — raw 16-bit data word
  [label] swi <code>        — software interrupt (0 = print accumulator)
  label                     — bare label, names the current address

How the two-pass algorithm works:
  Pass 1: Walk all lines tracking the address counter. Labels get the
          current address, EQU names get their literal value, every
          instruction or DEFW reserves one word. ORG moves the counter.
  Pass 2: Walk the surviving lines again with a fresh counter and emit
          (opcode << 12) | operand for each instruction. Every operand
          name must now be in the symbol table.

Every instruction is exactly one word, so unlike a variable-length ISA
pass 1 never has to guess instruction sizes.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
import logging
import re

from .opcodes import (
    ADDR_MASK, DEFW, EQU, MEM_SIZE, NO_OPERAND_SET, OPCODE_MAP, ORG,
    RESERVED_WORDS, SLOT_TOKENS, SYMBOL_OPERAND_SET, WORD_MASK, Opcode, encode,
)

__all__ = [
    'Assembler', 'AssemblerError', 'UndefinedSymbolError',
    'InvalidLiteralError', 'MalformedLineError', 'DuplicateSymbolError',
    'assemble',
]

logger = logging.getLogger(__name__)


class AssemblerError(Exception):
    """Raised on assembly errors."""
    def __init__(self, message: str, line_num: int = 0, line_text: str = ""):
        self.line_num = line_num
        self.line_text = line_text
        super().__init__(f"Line {line_num}: {message}" if line_num else message)


class UndefinedSymbolError(AssemblerError):
    """Operand names a symbol that is never defined."""
    def __init__(self, name: str, line_num: int = 0, line_text: str = ""):
        self.name = name
        super().__init__(f"Undefined symbol: '{name}'", line_num, line_text)


class InvalidLiteralError(AssemblerError):
    """A numeric literal is malformed or out of range."""
    def __init__(self, token: str, line_num: int = 0, line_text: str = "",
                 reason: str = "invalid numeric literal"):
        self.token = token
        super().__init__(f"{reason}: '{token}'", line_num, line_text)


class MalformedLineError(AssemblerError):
    """Line structure is wrong (bad label line, wrong operand count...)."""


class DuplicateSymbolError(AssemblerError):
    """A label or EQU name is defined twice."""
    def __init__(self, name: str, line_num: int = 0, line_text: str = ""):
        self.name = name
        super().__init__(f"Symbol '{name}' already defined", line_num, line_text)


# ──────────────────────────────────────────────
# Line Parser
# ──────────────────────────────────────────────

@dataclass
class AsmLine:
    """Tokenized assembly source line."""
    tokens: List[str] = field(default_factory=list)
    line_num: int = 0
    raw: str = ""


def _parse_line(line: str, line_num: int) -> Optional[AsmLine]:
    """Strip the comment and split into lowercase tokens. Blank → None."""
    text = line.split(';', 1)[0].strip()
    if not text:
        return None
    return AsmLine(tokens=text.lower().split(), line_num=line_num, raw=line.strip())


_LITERAL_RE = re.compile(r'^(-?[0-9]+|0x[0-9a-f]+)$')


def _is_literal(token: str) -> bool:
    return bool(_LITERAL_RE.match(token))


def _parse_literal(token: str, line: AsmLine, low: int, high: int) -> int:
    """Parse a decimal (optionally signed) or 0x-hex literal within [low, high]."""
    if not _is_literal(token):
        raise InvalidLiteralError(token, line.line_num, line.raw)
    value = int(token, 16) if token.startswith('0x') else int(token)
    if not low <= value <= high:
        raise InvalidLiteralError(
            token, line.line_num, line.raw,
            reason=f"value out of range {low}..{high}")
    return value


# Literal ranges per use
ORG_RANGE = (0, MEM_SIZE - 1)
SWI_RANGE = (0, ADDR_MASK)
WORD_RANGE = (-0x8000, WORD_MASK)


# ──────────────────────────────────────────────
# The Assembler
# ──────────────────────────────────────────────

class Assembler:
    """Two-pass MU0 assembler.

    Usage:
        asm = Assembler()
        image = asm.assemble(source_text)   # 4096 words
        print(asm.get_listing())
    """

    def __init__(self):
        self.symbols: Dict[str, int] = {}     # Label/EQU symbol table: name -> value
        self.pc: int = 0                      # Assembly address counter
        self.image: List[int] = [0] * MEM_SIZE
        self.errors: List[AssemblerError] = []
        self._lines: List[AsmLine] = []       # Lines surviving pass 1
        self._emitted: List[Tuple[int, int, AsmLine]] = []  # (addr, word, line)

    def assemble(self, source: str) -> List[int]:
        """Assemble source text into a memory image.

        Raises the first AssemblerError found; any further errors from the
        same pass are logged and kept in self.errors.
        """
        self.symbols = {}
        self.errors = []
        self._lines = []
        self._emitted = []
        self.image = [0] * MEM_SIZE

        parsed = []
        for i, raw in enumerate(source.splitlines(), 1):
            line = _parse_line(raw, i)
            if line is not None:
                parsed.append(line)

        logger.debug("Pass 1: %d source statements", len(parsed))
        self._pass1(parsed)
        self._raise_errors()
        logger.debug("Pass 1: %d symbols defined", len(self.symbols))

        logger.debug("Pass 2: encoding %d lines", len(self._lines))
        self._pass2()
        self._raise_errors()
        logger.debug("Pass 2: %d words emitted", len(self._emitted))

        return self.image

    def _raise_errors(self):
        if not self.errors:
            return
        for extra in self.errors[1:]:
            logger.error("%s", extra)
        raise self.errors[0]

    # --- Pass 1 ---

    def _pass1(self, lines: List[AsmLine]):
        """Pass 1: assign addresses to labels, record EQU constants."""
        self.pc = 0
        for line in lines:
            try:
                if self._pass1_line(line):
                    self._lines.append(line)
            except AssemblerError as e:
                self.errors.append(e)

    def _pass1_line(self, line: AsmLine) -> bool:
        """Process one line. Returns False when the line is fully consumed."""
        first = line.tokens[0]

        if first in SLOT_TOKENS or first == ORG:
            self._pass1_statement(line)
            return True

        # name equ value
        if len(line.tokens) > 1 and line.tokens[1] == EQU:
            if len(line.tokens) != 3:
                raise MalformedLineError(
                    "EQU requires: name equ value", line.line_num, line.raw)
            value = _parse_literal(line.tokens[2], line, *WORD_RANGE)
            self._define(first, value, line)
            return False

        # label [statement]
        self._define(first, self.pc & ADDR_MASK, line)
        line.tokens = line.tokens[1:]
        if not line.tokens:
            return False  # bare label, names the current address
        if line.tokens[0] not in SLOT_TOKENS and line.tokens[0] != ORG:
            raise MalformedLineError(
                f"Expected instruction after label '{first}', got '{line.tokens[0]}'",
                line.line_num, line.raw)
        self._pass1_statement(line)
        return True

    def _pass1_statement(self, line: AsmLine):
        mnem = line.tokens[0]
        self._check_arity(line)
        if mnem == ORG:
            self.pc = _parse_literal(line.tokens[1], line, *ORG_RANGE)
        else:
            self.pc += 1

    @staticmethod
    def _check_arity(line: AsmLine):
        mnem = line.tokens[0]
        expected = 1 if mnem in NO_OPERAND_SET else 2
        if len(line.tokens) != expected:
            if expected == 1:
                msg = f"{mnem.upper()} takes no operand"
            else:
                msg = f"{mnem.upper()} requires exactly one operand"
            raise MalformedLineError(msg, line.line_num, line.raw)

    def _define(self, name: str, value: int, line: AsmLine):
        if name in RESERVED_WORDS or _is_literal(name):
            raise MalformedLineError(
                f"'{name}' is not a valid label or instruction", line.line_num, line.raw)
        if name in self.symbols:
            raise DuplicateSymbolError(name, line.line_num, line.raw)
        self.symbols[name] = value

    # --- Pass 2 ---

    def _pass2(self):
        """Pass 2: emit one word per instruction using the full symbol table."""
        self.pc = 0
        for line in self._lines:
            try:
                self._pass2_line(line)
            except AssemblerError as e:
                self.errors.append(e)

    def _pass2_line(self, line: AsmLine):
        mnem = line.tokens[0]

        if mnem == ORG:
            self.pc = _parse_literal(line.tokens[1], line, *ORG_RANGE)
            return

        if mnem == DEFW:
            word = _parse_literal(line.tokens[1], line, *WORD_RANGE) & WORD_MASK
        elif mnem == 'swi':
            word = encode(Opcode.SWI, _parse_literal(line.tokens[1], line, *SWI_RANGE))
        elif mnem in SYMBOL_OPERAND_SET:
            word = encode(OPCODE_MAP[mnem], self._resolve(line.tokens[1], line))
        else:  # stp
            word = encode(Opcode.STP, 0)

        self._emit(word, line)

    def _resolve(self, name: str, line: AsmLine) -> int:
        if name not in self.symbols:
            raise UndefinedSymbolError(name, line.line_num, line.raw)
        return self.symbols[name] & ADDR_MASK

    def _emit(self, word: int, line: AsmLine):
        """Write word at the current address (wraps at 4096) and advance."""
        addr = self.pc & ADDR_MASK
        self.image[addr] = word
        self._emitted.append((addr, word, line))
        self.pc += 1

    # --- Listing ---

    def get_listing(self) -> str:
        """Return a human-readable listing: address, word, source, then symbols."""
        lines = []
        lines.append(f"{'ADDR':>5}  {'WORD':<4}  SOURCE")
        lines.append("-" * 48)
        for addr, word, asmline in self._emitted:
            raw = asmline.raw
            if len(raw) > 36:
                raw = raw[:36]
            lines.append(f"${addr:03X}  {word:04X}  {raw}")

        if self.symbols:
            lines.append("")
            lines.append("SYMBOLS")
            for name in sorted(self.symbols):
                lines.append(f"  {name:<16} ${self.symbols[name] & WORD_MASK:04X}")

        return '\n'.join(lines)


# ──────────────────────────────────────────────
# Convenience functions
# ──────────────────────────────────────────────

def assemble(source: str) -> List[int]:
    """Assemble source text, return the 4096-word memory image."""
    return Assembler().assemble(source)
