"""
MU0 Emulator — 4096-word Flat Memory

Memory map:
  $000–$FFF  Code and data (4096 × 16-bit words)

There are no regions, no ROM and no memory-mapped I/O: output goes through
the SWI instruction instead. Every address is reduced modulo 4096 and every
stored value is masked to 16 bits, so raw DEFW data can never index outside
the array.
"""

from typing import Iterable, List

from mu0_assembler.opcodes import ADDR_MASK, MEM_SIZE, WORD_MASK


class Memory:
    """4096 words of 16-bit storage, word-addressed."""

    def __init__(self):
        self._mem: List[int] = [0] * MEM_SIZE

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        """Read the unsigned 16-bit word at addr."""
        return self._mem[addr & ADDR_MASK]

    def write(self, addr: int, value: int):
        """Write value (masked to 16 bits) at addr."""
        self._mem[addr & ADDR_MASK] = value & WORD_MASK

    # --- Bulk load ---

    def load_image(self, words: Iterable[int], base_addr: int = 0):
        """Copy words into memory starting at base_addr.

        Raises ValueError if more than 4096 words are supplied.
        """
        words = list(words)
        if len(words) > MEM_SIZE:
            raise ValueError(
                f"Image has {len(words)} words, memory holds {MEM_SIZE}")
        for i, word in enumerate(words):
            self.write(base_addr + i, word)

    def snapshot(self) -> List[int]:
        """Return a copy of all 4096 words."""
        return list(self._mem)
