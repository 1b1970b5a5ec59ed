"""
MU0 Emulator — CPU Register Set + Flag Management

Register model for MU0:
  ACC — 16-bit accumulator, held as a signed value (-32768..32767)
  PC  — 12-bit program counter (wraps at 4096)
  IR  — 16-bit instruction register (last fetched word)
  CC  — condition codes, two bits:
        bit 1: N (Negative — ACC < 0)
        bit 0: Z (Zero — ACC == 0)

At reset ACC=0, so Z is set and N is clear.
"""

from mu0_assembler.opcodes import ADDR_MASK

# CC bit masks
CC_N = 0x02
CC_Z = 0x01


class Registers:
    """MU0 CPU register set."""

    __slots__ = ('ACC', 'PC', 'IR', 'CC')

    def __init__(self):
        self.reset()

    # --- Flag access ---

    def set_NZ(self, flags: int):
        """Set N and Z flags from an alu flag word."""
        self.CC = flags & (CC_N | CC_Z)

    @property
    def zero(self) -> bool:
        return bool(self.CC & CC_Z)

    @property
    def negative(self) -> bool:
        return bool(self.CC & CC_N)

    def advance_pc(self):
        self.PC = (self.PC + 1) & ADDR_MASK

    # --- Display ---

    def display(self) -> str:
        """Format register state for debugging."""
        ccr_str = ('N' if self.negative else '.') + ('Z' if self.zero else '.')
        return (f"PC={self.PC:03X} IR={self.IR:04X} "
                f"ACC={self.ACC & 0xFFFF:04X} ({self.ACC}) CC=[{ccr_str}]")

    def reset(self):
        """Reset CPU to power-on state."""
        self.ACC = 0
        self.PC = 0
        self.IR = 0
        self.CC = CC_Z
