"""
MU0 Emulator — Main Emulator Class

Integrates:
  - CPU registers (cpu/regs.py)
  - Memory (mem/memory.py)
  - Instruction decoder (cpu/decoder.py)
  - ALU operations (cpu/alu.py)

Execution model:
  1. Fetch:   IR ← mem[PC], PC ← (PC + 1) mod 4096
  2. Decode:  opcode ← IR[15:12], operand ← IR[11:0]
  3. Execute: dispatch on opcode, return an Interrupt signal or None

Instruction set:
  0 LDA  ACC ← mem[op]                 sets N, Z
  1 STA  mem[op] ← ACC                 flags unchanged
  2 ADD  ACC ← ACC + mem[op]           sets N, Z
  3 SUB  ACC ← ACC - mem[op]           sets N, Z
  4 JMP  PC ← op
  5 JGE  PC ← op if not N
  6 JNE  PC ← op if not Z
  7 STP  → Halt
  8 SWI  → NumberOutput(ACC) if op == 0, else nothing
  9-15   no-op

There is no cycle limit: run() returns only when the program halts.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from mu0_assembler.opcodes import Opcode, SWI_NUMBER_OUTPUT

from .cpu import alu
from .cpu.decoder import decode
from .cpu.regs import Registers
from .interrupts import Halt, Interrupt, NumberOutput
from .mem.memory import Memory

logger = logging.getLogger(__name__)


class CPUError(Exception):
    """Base class for emulator runtime errors."""


class CPUHaltedError(CPUError):
    """step() called after STP."""


class MU0Emulator:
    """MU0 Virtual Emulator.

    Usage:
        emu = MU0Emulator()
        emu.load_image(assemble(source))
        emu.run(on_output=print)
    """

    def __init__(self, image: Optional[Iterable[int]] = None):
        self.regs = Registers()
        self.mem = Memory()
        self.halted = False
        self.steps = 0
        self.outputs: List[int] = []
        self._dispatch = self._build_dispatch()
        if image is not None:
            self.load_image(image)

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load_image(self, words: Iterable[int], base_addr: int = 0):
        """Load an assembled memory image (or any word list) into memory."""
        words = list(words)
        self.mem.load_image(words, base_addr)
        logger.debug("Loaded %d words at $%03X", len(words), base_addr & 0xFFF)

    def reset(self):
        """Reset registers to power-on state. Memory is left untouched."""
        self.regs.reset()
        self.halted = False
        self.steps = 0
        self.outputs = []
        logger.debug("CPU reset")

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def fetch(self):
        """IR ← mem[PC]; PC advances and wraps at 4096."""
        self.regs.IR = self.mem.read(self.regs.PC)
        self.regs.advance_pc()

    def execute(self) -> Optional[Interrupt]:
        """Decode the word in IR and execute it."""
        opcode, operand, _ = decode(self.regs.IR)
        return self.instruction(opcode, operand)

    def instruction(self, opcode: int, operand: int) -> Optional[Interrupt]:
        """Execute one already-decoded instruction."""
        handler = self._dispatch.get(opcode)
        if handler is None:
            logger.debug("Undefined opcode %X at IR=%04X, skipped",
                         opcode, self.regs.IR)
            return None
        return handler(operand)

    def step(self) -> Optional[Interrupt]:
        """Fetch and execute one instruction."""
        if self.halted:
            raise CPUHaltedError("CPU is halted; reset() before stepping again")
        self.fetch()
        signal = self.execute()
        self.steps += 1
        if isinstance(signal, Halt):
            self.halted = True
            logger.debug("Halted after %d steps: %s", self.steps, self.regs.display())
        elif isinstance(signal, NumberOutput):
            self.outputs.append(signal.value)
        return signal

    def run(self, on_output: Optional[Callable[[int], None]] = None) -> int:
        """Run until STP. Calls on_output(value) for each SWI 0.

        Returns the number of instructions executed.
        """
        start = self.steps
        while True:
            signal = self.step()
            if isinstance(signal, Halt):
                break
            if isinstance(signal, NumberOutput) and on_output is not None:
                on_output(signal.value)
        return self.steps - start

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(operand) -> Optional[Interrupt]

    def _build_dispatch(self) -> Dict[int, Callable[[int], Optional[Interrupt]]]:
        """Build opcode → handler dispatch table."""
        return {
            Opcode.LDA: self._op_lda,
            Opcode.STA: self._op_sta,
            Opcode.ADD: self._op_add,
            Opcode.SUB: self._op_sub,
            Opcode.JMP: self._op_jmp,
            Opcode.JGE: self._op_jge,
            Opcode.JNE: self._op_jne,
            Opcode.STP: self._op_stp,
            Opcode.SWI: self._op_swi,
        }

    def _op_lda(self, operand: int):
        self.regs.ACC, flags = alu.load16(self.mem.read(operand))
        self.regs.set_NZ(flags)

    def _op_sta(self, operand: int):
        self.mem.write(operand, alu.to_unsigned16(self.regs.ACC))

    def _op_add(self, operand: int):
        m = alu.to_signed16(self.mem.read(operand))
        self.regs.ACC, flags = alu.add16(self.regs.ACC, m)
        self.regs.set_NZ(flags)

    def _op_sub(self, operand: int):
        m = alu.to_signed16(self.mem.read(operand))
        self.regs.ACC, flags = alu.sub16(self.regs.ACC, m)
        self.regs.set_NZ(flags)

    def _op_jmp(self, operand: int):
        self.regs.PC = operand

    def _op_jge(self, operand: int):
        if not self.regs.negative:
            self.regs.PC = operand

    def _op_jne(self, operand: int):
        if not self.regs.zero:
            self.regs.PC = operand

    def _op_stp(self, operand: int):
        return Halt()

    def _op_swi(self, operand: int):
        # Codes other than 0 are reserved and currently ignored
        if operand == SWI_NUMBER_OUTPUT:
            return NumberOutput(self.regs.ACC)
        return None
