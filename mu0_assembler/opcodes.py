"""
MU0 Opcode Table — shared by the assembler and the emulator.

Instruction word layout (16 bits):

    15  14  13  12  11 ........................ 0
   ┌───────────────┬─────────────────────────────┐
   │    opcode     │       operand (12 bits)     │
   └───────────────┴─────────────────────────────┘

Opcodes 0-7 only ever use the low 3 bits; SWI (8) is the one opcode that
needs the top bit. Opcodes 9-15 are unassigned and execute as no-ops.

NOTE: the assembler and the CPU must agree bit-for-bit on these values.
"""

# Machine geometry
MEM_SIZE = 4096
WORD_MASK = 0xFFFF     # 16-bit memory word
ADDR_MASK = 0xFFF      # 12-bit address / operand field
OPCODE_SHIFT = 12


class Opcode:
    LDA = 0x0
    STA = 0x1
    ADD = 0x2
    SUB = 0x3
    JMP = 0x4
    JGE = 0x5
    JNE = 0x6
    STP = 0x7
    SWI = 0x8


# Mnemonic -> 4-bit opcode
OPCODE_MAP = {
    'lda': Opcode.LDA,
    'sta': Opcode.STA,
    'add': Opcode.ADD,
    'sub': Opcode.SUB,
    'jmp': Opcode.JMP,
    'jge': Opcode.JGE,
    'jne': Opcode.JNE,
    'stp': Opcode.STP,
    'swi': Opcode.SWI,
}

# Reverse table for the decoder
MNEMONICS = {code: name for name, code in OPCODE_MAP.items()}

# Instructions whose operand is a symbol looked up in the symbol table
SYMBOL_OPERAND_SET = {'lda', 'sta', 'add', 'sub', 'jmp', 'jge', 'jne'}

# Instructions without an operand
NO_OPERAND_SET = {'stp'}

# SWI operand codes (anything else is reserved and ignored)
SWI_NUMBER_OUTPUT = 0

# Pseudo-ops and directives
DEFW = 'defw'
ORG = 'org'
EQU = 'equ'

# Tokens that reserve one word of memory in pass 1
SLOT_TOKENS = set(OPCODE_MAP) | {DEFW}

RESERVED_WORDS = SLOT_TOKENS | {ORG, EQU}


def encode(opcode: int, operand: int) -> int:
    """Pack opcode and operand into one 16-bit instruction word."""
    return ((opcode & 0xF) << OPCODE_SHIFT) | (operand & ADDR_MASK)
