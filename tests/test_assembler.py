"""
Assembler Tests for the MU0 toolkit.

Tests the two-pass assembler against hand-encoded MU0 words:
opcode in bits 15-12, operand in bits 11-0.
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from mu0_assembler import (
    Assembler, AssemblerError, UndefinedSymbolError, InvalidLiteralError,
    MalformedLineError, DuplicateSymbolError, assemble, OPCODE_MAP, MEM_SIZE,
)
from mu0_assembler.opcodes import NO_OPERAND_SET, SYMBOL_OPERAND_SET


class TestOpcodeEncoding:
    """Verify individual instruction encodings."""

    def test_symbol_operand_instructions(self):
        cases = [
            ("lda", 0x0), ("sta", 0x1), ("add", 0x2), ("sub", 0x3),
            ("jmp", 0x4), ("jge", 0x5), ("jne", 0x6),
        ]
        for mnem, opcode in cases:
            image = assemble(f"{mnem} target\norg 0x123\ntarget defw 0")
            assert image[0] == (opcode << 12) | 0x123, f"{mnem}: got {image[0]:04X}"

    def test_operand_classes_cover_every_mnemonic(self):
        """Each mnemonic is either name-operand, literal-operand or no-operand."""
        assert SYMBOL_OPERAND_SET | {'swi'} | NO_OPERAND_SET == set(OPCODE_MAP)
        assert not SYMBOL_OPERAND_SET & NO_OPERAND_SET
        assert 'swi' not in SYMBOL_OPERAND_SET

    def test_symbol_operand_set_resolves_names(self):
        for mnem in sorted(SYMBOL_OPERAND_SET):
            image = assemble(f"{mnem} here\nhere stp")
            assert image[0] == (OPCODE_MAP[mnem] << 12) | 0x001, mnem

    def test_stp(self):
        assert assemble("stp")[0] == 0x7000

    def test_swi_literal(self):
        image = assemble("swi 0\nswi 5\nswi 4095")
        assert image[0:3] == [0x8000, 0x8005, 0x8FFF]

    def test_defw_raw_word(self):
        image = assemble("defw 7\ndefw 65535\ndefw -1\ndefw 0x7fff")
        assert image[0:4] == [0x0007, 0xFFFF, 0xFFFF, 0x7FFF]

    def test_opcode_field_matches_table(self):
        src = "a lda a\nsta a\nadd a\nsub a\njmp a\njge a\njne a\nstp\nswi 0"
        image = assemble(src)
        mnems = ['lda', 'sta', 'add', 'sub', 'jmp', 'jge', 'jne', 'stp', 'swi']
        for addr, mnem in enumerate(mnems):
            assert image[addr] >> 12 == OPCODE_MAP[mnem]

    def test_case_insensitive_and_comments(self):
        image = assemble("  LDA  Val   ; load it\n\n; just a comment\nSTP\nVAL DEFW 7")
        assert image[0:3] == [0x0002, 0x7000, 0x0007]

    def test_image_is_full_memory(self):
        image = assemble("stp")
        assert len(image) == MEM_SIZE
        assert image[1:] == [0] * (MEM_SIZE - 1)


class TestLabels:
    """Label resolution across both passes."""

    def test_forward_reference(self):
        image = assemble("lda val\nstp\nval defw 7")
        assert image[0:4] == [0x0002, 0x7000, 0x0007, 0]

    def test_backward_reference(self):
        image = assemble("start lda start\njmp start")
        assert image[0] == 0x0000
        assert image[1] == 0x4000

    def test_bare_label_names_next_instruction(self):
        a = Assembler()
        a.assemble("stp\nhere\nlda here")
        assert a.symbols['here'] == 1
        assert a.image[1] == 0x0001

    def test_consecutive_bare_labels_share_address(self):
        a = Assembler()
        a.assemble("stp\nfirst\nsecond\ndefw 9")
        assert a.symbols['first'] == a.symbols['second'] == 1

    def test_equ_constant_as_operand(self):
        a = Assembler()
        image = a.assemble("x equ 5\nlda x\nstp")
        assert a.symbols['x'] == 5
        assert image[0:2] == [0x0005, 0x7000]

    def test_equ_operand_masked_to_12_bits(self):
        image = assemble("big equ 0x1fff\nlda big")
        assert image[0] == 0x0FFF

    def test_label_on_org_line_binds_before_org(self):
        a = Assembler()
        a.assemble("stp\nmark org 20\nlater defw 1")
        assert a.symbols['mark'] == 1
        assert a.symbols['later'] == 20


class TestDirectives:
    """ORG placement and address wrapping."""

    def test_org_places_data(self):
        a = Assembler()
        image = a.assemble("org 10\nval defw 42\norg 0\nlda val\nstp")
        assert a.symbols['val'] == 10
        assert image[10] == 42
        assert image[0:2] == [0x000A, 0x7000]

    def test_org_does_not_move_earlier_labels(self):
        a = Assembler()
        a.assemble("one defw 1\ntwo defw 2\norg 500\nthree defw 3")
        assert a.symbols == {'one': 0, 'two': 1, 'three': 500}

    def test_assembly_wraps_past_4095(self):
        a = Assembler()
        image = a.assemble("org 4095\nlast defw 11\nwrapped defw 22")
        assert image[4095] == 11
        assert image[0] == 22
        assert a.symbols['wrapped'] == 0


class TestErrors:
    """Assembly-time failures are typed AssemblerError subclasses."""

    def test_undefined_symbol(self):
        with pytest.raises(UndefinedSymbolError, match="ghost") as exc:
            assemble("lda ghost\nstp")
        assert exc.value.name == 'ghost'
        assert exc.value.line_num == 1

    def test_undefined_symbol_is_assembler_error(self):
        with pytest.raises(AssemblerError):
            assemble("jmp nowhere")

    def test_invalid_org_literal(self):
        with pytest.raises(InvalidLiteralError) as exc:
            assemble("org ten")
        assert exc.value.token == 'ten'

    def test_org_out_of_range(self):
        with pytest.raises(InvalidLiteralError, match="out of range"):
            assemble("org 4096")

    def test_invalid_equ_literal(self):
        with pytest.raises(InvalidLiteralError):
            assemble("x equ five")

    def test_invalid_defw_literal(self):
        with pytest.raises(InvalidLiteralError):
            assemble("defw 12abc")

    def test_defw_out_of_range(self):
        with pytest.raises(InvalidLiteralError):
            assemble("defw 65536")

    def test_swi_rejects_symbol(self):
        with pytest.raises(InvalidLiteralError):
            assemble("code equ 0\nswi code")

    def test_label_followed_by_non_instruction(self):
        with pytest.raises(MalformedLineError) as exc:
            assemble("stp\nfoo bar")
        assert exc.value.line_num == 2

    def test_missing_operand(self):
        with pytest.raises(MalformedLineError, match="exactly one operand"):
            assemble("lda")

    def test_stp_takes_no_operand(self):
        with pytest.raises(MalformedLineError, match="no operand"):
            assemble("stp now")

    def test_reserved_word_as_label(self):
        with pytest.raises(MalformedLineError):
            assemble("equ 5")

    def test_duplicate_label(self):
        with pytest.raises(DuplicateSymbolError) as exc:
            assemble("x defw 1\nx defw 2")
        assert exc.value.name == 'x'

    def test_duplicate_equ_and_label(self):
        with pytest.raises(DuplicateSymbolError):
            assemble("x equ 3\nx stp")

    def test_errors_collected_first_raised(self):
        a = Assembler()
        with pytest.raises(UndefinedSymbolError, match="alpha"):
            a.assemble("lda alpha\nlda beta\nstp")
        assert [e.name for e in a.errors] == ['alpha', 'beta']

    def test_pass1_errors_skip_pass2(self):
        a = Assembler()
        with pytest.raises(InvalidLiteralError):
            a.assemble("org bad\nlda ghost")
        assert len(a.errors) == 1

    def test_error_message_has_line_number(self):
        with pytest.raises(AssemblerError, match="^Line 3:"):
            assemble("stp\n\nlda ghost")


class TestListing:

    def test_listing_shows_words_and_symbols(self):
        a = Assembler()
        a.assemble("lda val\nstp\nval defw 7")
        listing = a.get_listing()
        assert "$000  0002  lda val" in listing
        assert "$002  0007  val defw 7" in listing
        assert "SYMBOLS" in listing
        assert "val" in listing.split("SYMBOLS")[1]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
