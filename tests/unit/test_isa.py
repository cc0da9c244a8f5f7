import pytest
from src.wave2_asm.isa import (
    InstructionFamily as F, ALIASES, MNEMONICS, resolve_mnemonic, mnemonics, base_mnemonic,
    MATH, SHIFT, BITWISE, SPECIAL, WORD_SELECT,
)

@pytest.mark.parametrize("token, family", [
    ("mov", F.MOVE),
    ("MOVE", F.MOVE),
    ("add.w", F.ADD),
    ("jeq", F.JUMP_EQUAL),
    ("jcp", F.JUMP_EQUAL),
    ("jne", F.JUMP_NOT_EQUAL),
    ("jcc", F.JUMP_NOT_EQUAL),
    ("lsl", F.SHIFT_LEFT),
    ("asl", F.SHIFT_LEFT),
    ("rsubo", F.REVERSE_SUBTRACT_OVER),
    ("ne", F.NOT_EQUAL),
    ("skip3", F.SKIP),
    ("set4", F.SET),
    ("slp.h", F.SLEEP),
    ("notdest", F.BITWISE_NOT_DST),
    ("multisat", F.MULTIPLY_SATURATE),
])
def test_resolve_mnemonic(token, family):
    assert resolve_mnemonic(token) is family

@pytest.mark.parametrize("token", ["bogus", "", ":loop", "!1234", ".code"])
def test_resolve_unknown(token):
    assert resolve_mnemonic(token) is None

def test_every_family_has_aliases():
    assert set(ALIASES) == set(F)
    assert mnemonics(F.JUMP) == ("jmp", "jump")
    assert len(MNEMONICS) == sum(len(v) for v in ALIASES.values())

def test_family_group_sizes():
    assert len(MATH) == 14
    assert len(SHIFT) == 5
    assert len(BITWISE) == 15
    assert len(SPECIAL) == 6
    assert len(WORD_SELECT) == 4

def test_base_mnemonic():
    assert base_mnemonic(" ADD.W ") == "add"
