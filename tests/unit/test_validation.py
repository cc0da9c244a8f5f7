import pytest
from src.wave2_asm.ast import Span
from src.wave2_asm.isa import InstructionFamily as F
from src.wave2_asm.lexer import chop
from src.wave2_asm import validation
from src.wave2_asm.validation import VALIDATORS, validate, validate_line

VALID = [
    "nop", "hlt", "halt", "skip", "skip2",
    "slp 10", "slp $1F", "slp.w r0", "slp.h c1", "slp.l r2.x",
    "mov r0, r1", "mov r0.xy, r1.xy", "mov r0, :table",
    "mov [r0], r1", "mov [r0.xyzw+], r1.xyz", "mov [r0.x], r1.x",
    "mov r1.xy, [r0]", "mov r1, [c2.x+]",
    "wmo r0, r1.x", "wsw r0, c1", "wadd r3, c2.w",
    "add r0, r0, r1", "add.w r0, r0, r1", "sub.b r2, c1, r2", "eq r0, r1, r0",
    "lsl.w r0, 4", "asr.b r1, r2", "ror.w r0, c0",
    "and r0, r1", "all r0", "one r1", "ndst r2", "xor r0, $FF",
    "hadd r0, r1", "div r0, c3",
    "swi r0.wzyx", "swizzle ri.xxyy",
    "set r0, $10", "set2 r0, :a, 5", "set4 r1, 1, 2, 3, 4",
    "jmp :end", "jump $40", "jeq r0, :end", "jne c1, 40",
    "mov r0, r1 ; copy",
    "  MOV r0, r1",
]

@pytest.mark.parametrize("line", VALID)
def test_valid_lines(line):
    assert validate_line(line) is None

INVALID = [
    ("nop r0", "Nop takes no operands, found 1"),
    ("nop.w", "does not take a size modifier"),
    ("halt 1", "Halt takes no operands"),
    ("skip.w", "Unexpected size specifier."),
    ("skip r0", "Skip does not take operands."),
    ("slp r0", "Size required when using a register"),
    ("slp.w 10", "Sleep with a size requires a register"),
    ("slp.b r0", "Invalid size, expected .w, .h, or .l"),
    ("slp", "Sleep takes 1 operand, found 0"),
    ("slp [r0]", "Expected valid number"),
    ("mov r0, $5", "immediate value as a source operand"),
    ("mov $5, r0", "immediate value as a destination operand"),
    ("mov r0", "Move instructions require 2 operands, found 1"),
    ("mov.w r0, r1", "Move instruction does not take a size modifier"),
    ("mov [r0], [r1]", "two pointer operands"),
    ("mov r0, bogus!", "Invalid source operand"),
    ("mov bogus!, r0", "Invalid destination operand"),
    ("mov r0.x, r1.y", "same swizzle"),
    ("mov r0.x, r1", "same swizzle"),
    ("mov [r0.xy], r1", "Store swizzle must be x or xyzw."),
    ("mov [r0], r1.yz", "Store swizzle must be a sequential"),
    ("mov r1, [r0.xy+]", "Load swizzle must be x or xyzw."),
    ("mov r1.zw, [r0]", "Load swizzle must be a sequential"),
    ("wmo r0.x, r1.x", "destinations cannot be swizzled"),
    ("wmo r0, r1.xy", "exactly one word"),
    ("wmo c0, r1", "destination must be a register"),
    ("wmo r0, 5", "source must be a register"),
    ("wmo.w r0, r1", "does not take a size modifier"),
    ("add r0, r1, r2", "destination must also be included in the calculation"),
    ("add r0, r0", "Math instructions require 3 operands, found 2"),
    ("add.x r0, r0, r1", "Invalid size modifier"),
    ("add r0.x, r0, r1", "cannot be swizzled"),
    ("add c0, c0, r1", "Math destination must be a writeable register"),
    ("add r0, r0, 5", "Math operands must be registers or constants"),
    ("add r0, r0, bogus!", "Invalid right-hand operand"),
    ("lsl r0, 1", "Invalid size modifier"),
    ("lsl.w r0", "Shift instructions require 2 operands, found 1"),
    ("lsl.w c0, 1", "destination must be a register"),
    ("lsl.w r0, :x", "source must be a register or immediate"),
    ("and r0", "Bitwise instructions require 2 operands, found 1"),
    ("all r0, r1", "Unary bitwise instructions require 1 operand, found 2"),
    ("and", "at least 1 operand"),
    ("and.w r0, r1", "does not take a size modifier"),
    ("hadd r0.x, r1", "destinations cannot be swizzled"),
    ("hadd r0, r1.x", "sources cannot be swizzled"),
    ("div c0, r1", "writeable register"),
    ("div r0, 5", "Source must be a register"),
    ("mlo.w r0, r1", "do not take a size"),
    ("swi r0.xyz", "four-word swizzle"),
    ("swi r0", "Missing swizzle."),
    ("swi c0.xyzw", "writeable register, found Constant"),
    ("swi r0.xyzw, r1", "require 1 operand, found 2"),
    ("set r0", "requires 2 operands, found 1"),
    ("set3 r0, 1, 2", "requires 4 operands, found 3"),
    ("set c0, 1", "writeable register as the first operand"),
    ("set r0, r1", "only accept labels or immediate"),
    ("jmp r0", "label or immediate, found Register"),
    ("jmp", "Jump instructions require 1 operand, found 0"),
    ("jmp :a, :b", "Jump instructions require 1 operand, found 2"),
    ("jmp bogus!", "Invalid operand"),
    ("jmp.w :a", "does not take a size modifier"),
    ("jeq :end, r0", "source must be a register or constant"),
    ("jeq r0, r1", "destination must be a label or immediate"),
    ("jne r0", "Conditional jump instructions require 2 operands, found 1"),
]

@pytest.mark.parametrize("line, fragment", INVALID)
def test_invalid_lines(line, fragment):
    d = validate_line(line)
    assert d is not None
    assert d.severity == "error"
    assert d.source == "Wave2 Asm"
    assert fragment in d.message

@pytest.mark.parametrize("line, span", [
    ("mov r0, $5", (8, 10)),
    ("add r0, r1, r2", (4, 6)),
    ("slp r0", (3, 4)),
    ("nop r0, r1", (4, 10)),
    ("mov [r0], [r1]", (4, 14)),
    ("nop.w", (3, 5)),
    ("and", (0, 3)),
    ("  jmp r0 ; x", (6, 8)),
])
def test_diagnostic_spans(line, span):
    d = validate_line(line)
    assert (d.start, d.end) == span

def test_validate_is_repeatable():
    c = chop("add r0, r1, r2")
    assert validate(F.ADD, c) == validate(F.ADD, c)
    ok = chop("add r0, r0, r1")
    assert validate(F.ADD, ok) is None
    assert validate(F.ADD, ok) is None

def test_validate_without_decomposition():
    assert validate(F.MOVE, None) is None

@pytest.mark.parametrize("check", sorted(set(VALIDATORS.values()), key=lambda f: f.__name__))
def test_validators_ignore_missing_instruction(check):
    assert check(None, None, (), None) is None

@pytest.mark.parametrize("line", ["", "   ", "; comment", "bogus r0", ":label", "!00FF"])
def test_validate_line_without_instruction(line):
    assert validate_line(line) is None

def test_dispatch_covers_every_family():
    assert set(VALIDATORS) == set(F)

def test_not_implemented_is_information():
    d = validation._not_implemented(Span(0, 3, "foo"))
    assert d.severity == "information"
    assert "foo" in d.message
    assert (d.start, d.end) == (0, 3)

def test_validate_uses_given_family():
    # 'validate' no vuelve a resolver el mnemónico: se valida con la familia dada
    c = chop("nop r0, r1")
    assert validate(F.MOVE, c) is None
    assert validate(F.NOP, c) is not None
