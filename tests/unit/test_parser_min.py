from src.wave2_asm.parser import parse, split_sections
from src.wave2_asm.ast import CodeLine, LabelDef, RawWord, MemoryWord
from src.wave2_asm.isa import InstructionFamily as F

SRC = """.memory
0040 00FF ; comentario
12
.code
:start
    mov r0, r1      ; copia
    add.w r0, r0, r1
    !00FF
    jmp :start
"""

def test_parse_program_min():
    nodes, diags = parse(SRC, filename="prog.w2s")
    assert not diags
    kinds = [type(n).__name__ for n in nodes]
    assert kinds == ["MemoryWord", "MemoryWord", "MemoryWord",
                     "LabelDef", "CodeLine", "CodeLine", "RawWord", "CodeLine"]

    mem = [n for n in nodes if isinstance(n, MemoryWord)]
    assert [m.value for m in mem] == [0x0040, 0x00FF, 0x12]
    assert (mem[0].line, mem[0].col) == (2, 0)

    label = nodes[3]
    assert isinstance(label, LabelDef) and label.name == "start" and label.address == 0x40

    code = [n for n in nodes if isinstance(n, CodeLine)]
    assert [c.family for c in code] == [F.MOVE, F.ADD, F.JUMP]
    assert [c.address for c in code] == [0x40, 0x41, 0x43]
    assert code[0].text == "mov r0, r1"
    assert code[0].line == 6

    raw = nodes[6]
    assert isinstance(raw, RawWord) and raw.value == 0xFF and raw.address == 0x42

def test_instruction_diagnostic_in_document_coordinates():
    nodes, diags = parse(".code\n  mov r0, $5\n")
    assert len(diags) == 1
    d = diags[0]
    assert (d.line, d.start, d.end) == (2, 10, 12)
    # la instrucción inválida sigue ocupando una palabra
    assert isinstance(nodes[0], CodeLine)

def test_code_on_marker_line():
    _, diags = parse(".code nop r1")
    assert len(diags) == 1
    assert (diags[0].line, diags[0].start, diags[0].end) == (1, 10, 12)

def test_unknown_instruction():
    _, diags = parse(".code\n  foo r0 ; ?\n")
    assert len(diags) == 1
    d = diags[0]
    assert d.message == 'Instruction "foo" is not a valid instruction.'
    assert (d.line, d.start, d.end) == (2, 2, 8)

def test_raw_hex_words():
    nodes, diags = parse(".code\n!12 34\n!12G4\n!1 0000\n")
    assert [n.value for n in nodes if isinstance(n, RawWord)] == [0x1234]
    assert len(diags) == 2
    assert "valid hex numbers" in diags[0].message
    assert "between 0x0000 and 0xFFFF" in diags[1].message

def test_invalid_label():
    _, diags = parse(".code\n:\n")
    assert len(diags) == 1
    assert "Labels must be valid identifiers" in diags[0].message

def test_memory_unexpected_character():
    _, diags = parse(".memory\n00g0\n")
    assert len(diags) == 1
    d = diags[0]
    assert (d.line, d.start, d.end) == (2, 2, 3)
    assert 'Unexpected character "g"' in d.message

def test_text_outside_sections_is_ignored():
    nodes, diags = parse("basura fuera\n.code\nnop\n")
    assert not diags
    assert len(nodes) == 1

def test_multiple_sections():
    src = ".code\nnop\n.memory\n1234\n.code\nhlt\n"
    assert [k for k, _, _ in split_sections(src)] == ["code", "memory", "code"]
    nodes, diags = parse(src)
    assert not diags
    assert [n.address for n in nodes if isinstance(n, CodeLine)] == [0x40, 0x41]
    assert [n.value for n in nodes if isinstance(n, MemoryWord)] == [0x1234]

def test_code_line_valid_flag():
    nodes, _ = parse(".code\nnop\nnop r1\n")
    assert [n.valid for n in nodes] == [True, False]

def test_positions_in_large_memory_image():
    src = ".memory\n" + "0001\n" * 65536 + ".code\nnop r1\n"
    nodes, diags = parse(src)
    mem = [n for n in nodes if isinstance(n, MemoryWord)]
    assert len(mem) == 65536
    assert (mem[0].line, mem[0].col) == (2, 0)
    assert (mem[-1].line, mem[-1].col) == (65537, 0)
    assert len(diags) == 1
    assert (diags[0].line, diags[0].start, diags[0].end) == (65539, 4, 6)
