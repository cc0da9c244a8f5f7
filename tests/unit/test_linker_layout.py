from src.wave2_asm.parser import parse
from src.wave2_asm.linker import first_pass

def test_labels_and_code_size():
    src = """.code
:start
    nop
    nop
:loop
    jmp :loop
"""
    nodes, diags = parse(src)
    assert not diags
    r = first_pass(nodes)
    assert r.symtab["start"] == 0x40
    # 2 palabras antes de 'loop'
    assert r.symtab["loop"] == 0x42
    assert r.code_size == 3
    assert r.code_base == 0x40
    assert not r.diagnostics

def test_duplicate_label():
    nodes, _ = parse(".code\n:a\nnop\n:a\nhlt\n")
    r = first_pass(nodes)
    assert r.symtab["a"] == 0x40
    assert len(r.diagnostics) == 1
    d = r.diagnostics[0]
    assert d.message == 'Label "a" is already defined at 2'
    assert d.line == 4

def test_undefined_label():
    nodes, _ = parse(".code\njmp :nowhere\n")
    r = first_pass(nodes, filename="x.w2s")
    assert len(r.diagnostics) == 1
    d = r.diagnostics[0]
    assert d.message == 'Label ":nowhere" is not defined.'
    assert (d.line, d.start, d.end, d.file) == (2, 4, 12, "x.w2s")

def test_forward_reference():
    nodes, _ = parse(".code\njeq r0, :end\nnop\n:end\nhlt\n")
    r = first_pass(nodes)
    assert not r.diagnostics
    assert r.symtab["end"] == 0x42

def test_memory_size():
    nodes, _ = parse(".memory\n0001 0002\n0003\n.code\nnop\n")
    r = first_pass(nodes)
    assert r.memory_size == 3
    assert r.code_size == 1

def test_invalid_line_does_not_report_its_labels():
    nodes, diags = parse(".code\nset2 r0, :nowhere\n")
    assert len(diags) == 1
    assert nodes[0].valid is False
    r = first_pass(nodes)
    assert not r.diagnostics
