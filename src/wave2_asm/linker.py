# src/wave2_asm/linker.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .ast import CodeLine, LabelDef, RawWord, MemoryWord
from .isa import CODE_BASE
from .regs import OperandKind, classify_operand
from .diagnostics import Diagnostic, error

# ---------- Resultado de la pasada de etiquetas ----------

@dataclass(frozen=True)
class LinkResult:
    symtab: Dict[str, int]
    code_base: int
    code_size: int
    memory_size: int
    diagnostics: List[Diagnostic]

def first_pass(nodes: Sequence[object], *, filename: Optional[str] = None) -> LinkResult:
    """
    Construye la tabla de etiquetas y comprueba sus usos.

    - Cada etiqueta vale la dirección de la siguiente palabra de código.
    - Redefinir una etiqueta es un error; se conserva la primera definición.
    - Un operando ':nombre' sin definición es un error (solo en líneas válidas).
    """
    diags: List[Diagnostic] = []
    symtab: Dict[str, int] = {}
    defined_at: Dict[str, int] = {}
    code_size = 0
    memory_size = 0

    for n in nodes:
        if isinstance(n, LabelDef):
            if n.name in symtab:
                diags.append(error(f'Label "{n.name}" is already defined at {defined_at[n.name]}',
                                   n.col, n.col + len(n.name) + 1, line=n.line, file=filename))
                continue
            symtab[n.name] = n.address
            defined_at[n.name] = n.line
        elif isinstance(n, (CodeLine, RawWord)):
            code_size += 1
        elif isinstance(n, MemoryWord):
            memory_size += 1

    # Referencias a etiquetas (se permiten referencias hacia delante)
    for n in nodes:
        if not isinstance(n, CodeLine) or not n.valid:
            continue
        for op in n.chopped.operands:
            if classify_operand(op.text) is not OperandKind.LABEL:
                continue
            if op.text[1:] not in symtab:
                diags.append(error(f'Label "{op.text}" is not defined.',
                                   op.start, op.end).at(n.line, n.col, file=filename))

    return LinkResult(
        symtab=symtab,
        code_base=CODE_BASE,
        code_size=code_size,
        memory_size=memory_size,
        diagnostics=diags,
    )
