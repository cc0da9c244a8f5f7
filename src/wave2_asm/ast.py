'''
dataclases de spans y nodos de documento (ChoppedLine, CodeLine, LabelDef, RawWord, MemoryWord)
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .isa import InstructionFamily

# ---- Fragmentos localizados dentro de una línea ----

@dataclass(frozen=True)
class Span:
    """Subcadena localizada: text == línea[start:end]."""
    start: int
    end: int
    text: str

@dataclass(frozen=True)
class ChoppedLine:
    """Descomposición de una línea de código: instrucción, tamaño, operandos y comentario."""
    instruction: Span
    size: Optional[Span] = None
    operands: Tuple[Span, ...] = ()
    comment: Optional[Span] = None

# ---- Nodos a nivel de documento ----

@dataclass(frozen=True)
class CodeLine:
    """Instrucción de la sección .code, con su dirección de palabra.

    `valid` es False si la validación de la línea produjo un diagnóstico."""
    text: str
    chopped: ChoppedLine
    family: InstructionFamily
    line: int
    col: int
    address: int
    valid: bool = True

@dataclass(frozen=True)
class LabelDef:
    """Definición de etiqueta (p.ej., ':loop'); apunta a la siguiente palabra emitida."""
    name: str
    line: int
    col: int
    address: int

@dataclass(frozen=True)
class RawWord:
    """Palabra literal en hexadecimal dentro de .code ('!1234')."""
    value: int
    line: int
    col: int
    address: int

@dataclass(frozen=True)
class MemoryWord:
    """Palabra de 16 bits leída de una sección .memory."""
    value: int
    line: int
    col: int
