'''
clasificación de operandos (registros, constantes, punteros, inmediatos, etiquetas) y swizzles
'''

from __future__ import annotations
import re
from enum import Enum
from typing import Optional, Tuple

class OperandKind(Enum):
    REGISTER = "Register"
    CONSTANT = "Constant"
    IMMEDIATE = "Immediate"
    POINTER = "Pointer"
    POINTER_INCREMENT = "Pointer Increment"
    LABEL = "Label"

# El orden importa: los corchetes desambiguan los punteros antes que los registros
_KIND_PATTERNS = (
    (OperandKind.POINTER_INCREMENT, re.compile(r"^\[([rc][0-7]|ri)(\.[xyzw]{1,4})?\+\]$")),
    (OperandKind.POINTER,           re.compile(r"^\[([rc][0-7]|ri)(\.[xyzw]{1,4})?\]$")),
    (OperandKind.REGISTER,          re.compile(r"^r[0-7i](\.[xyzw]{0,4})?$")),
    (OperandKind.CONSTANT,          re.compile(r"^c[0-7](\.[xyzw]{0,4})?$")),
    (OperandKind.IMMEDIATE,         re.compile(r"^\$?[0-9a-fA-F]+$")),
    (OperandKind.LABEL,             re.compile(r"^:[0-9a-zA-Z_]+$")),
)

OPERAND_SPLIT_RE = re.compile(r"(?P<key>\w+)(?:\.(?P<swizzle>\w+))?")
REGISTER_SPLIT_RE = re.compile(r"(?P<reg>[rc][0-7]|ri)(?:\.(?P<swizzle>[xyzw]{1,4}))?")

STORE_LOAD_SWIZZLES = frozenset({"x", "xyzw"})
SEQUENTIAL_SWIZZLES = frozenset({"x", "xy", "xyz", "xyzw"})
SINGLE_WORD_RE = re.compile(r"^[xyzw]$")
FULL_SWIZZLE_RE = re.compile(r"^[xyzw]{4}$")

POINTER_KINDS = frozenset({OperandKind.POINTER, OperandKind.POINTER_INCREMENT})
SOURCE_KINDS = frozenset({OperandKind.REGISTER, OperandKind.CONSTANT})
TARGET_KINDS = frozenset({OperandKind.LABEL, OperandKind.IMMEDIATE})

def classify_operand(text: str) -> Optional[OperandKind]:
    """Clasifica el texto (ya recortado) de un operando; None si no encaja en ninguna forma.

    Solo comprueba la forma: la longitud del swizzle la valida cada familia.
    """
    for kind, pattern in _KIND_PATTERNS:
        if pattern.match(text):
            return kind
    return None

def split_operand(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Separa '<palabra>[.<swizzle>]' en (clave, swizzle).

    Funciona también dentro de corchetes: '[r0.xy+]' -> ('r0', 'xy').
    """
    m = OPERAND_SPLIT_RE.search(text)
    if not m:
        return None, None
    return m.group("key"), m.group("swizzle")

def split_register(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Nombre de registro y swizzle en minúsculas, o (None, None)."""
    m = REGISTER_SPLIT_RE.search(text.lower())
    if not m:
        return None, None
    return m.group("reg"), m.group("swizzle")

def is_pointer(kind: Optional[OperandKind]) -> bool:
    return kind in POINTER_KINDS

def register_long_name(name: str) -> str:
    """Nombre descriptivo de un registro ('r3' -> 'Register R3')."""
    n = name.strip().lower()
    if n == "ri":
        return "Program Counter (Ri)"
    if len(n) == 2 and n[1] in "01234567":
        if n[0] == "c":
            return f"Constant C{n[1]}"
        if n[0] == "r":
            return f"Register R{n[1]}"
    raise ValueError(f"Registro inválido: {name}")
