'''
textos de ayuda (hover) por familia y descripción de operandos
'''

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from .ast import Span, ChoppedLine
from .isa import (
    InstructionFamily as F,
    WORD_SELECT, MATH, SHIFT, BITWISE, UNARY_BITWISE, SPECIAL, CONDITIONAL_JUMP,
    base_mnemonic, resolve_mnemonic,
)
from .lexer import chop
from .regs import OperandKind, classify_operand, split_register, register_long_name
from .utils import parse_immediate
from .validation import validate

DOCS_URL = "https://nimphio.us/wave2/w2s/instructions"

SLEEP_PARTS = {
    ".w": "first word",
    ".h": "high byte of the first word",
    ".l": "low byte of the first word",
}

SIZE_NAMES = {
    ".b": "byte",
    ".w": "word",
}

@dataclass(frozen=True)
class Markup:
    value: str
    kind: str = "markdown"

HoverGenerator = Callable[[F, ChoppedLine], Markup]

# ---------------- Operandos ----------------

def _words(swizzle: Optional[str]) -> str:
    if swizzle is None:
        return ""
    return f" word{'s' if len(swizzle) > 1 else ''} `{swizzle}`"

def describe_operand(text: str) -> Optional[str]:
    """Descripción legible de un operando, o None si no se reconoce."""
    kind = classify_operand(text)
    if kind is None:
        return None
    reg, swizzle = split_register(text)
    if kind is OperandKind.REGISTER:
        return f"General Purpose Register `{reg}`{_words(swizzle)}"
    if kind is OperandKind.CONSTANT:
        return f"Constant Register `{reg}`{_words(swizzle)}"
    if kind is OperandKind.POINTER:
        return f"Memory at address of `{reg}`"
    if kind is OperandKind.POINTER_INCREMENT:
        return f"Memory at address of `{reg}` which is incremented upon each read."
    if kind is OperandKind.LABEL:
        return f"Value of Label `{text}`"
    low = text.lower()
    return f"Immediate value `{low}` ({parse_immediate(low)})"

# ---------------- Helpers de formato ----------------

def _doc_link(page: str, family: F) -> str:
    anchor = family.value.lower().replace(" ", "-")
    return f"\n\n[Documentation]({DOCS_URL}/{page}.html#{anchor})"

def _roles(roles: Sequence[str], operands: Sequence[Span]) -> str:
    lines = [f"- **{role}:** {describe_operand(op.text)}" for role, op in zip(roles, operands)]
    return "\n\n" + "\n".join(lines)

def _size_note(size: Optional[Span]) -> str:
    if size is None:
        return ""
    return f" as a {SIZE_NAMES.get(size.text.lower(), size.text)} operation"

def _md(title: str, body: str) -> Markup:
    return Markup(f"# {title}\n\n{body}")

# ---------------- Generadores por familia ----------------

def hover_nop(family: F, chopped: ChoppedLine) -> Markup:
    return _md(family.value, "Do nothing for one cycle." + _doc_link("system", family))

def hover_halt(family: F, chopped: ChoppedLine) -> Markup:
    return _md(family.value, "Halt the current core." + _doc_link("system", family))

def hover_skip(family: F, chopped: ChoppedLine) -> Markup:
    mnemonic = base_mnemonic(chopped.instruction.text)
    variant = mnemonic[-1] if mnemonic[-1].isdigit() else "1"
    return _md(f"{family.value}{variant}", f"Skip instruction `{mnemonic}`." + _doc_link("system", family))

def hover_sleep(family: F, chopped: ChoppedLine) -> Markup:
    op = chopped.operands[0].text
    if chopped.size is not None:
        part = SLEEP_PARTS[chopped.size.text.lower()]
        return _md(family.value, f"Sleep for the number of ticks stored in {part} of the `{op}` register.")
    return _md(family.value, f"Sleep for `{op}` ticks.")

def hover_move(family: F, chopped: ChoppedLine) -> Markup:
    dst, src = chopped.operands
    if classify_operand(dst.text) in (OperandKind.POINTER, OperandKind.POINTER_INCREMENT):
        body = f"Store `{src.text}` into memory at `{dst.text}`."
    elif classify_operand(src.text) in (OperandKind.POINTER, OperandKind.POINTER_INCREMENT):
        body = f"Load `{dst.text}` from memory at `{src.text}`."
    else:
        body = f"Copy `{src.text}` into `{dst.text}`."
    return _md(family.value, body + _roles(("Destination", "Source"), chopped.operands))

def hover_word_select(family: F, chopped: ChoppedLine) -> Markup:
    dst, src = chopped.operands
    body = f'Performs the word select operation "{family.value}" from `{src.text}` into `{dst.text}`.'
    return _md(family.value, body + _roles(("Destination", "Source"), chopped.operands))

def hover_math(family: F, chopped: ChoppedLine) -> Markup:
    dst, lhs, rhs = chopped.operands
    body = (f'Performs "{family.value}" on `{lhs.text}` and `{rhs.text}`{_size_note(chopped.size)}, '
            f"storing the result in `{dst.text}`.")
    return _md(family.value, body + _doc_link("math", family))

def hover_shift(family: F, chopped: ChoppedLine) -> Markup:
    dst, src = chopped.operands
    body = f'Performs "{family.value}" on `{dst.text}` by `{src.text}`{_size_note(chopped.size)}.'
    return _md(family.value, body + _roles(("Destination", "Amount"), chopped.operands))

def hover_bitwise(family: F, chopped: ChoppedLine) -> Markup:
    unary = "unary " if family in UNARY_BITWISE else ""
    body = f'Performs the {unary}bitwise operation "{family.value}".'
    return _md(family.value, body + _doc_link("bitwise", family))

def hover_special(family: F, chopped: ChoppedLine) -> Markup:
    dst, src = chopped.operands
    body = f'Performs the special operation "{family.value}" on `{dst.text}` with `{src.text}`.'
    return _md(family.value, body + _roles(("Destination", "Source"), chopped.operands))

def hover_swizzle(family: F, chopped: ChoppedLine) -> Markup:
    reg, swizzle = split_register(chopped.operands[0].text)
    return _md(family.value, f"Rearranges the words of {register_long_name(reg)} into the order `{swizzle}`.")

def hover_set(family: F, chopped: ChoppedLine) -> Markup:
    reg, _ = split_register(chopped.operands[0].text)
    values = ", ".join(f"`{op.text}`" for op in chopped.operands[1:])
    count = len(chopped.operands) - 1
    return _md(family.value, f"Sets {count} word{'s' if count > 1 else ''} of {register_long_name(reg)} to {values}.")

def hover_jump(family: F, chopped: ChoppedLine) -> Markup:
    return _md(family.value, f"Jump to `{chopped.operands[0].text}`.")

def hover_conditional_jump(family: F, chopped: ChoppedLine) -> Markup:
    src, dst = chopped.operands
    return _md(family.value, f"Jump to `{dst.text}` depending on the comparison of `{src.text}`."
               + _roles(("Source", "Destination"), chopped.operands))

# ---------------- Tabla de despacho ----------------

HOVER_DOCS: Dict[F, HoverGenerator] = {
    F.NOP: hover_nop,
    F.HALT: hover_halt,
    F.SKIP: hover_skip,
    F.SLEEP: hover_sleep,
    F.MOVE: hover_move,
    F.SWIZZLE: hover_swizzle,
    F.SET: hover_set,
    F.JUMP: hover_jump,
}
HOVER_DOCS.update({f: hover_word_select for f in WORD_SELECT})
HOVER_DOCS.update({f: hover_math for f in MATH})
HOVER_DOCS.update({f: hover_shift for f in SHIFT})
HOVER_DOCS.update({f: hover_bitwise for f in BITWISE})
HOVER_DOCS.update({f: hover_special for f in SPECIAL})
HOVER_DOCS.update({f: hover_conditional_jump for f in CONDITIONAL_JUMP})

def hover_text(family: F, chopped: Optional[ChoppedLine]) -> Optional[Markup]:
    """Documentación de la instrucción, solo si la línea es válida."""
    if chopped is None or validate(family, chopped) is not None:
        return None
    generator = HOVER_DOCS.get(family)
    if generator is None:
        return None
    return generator(family, chopped)

def hover_at(line: str, pos: int) -> Optional[Tuple[Markup, Span]]:
    """Hover para la posición `pos` de una línea: (markup, span cubierto) o None."""
    chopped = chop(line)
    if chopped is None:
        return None

    instruction = chopped.instruction
    if instruction.start <= pos < instruction.end:
        family = resolve_mnemonic(instruction.text)
        if family is None:
            return None
        md = hover_text(family, chopped)
        return (md, instruction) if md is not None else None

    size = chopped.size
    if size is not None and size.start <= pos < size.end:
        return None

    for op in chopped.operands:
        if op.start <= pos < op.end:
            described = describe_operand(op.text)
            if described is None:
                return None
            return Markup(described), op
    return None
