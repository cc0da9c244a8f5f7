'''
validadores por familia de instrucción y tabla de despacho familia -> validador
'''

from __future__ import annotations
from typing import Callable, Dict, Optional, Sequence

from .ast import Span, ChoppedLine
from .diagnostics import Diagnostic, error, information
from .isa import (
    InstructionFamily as F,
    WORD_SELECT, MATH, SHIFT, BITWISE, UNARY_BITWISE, SPECIAL, CONDITIONAL_JUMP, SET_ARITY,
    base_mnemonic, resolve_mnemonic,
)
from .lexer import chop
from .regs import (
    OperandKind, classify_operand, split_operand, is_pointer,
    SOURCE_KINDS, TARGET_KINDS, STORE_LOAD_SWIZZLES, SEQUENTIAL_SWIZZLES,
    SINGLE_WORD_RE, FULL_SWIZZLE_RE,
)

Validator = Callable[[Optional[Span], Optional[Span], Sequence[Span], Optional[Span]], Optional[Diagnostic]]

SIZES = (".b", ".w")
SLEEP_SIZES = (".w", ".h", ".l")

# ---------------- Helpers de rango y mensajes ----------------

def _whole(instruction: Span, size: Optional[Span], operands: Sequence[Span]) -> tuple[int, int]:
    """Rango de la instrucción completa (sin comentario)."""
    end = instruction.end
    if size is not None:
        end = max(end, size.end)
    if operands:
        end = max(end, operands[-1].end)
    return instruction.start, end

def _operands_range(instruction: Span, size: Optional[Span], operands: Sequence[Span]) -> tuple[int, int]:
    if operands:
        return operands[0].start, operands[-1].end
    return _whole(instruction, size, operands)

def _at(message: str, span: Span) -> Diagnostic:
    return error(message, span.start, span.end)

def _kind_name(kind: Optional[OperandKind]) -> str:
    return kind.value if kind is not None else "an invalid operand"

def _no_size(name: str, size: Optional[Span]) -> Optional[Diagnostic]:
    if size is not None:
        return _at(f"{name} instruction does not take a size modifier, found {size.text}", size)
    return None

def _count(name: str, expected: int, instruction: Span, size: Optional[Span],
           operands: Sequence[Span]) -> Optional[Diagnostic]:
    if len(operands) != expected:
        plural = "operand" if expected == 1 else "operands"
        return error(f"{name} instructions require {expected} {plural}, found {len(operands)}",
                     *_operands_range(instruction, size, operands))
    return None

def valid_size(size: Optional[Span], instruction: Span, *, required: bool = True) -> Optional[Diagnostic]:
    """Comprueba el sufijo de tamaño común (.b / .w)."""
    if size is None:
        if required:
            return error(f"Invalid size modifier. Expected {' or '.join(SIZES)}",
                         instruction.start, instruction.end)
        return None
    if size.text.lower() not in SIZES:
        return _at(f"Invalid size modifier {size.text}. Expected {' or '.join(SIZES)}", size)
    return None

# ---------------- Validadores ----------------

def validate_nop(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    d = _no_size("Nop", size)
    if d:
        return d
    if operands:
        return error(f"Nop takes no operands, found {len(operands)}", *_operands_range(instruction, size, operands))
    return None

def validate_halt(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    d = _no_size("Halt", size)
    if d:
        return d
    if operands:
        return error(f"Halt takes no operands, found {len(operands)}", *_operands_range(instruction, size, operands))
    return None

def validate_skip(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    if size is not None:
        return _at("Unexpected size specifier.", size)
    if operands:
        return error("Skip does not take operands.", *_operands_range(instruction, size, operands))
    return None

def validate_sleep(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    """slp N  |  slp.w/.h/.l reg

    Con tamaño la duración sale de un registro; sin tamaño, de un inmediato.
    """
    if instruction is None:
        return None
    sized = False
    if size is not None:
        if size.text.lower() not in SLEEP_SIZES:
            return _at("Invalid size, expected .w, .h, or .l", size)
        sized = True

    if len(operands) != 1:
        return error(f"Sleep takes 1 operand, found {len(operands)}", *_operands_range(instruction, size, operands))

    op = operands[0]
    kind = classify_operand(op.text)
    is_reg = kind in SOURCE_KINDS

    if sized and not is_reg:
        return _at(f"Sleep with a size requires a register, got {op.text}", op)
    if not sized and is_reg:
        return error("Size required when using a register as a duration source.",
                     instruction.end, instruction.end + 1)
    if kind is not OperandKind.IMMEDIATE and not is_reg:
        return _at(f"Expected valid number, got {op.text}", op)
    return None

def validate_move(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    """mov dst, src

    Formas válidas (todo puntero puede ser de autoincremento):
      mov  reg,       reg        /  mov reg.n, reg.n       (movimiento)
      mov [reg],      reg.n      /  mov [reg.xyzw], reg.n  (store)
      mov  reg.n,    [reg]       /  mov reg.n, [reg.x]     (load)
    """
    if instruction is None:
        return None
    d = _no_size("Move", size) or _count("Move", 2, instruction, size, operands)
    if d:
        return d

    dst, src = operands
    dst_kind = classify_operand(dst.text)
    src_kind = classify_operand(src.text)

    if dst_kind is None:
        return _at(f"Invalid destination operand for move instruction: {dst.text}", dst)
    if src_kind is None:
        return _at(f"Invalid source operand for move instruction: {src.text}", src)
    if dst_kind is OperandKind.IMMEDIATE:
        return _at(f"Move instruction does not take an immediate value as a destination operand, found {dst.text}", dst)
    if src_kind is OperandKind.IMMEDIATE:
        return _at(f"Move instruction does not take an immediate value as a source operand, found {src.text}", src)

    d_ptr = is_pointer(dst_kind)
    s_ptr = is_pointer(src_kind)
    if d_ptr and s_ptr:
        return error("Move instruction can not take two pointer operands.", dst.start, src.end)

    _, d_swi = split_operand(dst.text)
    _, s_swi = split_operand(src.text)

    if d_ptr:
        if d_swi and d_swi not in STORE_LOAD_SWIZZLES:
            return error("Store swizzle must be x or xyzw.", dst.start, src.end)
        if s_swi and s_swi not in SEQUENTIAL_SWIZZLES:
            return error("Store swizzle must be a sequential word swizzle starting at X.", dst.start, src.end)
    elif s_ptr:
        if s_swi and s_swi not in STORE_LOAD_SWIZZLES:
            return error("Load swizzle must be x or xyzw.", dst.start, src.end)
        if d_swi and d_swi not in SEQUENTIAL_SWIZZLES:
            return error("Load swizzle must be a sequential word swizzle starting at X.", dst.start, src.end)
    elif d_swi != s_swi:
        return error("Moves with swizzled registers must have the same swizzle.", dst.start, src.end)
    return None

def validate_word_select(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    d = _no_size("Word Select", size) or _count("Word Select", 2, instruction, size, operands)
    if d:
        return d

    dst, src = operands
    if classify_operand(dst.text) is not OperandKind.REGISTER:
        return _at("Word Select destination must be a register.", dst)
    if classify_operand(src.text) not in SOURCE_KINDS:
        return _at("Word Select source must be a register with a single word swizzle.", src)

    _, d_swi = split_operand(dst.text)
    _, s_swi = split_operand(src.text)
    if d_swi is not None:
        return _at("Word Select instruction destinations cannot be swizzled.", dst)
    if s_swi and not SINGLE_WORD_RE.match(s_swi):
        return _at("Word Select instruction source swizzle must be exactly one word.", src)
    return None

def validate_math(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    """op[.b|.w] dst, lhs, rhs  — el destino debe ser también una de las entradas."""
    if instruction is None:
        return None
    d = valid_size(size, instruction, required=False) or _count("Math", 3, instruction, size, operands)
    if d:
        return d

    dst, lhs, rhs = operands
    for role, op in (("destination", dst), ("left-hand", lhs), ("right-hand", rhs)):
        if classify_operand(op.text) is None:
            return _at(f"Invalid {role} operand for math instruction: {op.text}", op)

    if classify_operand(dst.text) is not OperandKind.REGISTER:
        return _at(f"Math destination must be a writeable register, found {dst.text}", dst)
    for op in (lhs, rhs):
        if classify_operand(op.text) not in SOURCE_KINDS:
            return _at(f"Math operands must be registers or constants, found {op.text}", op)

    keys = []
    for op in operands:
        key, swi = split_operand(op.text)
        if swi is not None:
            return _at("Math operands cannot be swizzled.", op)
        keys.append(key)

    if keys[0] not in (keys[1], keys[2]):
        return _at("Math destination must also be included in the calculation.", dst)
    return None

def validate_shift(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    d = valid_size(size, instruction) or _count("Shift", 2, instruction, size, operands)
    if d:
        return d

    dst, src = operands
    dst_kind = classify_operand(dst.text)
    src_kind = classify_operand(src.text)
    if dst_kind is None:
        return _at(f"Invalid destination operand for shift instruction: {dst.text}", dst)
    if src_kind is None:
        return _at(f"Invalid source operand for shift instruction: {src.text}", src)
    if dst_kind is not OperandKind.REGISTER:
        return _at("Shift instruction destination must be a register.", dst)
    if src_kind not in SOURCE_KINDS and src_kind is not OperandKind.IMMEDIATE:
        return _at("Shift instruction source must be a register or immediate value.", src)
    return None

def validate_bitwise(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    d = _no_size("Bitwise", size)
    if d:
        return d
    if not operands:
        return error("Bitwise instructions require at least 1 operand, found 0", *_whole(instruction, size, operands))

    if resolve_mnemonic(instruction.text) in UNARY_BITWISE:
        if len(operands) != 1:
            return error(f"Unary bitwise instructions require 1 operand, found {len(operands)}",
                         *_operands_range(instruction, size, operands))
        return None
    return _count("Bitwise", 2, instruction, size, operands)

def validate_special(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    """Dos operandos sin swizzle; el destino debe ser escribible."""
    if instruction is None:
        return None
    if size is not None:
        return _at(f"Special operations do not take a size, found: {size.text}", size)
    d = _count("Special", 2, instruction, size, operands)
    if d:
        return d

    dst, src = operands
    if classify_operand(dst.text) is not OperandKind.REGISTER:
        return _at(f"Destination must be a writeable register, found {dst.text}", dst)
    if classify_operand(src.text) not in SOURCE_KINDS:
        return _at(f"Source must be a register, found {src.text}", src)

    _, d_swi = split_operand(dst.text)
    _, s_swi = split_operand(src.text)
    if d_swi is not None:
        return _at("Special operation destinations cannot be swizzled.", dst)
    if s_swi is not None:
        return _at("Special operation sources cannot be swizzled.", src)
    return None

def validate_swizzle(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    d = _no_size("Swizzle", size) or _count("Swizzle", 1, instruction, size, operands)
    if d:
        return d

    op = operands[0]
    kind = classify_operand(op.text)
    if kind is not OperandKind.REGISTER:
        return _at(f"Swizzle destination must be a writeable register, found {_kind_name(kind)}", op)
    _, swi = split_operand(op.text)
    if not swi:
        return _at("Missing swizzle.", op)
    if not FULL_SWIZZLE_RE.match(swi):
        return _at("Swizzle destination must be a four-word swizzle.", op)
    return None

def validate_set(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    d = _no_size("Set", size)
    if d:
        return d

    mnemonic = base_mnemonic(instruction.text)
    expected = SET_ARITY.get(mnemonic, 2)
    if len(operands) != expected:
        return error(f'Set instruction "{mnemonic}" requires {expected} operands, found {len(operands)}',
                     *_operands_range(instruction, size, operands))

    if classify_operand(operands[0].text) is not OperandKind.REGISTER:
        return _at("Set instruction only accepts a writeable register as the first operand.", operands[0])
    for op in operands[1:]:
        if classify_operand(op.text) not in TARGET_KINDS:
            return _at("Set instructions only accept labels or immediate values as operands.", op)
    return None

def validate_jump(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    d = _no_size("Jump", size) or _count("Jump", 1, instruction, size, operands)
    if d:
        return d

    op = operands[0]
    kind = classify_operand(op.text)
    if kind is None:
        return _at(f"Invalid operand: {op.text}", op)
    if kind not in TARGET_KINDS:
        return _at(f"Jump destination must be a label or immediate, found {kind.value}", op)
    return None

def validate_conditional_jump(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    """jeq/jne src, destino — src registro o constante, destino etiqueta o inmediato."""
    if instruction is None:
        return None
    d = _no_size("Jump", size) or _count("Conditional jump", 2, instruction, size, operands)
    if d:
        return d

    src, dst = operands
    src_kind = classify_operand(src.text)
    dst_kind = classify_operand(dst.text)
    if src_kind is None:
        return _at(f"Invalid source operand: {src.text} - Expected a register.", src)
    if dst_kind is None:
        return _at(f"Invalid jump destination: {dst.text} - Expected a label or immediate.", dst)
    if src_kind not in SOURCE_KINDS:
        return _at(f"Conditional jump source must be a register or constant, found {src_kind.value}", src)
    if dst_kind not in TARGET_KINDS:
        return _at(f"Jump destination must be a label or immediate, found {dst_kind.value}", dst)
    return None

def _not_implemented(instruction: Optional[Span], size: Optional[Span] = None,
        operands: Sequence[Span] = (), comment: Optional[Span] = None) -> Optional[Diagnostic]:
    if instruction is None:
        return None
    return information(f"Parser not implemented for instruction: {instruction.text}",
                       instruction.start, instruction.end)

# ---------------- Tabla de despacho ----------------

VALIDATORS: Dict[F, Validator] = {
    F.NOP: validate_nop,
    F.HALT: validate_halt,
    F.SKIP: validate_skip,
    F.SLEEP: validate_sleep,
    F.MOVE: validate_move,
    F.SWIZZLE: validate_swizzle,
    F.SET: validate_set,
    F.JUMP: validate_jump,
}
VALIDATORS.update({f: validate_word_select for f in WORD_SELECT})
VALIDATORS.update({f: validate_math for f in MATH})
VALIDATORS.update({f: validate_shift for f in SHIFT})
VALIDATORS.update({f: validate_bitwise for f in BITWISE})
VALIDATORS.update({f: validate_special for f in SPECIAL})
VALIDATORS.update({f: validate_conditional_jump for f in CONDITIONAL_JUMP})

def validate(family: F, chopped: Optional[ChoppedLine]) -> Optional[Diagnostic]:
    """Valida una línea ya descompuesta; None significa válida (o sin opinión)."""
    if chopped is None:
        return None
    check = VALIDATORS.get(family, _not_implemented)
    return check(chopped.instruction, chopped.size, chopped.operands, chopped.comment)

def validate_line(text: str) -> Optional[Diagnostic]:
    """chop + resolve + validate. Líneas sin instrucción reconocible devuelven None."""
    chopped = chop(text)
    if chopped is None:
        return None
    family = resolve_mnemonic(chopped.instruction.text)
    if family is None:
        return None
    return validate(family, chopped)
