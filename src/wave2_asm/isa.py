'''
tabla de familias de instrucciones Wave2 (nombres, alias de mnemónicos, grupos)
'''

from __future__ import annotations
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

class InstructionFamily(Enum):
    """Familia semántica de una instrucción; el valor es su nombre legible."""
    NOP = "Nop"
    SLEEP = "Sleep"
    HALT = "Halt"
    SKIP = "Skip"

    MOVE_WORD = "Move Word"
    SWAP_WORD = "Swap Word"
    ADD_WORD = "Add Word"
    SUBTRACT_WORD = "Subtract Word"

    MOVE = "Move"
    SWIZZLE = "Swizzle"

    ADD = "Add"
    ADD_SATURATE = "Add Saturate"
    SUBTRACT = "Subtract"
    SUBTRACT_SATURATE = "Subtract Saturate"
    EQUAL = "Equal"
    NOT_EQUAL = "Not Equal"
    CARRY = "Carry"
    LESS_THAN = "Less Than"
    GREATER_THAN = "Greater Than"
    LESS_OR_EQUAL = "Less or Equal"
    GREATER_OR_EQUAL = "Greater or Equal"
    ADD_OVER = "Add Over"
    SUBTRACT_OVER = "Subtract Over"
    REVERSE_SUBTRACT_OVER = "Reverse Subtract Over"

    SHIFT_LEFT = "Shift Left"
    SHIFT_RIGHT = "Shift Right"
    ARITHMETIC_SHIFT_RIGHT = "Arithmetic Shift Right"
    ROTATE_LEFT = "Rotate Left"
    ROTATE_RIGHT = "Rotate Right"

    BITWISE_AND = "And"
    BITWISE_OR = "Or"
    BITWISE_XOR = "Xor"
    BITWISE_NAND = "Nand"
    BITWISE_NOR = "Nor"
    BITWISE_XNOR = "Xnor"
    BITWISE_NOT_SRC = "Not Src"
    BITWISE_NOT_DST = "Not Dest"
    BITWISE_SRC_AND_NOT_DST = "Src And Not Dest"
    BITWISE_NOT_SRC_AND_DST = "Not Src And Dest"
    BITWISE_SRC_OR_NOT_DST = "Src Or Not Dest"
    BITWISE_NOT_SRC_OR_DST = "Not Src Or Dest"
    BITWISE_ALL = "All"
    BITWISE_ONE = "One"
    BITWISE_SWAP = "Swap"

    HORIZONTAL_ADD = "Horizontal Add"
    MULTIPLY_SATURATE = "Multiply Saturate"
    MULTIPLY_LOW = "Multiply Low"
    MULTIPLY_HIGH = "Multiply High"
    DIVIDE = "Divide"
    RECIPROCAL_DIVIDE = "Reciprocal Divide"

    SET = "Set"
    JUMP = "Jump"
    JUMP_EQUAL = "Jump if Equal"
    JUMP_NOT_EQUAL = "Jump if Not Equal"

F = InstructionFamily

# Primera dirección de palabra del código
CODE_BASE = 0x40

# Alias de mnemónicos por familia (en minúsculas, sin sufijo de tamaño)
ALIASES: Dict[InstructionFamily, Tuple[str, ...]] = {
    F.NOP: ("nop",),
    F.SLEEP: ("slp", "sleep"),
    F.HALT: ("hlt", "halt"),
    F.SKIP: ("skip", "skip1", "skip2", "skip3", "skip4"),

    F.MOVE_WORD: ("wmo", "wmov", "wmove"),
    F.SWAP_WORD: ("wsw", "wswap"),
    F.ADD_WORD: ("wad", "wadd"),
    F.SUBTRACT_WORD: ("wsu", "wsub"),

    F.MOVE: ("mov", "move"),
    F.SWIZZLE: ("swi", "swizzle"),

    F.ADD: ("add",),
    F.ADD_SATURATE: ("adds",),
    F.SUBTRACT: ("sub",),
    F.SUBTRACT_SATURATE: ("subs",),
    F.EQUAL: ("eq", "equ"),
    F.NOT_EQUAL: ("ne", "neq"),
    F.CARRY: ("car", "cry", "carry"),
    F.LESS_THAN: ("lt",),
    F.GREATER_THAN: ("gt",),
    F.LESS_OR_EQUAL: ("le", "lte"),
    F.GREATER_OR_EQUAL: ("ge", "gte"),
    F.ADD_OVER: ("addo", "addover"),
    F.SUBTRACT_OVER: ("subo", "subover"),
    F.REVERSE_SUBTRACT_OVER: ("rsubo", "rsubover"),

    F.SHIFT_LEFT: ("lsl", "asl"),
    F.SHIFT_RIGHT: ("lsr",),
    F.ARITHMETIC_SHIFT_RIGHT: ("asr",),
    F.ROTATE_LEFT: ("rol",),
    F.ROTATE_RIGHT: ("ror",),

    F.BITWISE_AND: ("and",),
    F.BITWISE_OR: ("or",),
    F.BITWISE_XOR: ("xor",),
    F.BITWISE_NAND: ("nand",),
    F.BITWISE_NOR: ("nor",),
    F.BITWISE_XNOR: ("xnor",),
    F.BITWISE_NOT_SRC: ("nsrc", "notsrc"),
    F.BITWISE_NOT_DST: ("ndst", "notdst", "notdest"),
    F.BITWISE_SRC_AND_NOT_DST: ("sand", "srcandnotdst"),
    F.BITWISE_NOT_SRC_AND_DST: ("nsad", "notsrcanddst"),
    F.BITWISE_SRC_OR_NOT_DST: ("sond", "srcornotdst"),
    F.BITWISE_NOT_SRC_OR_DST: ("nsod", "notsrcordst"),
    F.BITWISE_ALL: ("all",),
    F.BITWISE_ONE: ("one",),
    F.BITWISE_SWAP: ("swap",),

    F.HORIZONTAL_ADD: ("hadd",),
    F.MULTIPLY_SATURATE: ("mul", "mults", "multisat"),
    F.MULTIPLY_LOW: ("mlo", "multl", "multlow"),
    F.MULTIPLY_HIGH: ("mhi", "multh", "multhigh"),
    F.DIVIDE: ("div", "divide"),
    F.RECIPROCAL_DIVIDE: ("rdiv", "rdivide"),

    F.SET: ("set", "set1", "set2", "set3", "set4"),
    F.JUMP: ("jmp", "jump"),
    F.JUMP_EQUAL: ("je", "jeq", "jc", "jcp"),
    F.JUMP_NOT_EQUAL: ("jne", "jnc", "jcc"),
}

# Índice inverso mnemónico -> familia
MNEMONICS: Dict[str, InstructionFamily] = {}
for _family, _names in ALIASES.items():
    for _name in _names:
        if _name in MNEMONICS:
            raise RuntimeError(f"Mnemónico duplicado: {_name}")
        MNEMONICS[_name] = _family

# ---- Grupos de familias que comparten validador ----

WORD_SELECT: FrozenSet[InstructionFamily] = frozenset({
    F.MOVE_WORD, F.SWAP_WORD, F.ADD_WORD, F.SUBTRACT_WORD,
})

MATH: FrozenSet[InstructionFamily] = frozenset({
    F.ADD, F.ADD_SATURATE, F.SUBTRACT, F.SUBTRACT_SATURATE,
    F.EQUAL, F.NOT_EQUAL, F.CARRY, F.LESS_THAN, F.GREATER_THAN,
    F.LESS_OR_EQUAL, F.GREATER_OR_EQUAL,
    F.ADD_OVER, F.SUBTRACT_OVER, F.REVERSE_SUBTRACT_OVER,
})

SHIFT: FrozenSet[InstructionFamily] = frozenset({
    F.SHIFT_LEFT, F.SHIFT_RIGHT, F.ARITHMETIC_SHIFT_RIGHT, F.ROTATE_LEFT, F.ROTATE_RIGHT,
})

BITWISE: FrozenSet[InstructionFamily] = frozenset({
    F.BITWISE_AND, F.BITWISE_OR, F.BITWISE_XOR, F.BITWISE_NAND, F.BITWISE_NOR,
    F.BITWISE_XNOR, F.BITWISE_NOT_SRC, F.BITWISE_NOT_DST,
    F.BITWISE_SRC_AND_NOT_DST, F.BITWISE_NOT_SRC_AND_DST,
    F.BITWISE_SRC_OR_NOT_DST, F.BITWISE_NOT_SRC_OR_DST,
    F.BITWISE_ALL, F.BITWISE_ONE, F.BITWISE_SWAP,
})

# Operaciones bit a bit de un solo operando
UNARY_BITWISE: FrozenSet[InstructionFamily] = frozenset({
    F.BITWISE_ALL, F.BITWISE_ONE, F.BITWISE_NOT_DST,
})

SPECIAL: FrozenSet[InstructionFamily] = frozenset({
    F.HORIZONTAL_ADD, F.MULTIPLY_SATURATE, F.MULTIPLY_LOW,
    F.MULTIPLY_HIGH, F.DIVIDE, F.RECIPROCAL_DIVIDE,
})

CONDITIONAL_JUMP: FrozenSet[InstructionFamily] = frozenset({F.JUMP_EQUAL, F.JUMP_NOT_EQUAL})

# Número de operandos de cada variante de 'set' (destino + valores)
SET_ARITY: Dict[str, int] = {"set": 2, "set1": 2, "set2": 3, "set3": 4, "set4": 5}

def base_mnemonic(token: str) -> str:
    """Mnemónico en minúsculas sin el sufijo '.tamaño'."""
    return token.strip().split(".", 1)[0].lower()

def resolve_mnemonic(token: str) -> Optional[InstructionFamily]:
    """Devuelve la familia de un mnemónico (sin distinguir mayúsculas) o None."""
    return MNEMONICS.get(base_mnemonic(token))

def mnemonics(family: InstructionFamily) -> Tuple[str, ...]:
    """Alias aceptados para una familia."""
    return ALIASES.get(family, ())
