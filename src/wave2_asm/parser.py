# src/wave2_asm/parser.py
from __future__ import annotations
import re
from bisect import bisect_right
from typing import Iterator, List, Optional, Tuple, Union

from .lexer import chop, strip_comment, split_mnemonic_operands, COMMENT_CHAR
from .ast import CodeLine, LabelDef, RawWord, MemoryWord
from .isa import CODE_BASE, resolve_mnemonic
from .validation import validate_line
from .diagnostics import error, Diagnostic
from .utils import HEX_RE, is_unsigned_nbit

SECTION_RE = re.compile(r"\.(?P<kind>memory|code)\b")
LABEL_NAME_RE = re.compile(r"^[0-9A-Za-z_]+$")

Node = Union[CodeLine, LabelDef, RawWord, MemoryWord]

def split_sections(text: str) -> List[Tuple[str, int, int]]:
    """Devuelve (tipo, inicio, fin) de cada sección '.memory' / '.code'.

    Cada sección va desde el final de su marcador hasta el siguiente marcador
    o el final del texto. Lo que precede al primer marcador se ignora.
    """
    marks = list(SECTION_RE.finditer(text))
    out: List[Tuple[str, int, int]] = []
    for i, m in enumerate(marks):
        end = marks[i + 1].start() if i + 1 < len(marks) else len(text)
        out.append((m.group("kind"), m.end(), end))
    return out

def _line_starts(text: str) -> List[int]:
    """Desplazamientos de inicio de cada línea (ordenados)."""
    starts = [0]
    pos = text.find("\n")
    while pos != -1:
        starts.append(pos + 1)
        pos = text.find("\n", pos + 1)
    return starts

def _position(starts: List[int], offset: int) -> Tuple[int, int]:
    """(línea base 1, columna base 0) de un desplazamiento absoluto."""
    line = bisect_right(starts, offset)
    return line, offset - starts[line - 1]

def _lines(text: str, start: int, end: int) -> Iterator[Tuple[str, int]]:
    """Líneas de text[start:end] junto con su desplazamiento absoluto."""
    pos = start
    for raw in text[start:end].split("\n"):
        yield raw.rstrip("\r"), pos
        pos += len(raw) + 1

def _parse_memory(text: str, starts: List[int], start: int, end: int, nodes: List[Node],
                  diags: List[Diagnostic], filename: Optional[str]) -> None:
    """Empaqueta los nibbles hexadecimales de una sección .memory en palabras de 16 bits."""
    value = 0
    nibbles = 0
    word_pos: Tuple[int, int] = (0, 0)
    i = start
    while i < end:
        ch = text[i]
        if ch == COMMENT_CHAR:
            # comentario hasta fin de línea
            while i < end and text[i] != "\n":
                i += 1
            continue
        if ch in "0123456789abcdefABCDEF":
            if nibbles == 0:
                word_pos = _position(starts, i)
            value = (value << 4) | int(ch, 16)
            nibbles += 1
            if nibbles == 4:
                nodes.append(MemoryWord(value=value, line=word_pos[0], col=word_pos[1]))
                value, nibbles = 0, 0
        elif not ch.isspace():
            line, col = _position(starts, i)
            diags.append(error(f'Unexpected character "{ch}" in memory section.', col, col + 1,
                               line=line, file=filename))
        i += 1
    if nibbles:
        nodes.append(MemoryWord(value=value, line=word_pos[0], col=word_pos[1]))

def parse(text: str, *, filename: Optional[str] = None) -> Tuple[List[Node], List[Diagnostic]]:
    """
    Devuelve (nodes, diagnostics) donde nodes es una lista de:
      - MemoryWord(value, line, col)                 (secciones .memory)
      - CodeLine(text, chopped, family, line, col, address, valid)
      - RawWord(value, line, col, address)            ('!1234')
      - LabelDef(name, line, col, address)            (':nombre')

    Reglas de .code:
      - Comentarios: ';' hasta fin de línea.
      - Instrucciones: el primer token resuelve a una familia; se valida la línea.
      - '!hex': palabra literal de 16 bits.
      - ':nombre': etiqueta, toma la dirección de la siguiente palabra.
      - Cualquier otra cosa: instrucción desconocida.
    """
    nodes: List[Node] = []
    diags: List[Diagnostic] = []
    addr = CODE_BASE
    starts = _line_starts(text)

    for kind, start, end in split_sections(text):
        if kind == "memory":
            _parse_memory(text, starts, start, end, nodes, diags, filename)
            continue

        for raw, offset in _lines(text, start, end):
            code = strip_comment(raw)
            if not code:
                continue
            lineno, col = _position(starts, offset)
            lead = len(raw) - len(raw.lstrip())
            span_end = col + len(raw.split(COMMENT_CHAR, 1)[0].rstrip())

            mnemonic, _ = split_mnemonic_operands(code)
            family = resolve_mnemonic(mnemonic)

            # 1) Instrucción conocida
            if family is not None:
                d = validate_line(raw)
                if d is not None:
                    diags.append(d.at(lineno, col, file=filename))
                chopped = chop(raw)
                if chopped is not None:
                    nodes.append(CodeLine(text=code, chopped=chopped, family=family,
                                          line=lineno, col=col, address=addr, valid=d is None))
                addr += 1
                continue

            # 2) Palabra literal '!hex'
            if code.startswith("!"):
                digits = re.sub(r"\s", "", code[1:])
                if not HEX_RE.match(digits):
                    diags.append(error(f"Raw hex instructions must be valid hex numbers but found: {code}",
                                       col + lead, span_end, line=lineno, file=filename))
                elif not is_unsigned_nbit(int(digits, 16), 16):
                    diags.append(error("Raw hex instructions must be between 0x0000 and 0xFFFF.",
                                       col + lead, span_end, line=lineno, file=filename))
                else:
                    nodes.append(RawWord(value=int(digits, 16), line=lineno, col=col + lead, address=addr))
                addr += 1
                continue

            # 3) Etiqueta ':nombre'
            # la etiqueta no ocupa palabra: vale la dirección de la siguiente
            if code.startswith(":"):
                name = re.sub(r"\s", "", code[1:])
                if not LABEL_NAME_RE.match(name):
                    diags.append(error(f"Labels must be valid identifiers but found: {code}",
                                       col + lead, span_end, line=lineno, file=filename))
                else:
                    nodes.append(LabelDef(name=name, line=lineno, col=col + lead, address=addr))
                continue

            # 4) Instrucción desconocida
            diags.append(error(f'Instruction "{code.split(None, 1)[0]}" is not a valid instruction.',
                               col + lead, span_end, line=lineno, file=filename))

    return nodes, diags
