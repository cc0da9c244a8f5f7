from __future__ import annotations
import re
from typing import List, Optional, Tuple

from .ast import Span, ChoppedLine

COMMENT_CHAR = ";"

CODE_RE = re.compile(r"^(?P<lead>\s*)(?P<inst>[^\s.;]+)(?P<size>\.\S*)?(?P<ws>\s*)(?P<oper>.*)$", re.DOTALL)

def split_comment(line: str) -> Tuple[str, Optional[Span]]:
    """Split 'code ; comment' into the code part and an optional comment span."""
    idx = line.find(COMMENT_CHAR)
    if idx < 0:
        return line, None
    return line[:idx], Span(idx, len(line), line[idx:])

def strip_comment(line: str) -> str:
    """Remove a ';' comment and surrounding whitespace."""
    code, _ = split_comment(line)
    return code.strip()

def split_operand_spans(oper: str, offset: int) -> List[Span]:
    """Split an operand list on ',' keeping each operand's position in the line.

    `offset` is the column where `oper` starts. Offsets come from the untrimmed
    pieces, so inner whitespace never shifts the spans.
    """
    if not oper.strip():
        return []
    out: List[Span] = []
    pos = offset
    for piece in oper.split(","):
        text = piece.strip()
        start = pos + (len(piece) - len(piece.lstrip()))
        out.append(Span(start, start + len(text), text))
        pos += len(piece) + 1
    return out

def chop(line: str) -> Optional[ChoppedLine]:
    """Decompose one source line into instruction, size, operands and comment.

    Returns None when the line has no leading instruction token (blank lines,
    comments, or lines starting with '.').
    """
    line = line.rstrip("\r\n")
    code, comment = split_comment(line)
    m = CODE_RE.match(code)
    if not m:
        return None

    inst_start = m.start("inst")
    instruction = Span(inst_start, m.end("inst"), m.group("inst"))

    size: Optional[Span] = None
    if m.group("size") is not None:
        size = Span(m.start("size"), m.end("size"), m.group("size"))

    operands = split_operand_spans(m.group("oper"), m.start("oper"))
    return ChoppedLine(instruction=instruction, size=size, operands=tuple(operands), comment=comment)

decompose = chop

def split_mnemonic_operands(line: str) -> Tuple[str, str]:
    """Return (first token lowercased, rest) of a comment-free line."""
    s = line.strip()
    if not s:
        return "", ""
    parts = s.split(None, 1)
    if len(parts) == 1:
        return parts[0].lower(), ""
    return parts[0].lower(), parts[1].strip()
