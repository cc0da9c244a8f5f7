from __future__ import annotations
import argparse, sys
from typing import List, Tuple

from .parser import parse, Node
from .linker import first_pass, LinkResult
from .diagnostics import Diagnostic
from .utils import to_hex16

DEFAULT_MAX_PROBLEMS = 1000

def check_text(text: str, *, filename: str | None = None,
               max_problems: int = DEFAULT_MAX_PROBLEMS) -> Tuple[List[Node], List[Diagnostic], LinkResult]:
    """Parsea secciones, valida cada línea y resuelve etiquetas.
    Devuelve (nodes, diagnostics_totales, link_result); los diagnósticos van
    en orden de documento y recortados a `max_problems`."""
    nodes, diags_parse = parse(text, filename=filename)
    link = first_pass(nodes, filename=filename)
    diags = sorted(list(diags_parse) + list(link.diagnostics),
                   key=lambda d: (d.line or 0, d.start))
    if max_problems >= 0:
        diags = diags[:max_problems]
    return nodes, diags, link

def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Wave2 Asm source checker")
    ap.add_argument("source", help="archivo fuente con secciones .memory/.code")
    ap.add_argument("--max-problems", type=int, default=DEFAULT_MAX_PROBLEMS,
                    help="número máximo de diagnósticos a mostrar (por defecto %(default)s)")
    args = ap.parse_args(argv)

    try:
        with open(args.source, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as ex:
        print(f"ERROR: no pude leer {args.source}: {ex}", file=sys.stderr)
        return 2

    nodes, diags, link = check_text(text, filename=args.source, max_problems=args.max_problems)

    had_error = False
    for d in diags:
        # imprimimos todo; si hay error, devolvemos código 1
        print(d, file=sys.stderr)
        if d.severity == "error":
            had_error = True

    if had_error:
        return 1

    print(f"OK: {link.code_size} palabras de código desde {to_hex16(link.code_base)}, "
          f"{len(link.symtab)} etiquetas, "
          f"{link.memory_size} palabras de memoria")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
