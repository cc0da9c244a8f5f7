'''
clase Diagnostic y helpers (rango de columnas, severidades, traslado a documento)
'''

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional, Literal

# Severidades reconocidas por el editor
Severity = Literal["error", "warning", "information", "hint"]

SOURCE = "Wave2 Asm"

_SEV_TO_LABEL = {
    "error": "ERROR",
    "warning": "WARNING",
    "information": "INFO",
    "hint": "HINT",
}

@dataclass(frozen=True)
class Diagnostic:
    """Estructura de un diagnóstico para reportar problemas.

    `start`/`end` son columnas (base 0, intervalo semiabierto) relativas al
    fragmento validado. Al validar un documento completo se trasladan con
    `at()` para añadir línea y desplazamiento de columna.
    """
    severity: Severity
    message: str
    start: int = 0
    end: int = 0
    line: Optional[int] = None
    file: Optional[str] = None
    source: str = SOURCE

    def at(self, line: int, col_offset: int = 0, *, file: str | None = None) -> "Diagnostic":
        """Devuelve una copia ubicada en `line` con las columnas desplazadas."""
        return replace(
            self,
            start=self.start + col_offset,
            end=self.end + col_offset,
            line=line,
            file=file if file is not None else self.file,
        )

    def __str__(self) -> str:
        loc = ""
        if self.file is not None:
            loc += f"{self.file}:"
        if self.line is not None:
            loc += f"{self.line}:{self.start + 1}"
        if loc:
            loc += ": "
        sev = _SEV_TO_LABEL.get(self.severity, str(self.severity).upper())
        return loc + f"{sev}: {self.message}"

def error(message: str, start: int = 0, end: int = 0, *, line: int | None = None,
          file: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo error."""
    return Diagnostic("error", message, start, end, line, file)

def warning(message: str, start: int = 0, end: int = 0, *, line: int | None = None,
            file: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo advertencia."""
    return Diagnostic("warning", message, start, end, line, file)

def information(message: str, start: int = 0, end: int = 0, *, line: int | None = None,
                file: str | None = None) -> Diagnostic:
    """Crea un diagnóstico informativo."""
    return Diagnostic("information", message, start, end, line, file)

def hint(message: str, start: int = 0, end: int = 0, *, line: int | None = None,
         file: str | None = None) -> Diagnostic:
    """Crea un diagnóstico de tipo pista."""
    return Diagnostic("hint", message, start, end, line, file)
