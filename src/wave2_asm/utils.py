'''
 inmediatos y palabras de 16 bits (parseo, rangos, formato)
'''

from __future__ import annotations
import re

# Máscara para palabras de 16 bits sin signo
U16_MASK = 0xFFFF

DEC_RE = re.compile(r"^[0-9]+$")
HEX_RE = re.compile(r"^[0-9a-fA-F]+$")

def u16(x: int) -> int:
    """Fuerza el valor al rango de 16 bits sin signo."""
    return x & U16_MASK

def is_unsigned_nbit(x: int, n: int) -> bool:
    """Devuelve True si x está en [0, 2^n) (sin signo de n bits)."""
    if n <= 0:
        raise ValueError("n debe ser positivo")
    return 0 <= x < (1 << n)

def parse_immediate(token: str) -> int:
    """Valor de un inmediato: '$1F' es hexadecimal, '42' decimal, '1F' hexadecimal.

    Lanza ValueError si el texto no es un inmediato.
    """
    t = token.strip()
    if t.startswith("$"):
        digits = t[1:]
        if not HEX_RE.match(digits):
            raise ValueError(f"Inmediato inválido: {token}")
        return int(digits, 16)
    if DEC_RE.match(t):
        return int(t, 10)
    if HEX_RE.match(t):
        return int(t, 16)
    raise ValueError(f"Inmediato inválido: {token}")

def to_hex16(x: int, *, prefix: bool = True) -> str:
    """Representación hexadecimal de 16 bits (cadena), con o sin prefijo 0x."""
    s = format(u16(x), "04x")
    return ("0x" + s) if prefix else s
