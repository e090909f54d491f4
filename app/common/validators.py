"""
Validadores específicos para Venezuela
"""
import re
from typing import Optional


RIF_PREFIXES = ("V", "E", "J", "P", "G", "C")


def normalize_rif(rif: str) -> str:
    """Limpia espacios y pasa a mayúsculas: ' j-12345678-9 ' -> 'J-12345678-9'."""
    return re.sub(r'\s', '', rif or '').upper()


def validate_rif(rif: str) -> bool:
    """
    Valida un RIF venezolano.
    - Entre 10 y 12 caracteres (con o sin guiones)
    - Empieza por V, E, J, P, G o C
    - El resto son dígitos, opcionalmente separados por guiones

    Ejemplos válidos: J-12345678-9, V123456789, G-20000001-0
    """
    cleaned = normalize_rif(rif)

    if not 10 <= len(cleaned) <= 12:
        return False

    return re.match(r'^[VEJPGC]-?\d{7,9}-?\d?$', cleaned) is not None


def validate_phone(phone: Optional[str]) -> bool:
    """
    Valida número telefónico venezolano.
    Formatos válidos:
    - +58XXXXXXXXXX (10 dígitos después del +58)
    - 0XXXXXXXXXX (11 dígitos, ej. 0414-1234567)
    """
    if not phone:
        return True

    cleaned = re.sub(r'[\s\-\(\)]', '', phone)

    patterns = [
        r'^\+58[24][0-9]{9}$',   # +58412XXXXXXX / +58212XXXXXXX
        r'^0[24][0-9]{9}$',      # 0412XXXXXXX / 0212XXXXXXX
    ]

    return any(re.match(pattern, cleaned) for pattern in patterns)
