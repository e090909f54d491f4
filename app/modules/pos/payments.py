"""
Métodos de pago de las ventas POS

Una venta guarda su forma de pago como texto:
- Pago único: "CASH", "DEBIT", "PAGO_MOVIL"...
- Pago mixto: "CASH:600, DEBIT:300, TRANSFER:300"

En un pago único el monto del método es el total de la venta.
"""

from decimal import Decimal, InvalidOperation
from typing import Dict

CASH_METHOD = "CASH"


def parse_payment_methods(payment_method: str, total: Decimal) -> Dict[str, Decimal]:
    """
    Desglosa la forma de pago en {método: monto}.

    >>> parse_payment_methods("CASH:600, DEBIT:300", Decimal("900"))
    {'CASH': Decimal('600'), 'DEBIT': Decimal('300')}
    """
    breakdown: Dict[str, Decimal] = {}

    for part in (payment_method or CASH_METHOD).split(","):
        part = part.strip()
        if not part:
            continue

        method, _, raw_amount = part.partition(":")
        method = method.strip().upper()
        if raw_amount.strip():
            try:
                amount = Decimal(raw_amount.strip())
            except InvalidOperation:
                raise ValueError(f"Monto inválido para el método {method}: '{raw_amount.strip()}'")
        else:
            amount = Decimal(total)

        breakdown[method] = breakdown.get(method, Decimal("0")) + amount

    return breakdown


def cash_portion(payment_method: str, total: Decimal) -> Decimal:
    """Parte de la venta pagada en efectivo"""
    return parse_payment_methods(payment_method, total).get(CASH_METHOD, Decimal("0"))
