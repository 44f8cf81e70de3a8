"""
Amount computation for billing documents.

Every document stores montant_ht (pre-tax), tva (tax) and montant_ttc
(total). Amounts are Decimal, rounded half-up to the cent:

    tva = round2(montant_ht * rate / 100)
    montant_ttc = montant_ht + tva
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import NamedTuple

from .exceptions import DocumentValidationError

CENT = Decimal("0.01")


class Amounts(NamedTuple):
    montant_ht: Decimal
    tva_rate: Decimal
    tva: Decimal
    montant_ttc: Decimal


def to_decimal(value, field="montant"):
    if isinstance(value, Decimal):
        number = value
    else:
        try:
            # str() first so floats such as 0.1 keep their printed value
            number = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            number = None
    if number is None or not number.is_finite():
        raise DocumentValidationError(f"{field}: valeur numérique invalide ({value!r})")
    return number


def round2(value):
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_amounts(base, rate) -> Amounts:
    """Return the pre-tax, tax and total amounts for `base` at `rate` percent."""
    base = to_decimal(base, "montant_ht")
    rate = to_decimal(rate, "tva_rate")
    if base < 0:
        raise DocumentValidationError("Le montant HT ne peut pas être négatif")
    if rate < 0:
        raise DocumentValidationError("Le taux de TVA ne peut pas être négatif")
    base = round2(base)
    tva = round2(base * rate / 100)
    return Amounts(montant_ht=base, tva_rate=rate, tva=tva, montant_ttc=base + tva)


def validate_credit_note_amount(base, invoice=None, is_partial=False):
    """
    Check a credit note's pre-tax amount.

    The amount must be positive. When the credit note cancels an invoice
    (not partial), it may not exceed the invoice's montant_ht.
    """
    base = to_decimal(base, "montant_ht")
    if base <= 0:
        raise DocumentValidationError("Le montant HT doit être supérieur à 0")
    if invoice is not None and not is_partial and base > invoice.montant_ht:
        raise DocumentValidationError(
            "Le montant de l'avoir ne peut pas dépasser le montant de la facture"
        )
    return base


def compute_freight_margin(purchase_price, selling_price):
    """Margin and margin rate (% of selling price) of a freight slip."""
    purchase = to_decimal(purchase_price or 0, "purchase_price")
    selling = to_decimal(selling_price or 0, "selling_price")
    margin = round2(selling - purchase)
    if selling == 0:
        return margin, Decimal("0.00")
    return margin, round2(margin / selling * 100)
