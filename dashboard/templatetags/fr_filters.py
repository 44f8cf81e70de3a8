"""
French locale template filters.

Usage in templates:
    {% load fr_filters %}
    {{ invoice.montant_ttc|euros }}     → "1 234,56 €"
    {{ invoice.date_emission|date_fr }} → "17/10/2026"
    {{ some_date|mois_fr }}             → "octobre 2026"
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django import template

register = template.Library()

MONTHS_FR = [
    "", "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]


@register.filter
def euros(value):
    """Format an amount as euros with French separators."""
    if value is None or value == "":
        return ""
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return value
    sign = "-" if amount < 0 else ""
    units, cents = f"{abs(amount):.2f}".split(".")
    groups = []
    while units:
        groups.insert(0, units[-3:])
        units = units[:-3]
    return f"{sign}{' '.join(groups)},{cents} €"


@register.filter
def date_fr(value):
    """Day/month/year, e.g. 17/10/2026."""
    if value is None:
        return ""
    try:
        return f"{value.day:02d}/{value.month:02d}/{value.year}"
    except AttributeError:
        return str(value)


@register.filter
def mois_fr(value):
    """Month name and year, e.g. "octobre 2026"."""
    if value is None:
        return ""
    try:
        return f"{MONTHS_FR[value.month]} {value.year}"
    except (AttributeError, IndexError):
        return str(value)
