"""
Sequential document numbering.

Format: <letter><YY><MM>-<sequence>
    F = invoice, D = quote (devis), A = credit note (avoir)
    e.g. F2406-01, D2406-12, A2406-003

The sequence restarts at 1 in every (type, year, month) bucket. Numbers
are drawn from a NumberSequence row locked with SELECT FOR UPDATE, so
concurrent callers serialize on the counter instead of racing on a
"read the last number, add one" lookup. Call next_document_number inside
the transaction that inserts the document: if the insert fails, the
increment is rolled back with it and no number is lost.
"""

import re

from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import ClientInvoice, ClientQuote, CreditNote, DocumentType, NumberSequence

LETTERS = {
    DocumentType.INVOICE: "F",
    DocumentType.QUOTE: "D",
    DocumentType.CREDIT_NOTE: "A",
}

PADDING = {
    DocumentType.INVOICE: 2,
    DocumentType.QUOTE: 2,
    DocumentType.CREDIT_NOTE: 3,
}

DOCUMENT_MODELS = {
    DocumentType.INVOICE: ClientInvoice,
    DocumentType.QUOTE: ClientQuote,
    DocumentType.CREDIT_NOTE: CreditNote,
}

NUMBER_RE = re.compile(r"^(?P<letter>[FDA])(?P<year>\d{2})(?P<month>\d{2})-(?P<sequence>\d{2,})$")


def bucket_prefix(document_type, on_date):
    """'F2406' for an invoice issued in June 2024."""
    return f"{LETTERS[DocumentType(document_type)]}{on_date:%y%m}"


def format_number(document_type, on_date, sequence):
    document_type = DocumentType(document_type)
    return f"{bucket_prefix(document_type, on_date)}-{sequence:0{PADDING[document_type]}d}"


def parse_number(numero):
    """Split 'F2406-03' into ('F', 24, 6, 3). Raises ValueError on anything else."""
    match = NUMBER_RE.match(numero or "")
    if not match:
        raise ValueError(f"Invalid document number: {numero!r}")
    return (
        match["letter"],
        int(match["year"]),
        int(match["month"]),
        int(match["sequence"]),
    )


def highest_issued_sequence(document_type, prefix):
    """
    Largest sequence already used in a bucket, 0 if none.

    Compared numerically: 'F2406-100' sorts before 'F2406-99' as text.
    """
    model = DOCUMENT_MODELS[DocumentType(document_type)]
    numbers = model.objects.filter(numero__startswith=f"{prefix}-").values_list("numero", flat=True)
    highest = 0
    for numero in numbers:
        try:
            highest = max(highest, parse_number(numero)[3])
        except ValueError:
            continue
    return highest


def _locked_counter(document_type, prefix):
    counter = (
        NumberSequence.objects.select_for_update()
        .filter(document_type=document_type, prefix=prefix)
        .first()
    )
    if counter is not None:
        return counter
    try:
        with transaction.atomic():
            # Seeded from existing documents so imported numbers are never reissued
            return NumberSequence.objects.create(
                document_type=document_type,
                prefix=prefix,
                current_number=highest_issued_sequence(document_type, prefix),
            )
    except IntegrityError:
        # Another request created the bucket first; wait for its lock
        return NumberSequence.objects.select_for_update().get(document_type=document_type, prefix=prefix)


def next_document_number(document_type, on_date=None):
    """Allocate and return the next number for `document_type` in the bucket of `on_date`."""
    document_type = DocumentType(document_type)
    on_date = on_date or timezone.localdate()
    prefix = bucket_prefix(document_type, on_date)

    with transaction.atomic():
        counter = _locked_counter(document_type, prefix)
        counter.current_number += 1
        counter.save(update_fields=["current_number", "updated_at"])

    return format_number(document_type, on_date, counter.current_number)
