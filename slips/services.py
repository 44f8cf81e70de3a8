"""
Slip numbering and lifecycle helpers.

Slip numbers look like "2026 0042": a per-type prefix (the year the counter
was created) and a zero-padded running number. The counter row is locked
for the duration of the caller's transaction, so two operators creating
slips at the same time never receive the same number.
"""

import logging

from django.db import transaction
from django.http import Http404
from django.utils import timezone

from accounts.mixins import owned_by_user

from .models import FreightSlip, SlipNumberConfig, SlipStatus, SlipType, TransportSlip

logger = logging.getLogger(__name__)

SLIP_MODELS = {
    SlipType.TRANSPORT: TransportSlip,
    SlipType.FREIGHT: FreightSlip,
}


def next_slip_number(slip_type):
    """Allocate the next slip number for `slip_type`."""
    slip_type = SlipType(slip_type)
    with transaction.atomic():
        config, _ = SlipNumberConfig.objects.select_for_update().get_or_create(
            type=slip_type,
            defaults={"prefix": str(timezone.localdate().year), "current_number": 0},
        )
        config.current_number += 1
        config.save(update_fields=["current_number", "updated_at"])
    return f"{config.prefix} {config.current_number:04d}"


def _create_slip(slip_type, created_by=None, **fields):
    model = SLIP_MODELS[slip_type]
    with transaction.atomic():
        slip = model(number=next_slip_number(slip_type), created_by=created_by, **fields)
        slip.full_clean(exclude=["number", "cmr_file"])
        slip.save()
    logger.info("Created %s slip %s", slip_type, slip.number)
    return slip


def create_transport_slip(created_by=None, **fields):
    return _create_slip(SlipType.TRANSPORT, created_by=created_by, **fields)


def create_freight_slip(created_by=None, **fields):
    return _create_slip(SlipType.FREIGHT, created_by=created_by, **fields)


def update_slip_status(slip, status):
    """Set a slip's status. Any of the four statuses may follow any other."""
    if status not in SlipStatus.values:
        raise ValueError(f"Unknown slip status '{status}'. Allowed: {SlipStatus.values}")
    slip.status = status
    slip.save(update_fields=["status", "updated_at"])
    return slip


def visible_slips(slip_type, user):
    """Slips of one type visible to `user`; exploitation staff only see their own."""
    model = SLIP_MODELS[SlipType(slip_type)]
    qs = model.objects.select_related("client", "created_by")
    if slip_type == SlipType.FREIGHT:
        qs = qs.select_related("fournisseur")
    return owned_by_user(qs, user)


def parse_slip_type(value):
    """SlipType for a value taken from a URL; 404 on anything else."""
    try:
        return SlipType(value)
    except ValueError:
        raise Http404(f"Type de bordereau inconnu : {value}") from None


def slip_model(slip_type):
    return SLIP_MODELS[parse_slip_type(slip_type)]
