"""Business-rule errors raised by the billing services."""


class BillingError(Exception):
    """Base class for billing failures shown to the user as-is."""


class DocumentValidationError(BillingError, ValueError):
    """Input rejected before anything is written."""


class InvalidStatusTransition(BillingError, ValueError):
    """Status change not permitted for this document type."""
