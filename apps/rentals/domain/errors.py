"""Exceptions raised by the rental core."""


class RentalError(Exception):
    """Base class for expected business-rule failures."""


class InvalidTransitionError(RentalError, ValueError):
    """A rental request transition was attempted from a state that does not allow it."""


class RentalRequestNotFound(RentalError, LookupError):
    """No rental request with the given id."""


class NotRequestOwnerError(RentalError, PermissionError):
    """Only the tenant who submitted a request may withdraw it."""


class CommitmentConflictError(RentalError):
    """The property is already committed for the requested period."""


class TenantMaterializationError(RentalError):
    """Creating the tenant record for an approved request failed."""
