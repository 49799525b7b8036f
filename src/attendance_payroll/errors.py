"""Error taxonomy shared by services and the API layer.

- ValidationError: the caller's input is malformed (missing employee,
  non-positive rate, non-numeric hours). Nothing is mutated.
- PreconditionFailedError: the input is fine but the record's state forbids
  the operation (payroll already paid, no completed logs to settle).
- GatewayError: an external dependency (payment gateway) failed.
"""

from __future__ import annotations


class PayrollError(Exception):
    """Base class for payroll engine errors."""


class ValidationError(PayrollError):
    """Raised when operation input is invalid."""


class NotFoundError(ValidationError):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class PreconditionFailedError(PayrollError):
    """Raised when a record's state does not allow the operation."""

    def __init__(self, reason: str, message: str | None = None):
        self.reason = reason
        super().__init__(message or reason)


class GatewayError(PayrollError):
    """Raised when the payment gateway rejects or fails a request."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
