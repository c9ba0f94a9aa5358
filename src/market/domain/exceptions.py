"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Every one of them means the whole operation was rejected and nothing was
committed.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConcurrencyError(DomainException):
    """An operation collided with another one already in flight."""


# --- Listing ------------------------------------------------------------------


class EmptyNameError(ValidationError):
    """Product name is missing or blank."""


class ZeroPriceError(ValidationError):
    """Product price is zero or negative."""


# --- Lookup -------------------------------------------------------------------


class ProductNotFoundError(EntityNotFoundError):
    """A read-only lookup found no product."""


class InvalidIdError(EntityNotFoundError):
    """A purchase referenced an id that was never assigned."""


# --- Purchase -----------------------------------------------------------------


class AlreadySoldError(ValidationError):
    """The product has already been sold."""


class InsufficientPaymentError(ValidationError):
    """The attached value is below the price."""


class SelfPurchaseError(ValidationError):
    """The buyer already owns the product."""


class ReentrancyRejectedError(ConcurrencyError):
    """Another purchase is still executing."""


class TransferFailedError(DomainException):
    """The payment gateway reported a failed transfer."""

    def __init__(self, message: str, recipient: object, amount: object, reason: str | None) -> None:
        super().__init__(message)
        self.recipient = recipient
        self.amount = amount
        self.reason = reason


class RefundTransferFailedError(TransferFailedError):
    """The buyer's change could not be refunded."""


class SellerTransferFailedError(TransferFailedError):
    """The seller could not be paid."""
