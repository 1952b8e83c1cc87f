"""
Error taxonomy shared by the ledger, friends and accounts services.

Every error is an ``APIException`` so DRF renders it with the right status
code when it escapes a view. Services raise these directly; views never
translate them by hand.

Exception Hierarchy:
    CuppyError (base)
    ├── InvalidAmountError        400
    ├── InsufficientBalanceError  400
    ├── SelfTransferError         400
    ├── InvalidRequestError       400
    ├── UnauthorizedError         403
    ├── NotFoundError             404
    ├── DuplicateRequestError     409
    ├── ConflictError             409  (retried internally by the ledger)
    └── UnavailableError          503
"""
from rest_framework.exceptions import APIException


class CuppyError(APIException):
    """Base exception for all Cuppy service errors."""
    status_code = 400
    default_detail = 'Request could not be processed.'
    default_code = 'error'


class InvalidAmountError(CuppyError):
    """Amount is zero, negative or otherwise unusable."""
    status_code = 400
    default_detail = 'Amount must be a positive number.'
    default_code = 'invalid_amount'


class InsufficientBalanceError(CuppyError):
    """Debit would take the balance below zero."""
    status_code = 400
    default_detail = 'Insufficient points balance.'
    default_code = 'insufficient_balance'


class SelfTransferError(CuppyError):
    """Sender and receiver are the same account."""
    status_code = 400
    default_detail = 'Cannot transfer points to yourself.'
    default_code = 'self_transfer'


class InvalidRequestError(CuppyError):
    """Request is well-formed but makes no sense (e.g. befriending yourself)."""
    status_code = 400
    default_detail = 'Invalid request.'
    default_code = 'invalid_request'


class UnauthorizedError(CuppyError):
    """Caller may not act on this resource."""
    status_code = 403
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'unauthorized'


class NotFoundError(CuppyError):
    """Resource does not exist, is inactive, or is not visible to the caller."""
    status_code = 404
    default_detail = 'Not found.'
    default_code = 'not_found'


class DuplicateRequestError(CuppyError):
    """A pending friend request already links the two accounts."""
    status_code = 409
    default_detail = 'A pending request already exists between these users.'
    default_code = 'duplicate_request'


class ConflictError(CuppyError):
    """Optimistic version check failed; the caller should retry."""
    status_code = 409
    default_detail = 'Account was modified concurrently. Please retry.'
    default_code = 'conflict'


class UnavailableError(CuppyError):
    """Transient infrastructure failure; retry with backoff."""
    status_code = 503
    default_detail = 'Service temporarily unavailable. Please retry.'
    default_code = 'unavailable'
