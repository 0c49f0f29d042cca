"""Classified failures for clearance status resolution.

Each fatal failure carries a stable error_code that the HTTP layer maps to a
status code. Missing course/faculty references are not errors: they are
absorbed by the resolvers with placeholder names.
"""


class ClearanceError(Exception):
    """Base exception for a failed clearance resolution."""
    error_code = "CLEARANCE_ERROR"
    default_message = "Clearance status could not be resolved"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NoIdentityError(ClearanceError):
    error_code = "NO_IDENTITY"
    default_message = "No student identity was supplied"


class ShardNotFoundError(ClearanceError):
    error_code = "SHARD_NOT_FOUND"
    default_message = "Student record not found in any year or section"


class NoLedgerForTermError(ClearanceError):
    error_code = "NO_LEDGER_FOR_TERM"
    default_message = "No clearance ledger exists for this term"


class NoMatchingEntryError(ClearanceError):
    error_code = "NO_MATCHING_ENTRY"
    default_message = "No clearance entry found for this student"


class StoreUnavailableError(ClearanceError):
    """Connectivity or permission failure while reading the document store."""
    error_code = "STORE_UNAVAILABLE"
    default_message = "Document store is unavailable"


class ResolutionTimeoutError(ClearanceError):
    error_code = "RESOLUTION_TIMEOUT"
    default_message = "Clearance status resolution timed out"


class MalformedLedgerError(ClearanceError):
    """The ledger document or the student's own entry does not have the expected shape."""
    error_code = "MALFORMED_LEDGER"
    default_message = "Clearance ledger entry is malformed"
