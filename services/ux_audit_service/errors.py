class UxAuditError(Exception):
    """Base class for classified audit failures.

    ``kind`` names the failure class for operator logs; ``public_message`` is
    the only text ever returned to API callers.
    """

    kind = "UxAuditError"
    status_code = 500
    public_message = "Internal server error. Please try again later."

    def __init__(self, message: str = "", *, detail: str | None = None):
        super().__init__(message or self.kind)
        self.detail = detail


class InvalidInput(UxAuditError):
    kind = "InvalidInput"
    status_code = 400
    public_message = "Invalid URL provided"


class SnapshotFailure(UxAuditError):
    kind = "SnapshotFailure"


class GenerationFailure(UxAuditError):
    kind = "GenerationFailure"


class NormalizationError(UxAuditError):
    kind = "NormalizationError"


class MalformedResponse(NormalizationError):
    kind = "MalformedResponse"


class InvalidJson(NormalizationError):
    kind = "InvalidJson"


class MissingScore(NormalizationError):
    kind = "MissingScore"


class PersistenceFailure(UxAuditError):
    kind = "PersistenceFailure"


class EnrichmentFailure(UxAuditError):
    # Never propagated: the speed scorer logs it and degrades to None.
    kind = "EnrichmentFailure"
