class DocQAError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DocQAError):
    """Requested resource does not exist (or was soft-deleted)."""


class ForbiddenError(DocQAError):
    """Requester's role or ownership does not allow the operation."""


class UnauthorizedError(DocQAError):
    """No usable requester identity on the request."""


class BadInputError(DocQAError):
    """Required input is missing or malformed."""


class ConflictError(DocQAError):
    """Operation conflicts with existing state (e.g. terminal job, duplicate email)."""


class ProcessingFailure(DocQAError):
    """A processing backend reported failure. Recorded on the job, never raised to HTTP."""


class CompletionHandlerFailure(DocQAError):
    """Unexpected error while applying an ingestion outcome. Logged and masked."""
