"""Error taxonomy shared by the orchestrator, extraction and HTTP layers."""


class MindmateError(Exception):
    """Base error carrying a user-facing message and an HTTP status."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(MindmateError):
    """Required input is missing or empty. The user must correct it."""

    status_code = 400


class ConfigurationError(MindmateError):
    """The API credential is not configured. Operator-fixable."""

    status_code = 500


class UpstreamParseError(MindmateError):
    """The model reply was empty, not JSON, or did not match the schema."""

    status_code = 500


class UpstreamServiceError(MindmateError):
    """The model or search service itself reported a failure."""

    status_code = 500


class SessionNotFoundError(MindmateError):
    """No live quiz session exists for the client."""

    status_code = 404


class UnsupportedFileTypeError(ValidationError):
    pass


class DocumentParseError(ValidationError):
    pass


class EmptyDocumentError(ValidationError):
    pass
