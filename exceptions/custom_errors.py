class FileReadingError(Exception):
    """Raised when there is an error reading a file."""

    pass


class FileContentError(Exception):
    """Raised when the content of a file is not as expected."""

    pass


class UnknownEntityError(Exception):
    """Raised when a dataset name is not one of clients, workers or tasks."""

    pass


class InvalidFixError(Exception):
    """Raised when a field edit targets a row or entity that does not exist."""

    pass


class RuleImportError(Exception):
    """Raised when a rules document cannot be read back into rules."""

    pass


class RuleNotFoundError(Exception):
    """Raised when a rule id is not present in the rule book."""

    pass


class FixServiceError(Exception):
    """Raised when the fix-suggestion service cannot be reached or answers with an error."""

    pass


class FixResponseError(Exception):
    """Raised when the fix-suggestion service answers with something that is not a fixes document."""

    pass


# Mapping of custom exceptions to HTTP status codes
CUSTOM_ERRORS = {
    FileReadingError: 500,
    FileContentError: 400,
    UnknownEntityError: 400,
    InvalidFixError: 400,
    RuleImportError: 400,
    RuleNotFoundError: 404,
    FixServiceError: 502,
    FixResponseError: 502,
}
