# flexpress/errors.py


class FlexpressError(Exception):
    code = "FLEXPRESS_ERROR"


class ValidationError(FlexpressError):
    """Malformed user input, detected before the resource chain is touched."""
    code = "VALIDATION_ERROR"


class EmptySubjectError(ValidationError):
    code = "EMPTY_SUBJECT"


class PathNotSetError(ValidationError):
    code = "PATH_NOT_SET"


class ContextParseError(FlexpressError):
    code = "CONTEXT_PARSE_ERROR"


class ResolutionError(FlexpressError):
    code = "RESOLUTION_ERROR"


class SourceEnumerationError(FlexpressError):
    code = "SOURCE_ENUMERATION_ERROR"


class PropertyEnumerationError(FlexpressError):
    code = "PROPERTY_ENUMERATION_ERROR"
