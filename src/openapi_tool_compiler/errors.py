"""Exception types raised while loading and compiling OpenAPI documents."""


class CompilerError(Exception):
    """Base class for every error raised by the compiler."""


class SchemaReferenceError(CompilerError):
    """A ``$ref`` could not be turned into a schema."""

    def __init__(self, message: str, ref: str):
        self.ref = ref
        super().__init__(message)


class UnsupportedReferenceError(SchemaReferenceError):
    """The reference points outside the current document."""

    def __init__(self, ref: str):
        super().__init__(f"Only local references are supported: {ref}", ref)


class InvalidReferencePathError(SchemaReferenceError):
    """The reference cannot be walked against the document."""

    def __init__(self, ref: str, segment: str | None = None):
        self.segment = segment
        message = f"Invalid reference path: {ref}"
        if segment is not None:
            message += f" (at '{segment}')"
        super().__init__(message, ref)


class CircularReferenceError(SchemaReferenceError):
    """The reference is already being resolved further up the chain."""

    def __init__(self, ref: str, chain: frozenset[str] = frozenset()):
        self.chain = chain
        super().__init__(f"Circular reference detected: {ref}", ref)


class MissingOperationIdError(CompilerError):
    """An operation has no ``operationId`` to name its tool after."""

    def __init__(self, method: str, path: str):
        self.method = method
        self.path = path
        super().__init__(f"Operation ID is required for tool parsing: {method.upper()} {path}")


class DocumentLoadError(CompilerError):
    """The input is not a parseable OpenAPI 3.x document."""
