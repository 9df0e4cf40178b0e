class NativeLinkError(Exception):
    """Base class for errors raised while resolving native link settings."""


class ParseError(NativeLinkError, ValueError):
    """The target triple string is malformed or not recognized."""

    def __init__(self, raw, reason=None):
        self.raw = raw
        self.reason = reason
        message = f"Invalid target triple '{raw}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class OverrideNotFound(NativeLinkError, LookupError):
    """No override rule exists for the triple."""

    def __init__(self, triple):
        self.triple = triple
        super().__init__(f"No override configured for target '{triple}'")


class ArtifactMissing(NativeLinkError):
    """An override rule points at an artifact that is not in the store."""

    def __init__(self, triple, path):
        self.triple = triple
        self.path = path
        super().__init__(f"Artifact for target '{triple}' not found at {path}")


class RegistryError(NativeLinkError):
    """The override registry could not be read or holds a malformed entry."""
