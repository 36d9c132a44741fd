"""Exceptions raised by the documented-method model."""


class MethodModelError(Exception):
    """Base class for method model failures."""


class UnsupportedFormatError(MethodModelError, ValueError):
    """A persisted record carries a version tag this reader does not know."""

    def __init__(self, version):
        super().__init__(f"Unsupported method record format version: {version!r}")
        self.version = version


class MissingContainerError(MethodModelError, RuntimeError):
    """A container-relative value was requested from an unattached record."""
