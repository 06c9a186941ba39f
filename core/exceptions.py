"""
Exception hierarchy for document merging.

Every error is terminal for a single merge call and carries enough context
(input index, missing role) for the caller to report a precise diagnostic.
"""
from typing import Optional


class MergeError(Exception):
    """Base class for all merge failures."""

    def __init__(
        self,
        message: str,
        input_index: Optional[int] = None,
        filename: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.input_index = input_index
        self.filename = filename

    def to_dict(self) -> dict:
        """Convert to dictionary for API error payloads."""
        return {
            'error': type(self).__name__,
            'message': self.message,
            'input_index': self.input_index,
            'filename': self.filename
        }


class MergeInputError(MergeError):
    """The call itself is invalid (no inputs, too many inputs)."""


class ParseError(MergeError):
    """An input buffer could not be parsed into a document."""


class StructuralError(MergeError):
    """An input has no page discoverable from its own root."""


class MissingRootError(MergeError):
    """No Catalog or no Pages object was found across all inputs."""

    def __init__(self, role: str):
        super().__init__(f"No {role} object found in any input document")
        self.role = role

    def to_dict(self) -> dict:
        result = super().to_dict()
        result['role'] = self.role
        return result


class SerializationError(MergeError):
    """The merged document could not be written."""
