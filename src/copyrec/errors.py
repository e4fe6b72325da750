"""Exception taxonomy for layout construction and record access."""

from __future__ import annotations


class CopyrecError(Exception):
    """Base class for every error raised by copyrec."""


class LayoutError(CopyrecError, ValueError):
    """A declaration could not be turned into a layout."""


class InvalidDeclarationError(LayoutError):
    pass


class InvalidPictureError(LayoutError):
    def __init__(self, picture: str) -> None:
        super().__init__(f"Incorrect PIC format: {picture!r}")
        self.picture = picture


class InvalidLevelOrderingError(LayoutError):
    def __init__(self, name: str, level: int) -> None:
        super().__init__(
            f"Field {name!r} (level {level}) must have a greater level number than the root"
        )
        self.name = name
        self.level = level


class IllegalInsertionError(LayoutError):
    def __init__(self, name: str, parent: str) -> None:
        super().__init__(f"Cannot nest {name!r} under elementary field {parent!r}")
        self.name = name
        self.parent = parent


class DuplicateFieldNameError(LayoutError):
    def __init__(self, name: str) -> None:
        super().__init__(f"The field name already exists: {name!r}")
        self.name = name


class NoDescriptorsError(LayoutError):
    def __init__(self) -> None:
        super().__init__("No field declarations were made")


class FieldNotFoundError(CopyrecError, LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Field not found: {name!r}")
        self.name = name


class BufferSizeMismatchError(CopyrecError, ValueError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Buffer with wrong size: expected {expected} bytes, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidNumericValueError(CopyrecError, ValueError):
    def __init__(self, name: str, text: str) -> None:
        super().__init__(f"Field {name!r} does not hold a valid number: {text!r}")
        self.name = name
        self.text = text


class InvalidDateValueError(CopyrecError, ValueError):
    def __init__(self, text: str, pattern: str) -> None:
        super().__init__(f"Value {text!r} does not match date pattern {pattern!r}")
        self.text = text
        self.pattern = pattern


class MissingFormatError(CopyrecError, ValueError):
    def __init__(self) -> None:
        super().__init__("A date pattern is required")
