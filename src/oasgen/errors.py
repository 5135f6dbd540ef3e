"""Exception hierarchy for oasgen.

``DeclarationError`` subclasses abort the processing of a single annotated
declaration; the run loop decides whether that is fatal. ``SourceReadError``
and ``OutputWriteError`` always abort the whole run.
"""


class OasgenError(Exception):
    """Base class for all oasgen errors."""


class DeclarationError(OasgenError):
    """An error confined to one annotated declaration."""


class DirectiveSyntaxError(DeclarationError):
    """A directive's text does not match its grammar."""

    def __init__(self, message: str, text: str):
        super().__init__(message)
        self.text = text


class DirectiveValueError(DeclarationError):
    """A directive parsed but carries an invalid value."""


class DuplicateOperationIdError(DirectiveValueError):
    def __init__(self, operation_id: str):
        super().__init__(f"operation ID '{operation_id}' is not unique")
        self.operation_id = operation_id


class TypeResolutionError(DeclarationError):
    """A referenced type cannot be located or parsed."""

    def __init__(self, message: str, type_ref: str):
        super().__init__(message)
        self.type_ref = type_ref


class SourceReadError(OasgenError):
    """Source files of a package could not be read."""


class OutputWriteError(OasgenError):
    """The generated document could not be written."""
