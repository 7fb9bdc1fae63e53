# -*- coding: utf-8 -*-
"""
DatForge Exceptions Module
Custom exception classes for structured error handling across the application.
"""


class DatForgeError(Exception):
    """
    Base exception class for all DatForge-related errors.

    Attributes:
        message: Human-readable error message
        details: Optional additional details (dict, string, etc.)
    """

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Parser Exceptions
# =============================================================================

class ParserError(DatForgeError):
    """Base exception for parser-related errors."""
    pass


class StructuralError(ParserError):
    """
    Raised when the file structure is violated and the parse must stop:
    DATA before any CLASS, DATA before any FORMAT, or a DATA payload that
    does not start with the field separator.
    """

    def __init__(self, message: str, line_number: int = None, class_name: str = None,
                 line_content: str = None):
        super().__init__(message, details={'line_number': line_number, 'class_name': class_name})
        self.line_number = line_number
        self.class_name = class_name
        self.line_content = line_content


# Name used by callers that only care that the parse failed
ParseError = StructuralError


# =============================================================================
# Core/File Exceptions
# =============================================================================

class CoreError(DatForgeError):
    """Base exception for core module errors."""
    pass


class FileOperationError(CoreError):
    """Raised when a file operation (read/write) fails."""

    def __init__(self, message: str, file_path: str = None, operation: str = None):
        super().__init__(message, details={'file_path': file_path, 'operation': operation})
        self.file_path = file_path
        self.operation = operation


class FileReadError(FileOperationError):
    """Raised when a source file cannot be read."""

    def __init__(self, message: str, file_path: str = None):
        super().__init__(message, file_path=file_path, operation='read')


class FileWriteError(FileOperationError):
    """Raised when a destination file cannot be written."""

    def __init__(self, message: str, file_path: str = None):
        super().__init__(message, file_path=file_path, operation='write')


# Name used by callers that only care that I/O failed
IoError = FileOperationError


# =============================================================================
# Library Exceptions
# =============================================================================

class LibraryError(DatForgeError):
    """Base exception for loaded-library management errors."""
    pass


class LibraryBusyError(LibraryError):
    """Raised when a library of the same kind with unsaved changes would be replaced."""

    def __init__(self, message: str, kind=None, file_path: str = None):
        super().__init__(message, details={'kind': kind, 'file_path': file_path})
        self.kind = kind
        self.file_path = file_path


class LibraryNotLoadedError(LibraryError):
    """Raised when an operation targets a kind that has no loaded library."""

    def __init__(self, message: str, kind=None):
        super().__init__(message, details={'kind': kind})
        self.kind = kind
