#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/exceptions.py
"""Custom exceptions for the richnote library.

Only structurally invalid arguments to the top-level entry points are raised
outward. Malformed markup, unsupported files and failed reads degrade to a
fallback value at the smallest unit of work and are logged instead.

Exception Hierarchy
-------------------
- RichNoteError (base exception)

  - ValidationError (invalid arguments or content fields)
    - InvalidOptionsError (wrong options class for a parser or renderer)

  - ParsingError (input markup could not be parsed at all)

  - RenderingError (output generation failures)

  - NormalizationError (tree repair did not converge)

  - IngestionError (paste/drop processing)
    - FileReadError (a dropped or pasted file could not be read)

  - DependencyError (missing/incompatible packages)

"""

from typing import Any


class RichNoteError(Exception):
    """Base exception class for all richnote-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(RichNoteError):
    """Exception raised for invalid input parameters or content fields.

    This is a programmer error, for example calling the sanitizer with a
    non-string ``content`` field, and is never recovered from internally.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is provided.

    Parameters
    ----------
    converter_name : str
        Name of the parser or renderer that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message

    """

    def __init__(
        self,
        converter_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{converter_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(
            message, parameter_name="options", parameter_value=received_type, original_error=original_error
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(RichNoteError):
    """Exception raised when input cannot be parsed at all.

    Subtree-level failures never raise this; they degrade to text.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class RenderingError(RichNoteError):
    """Exception raised when output generation fails."""

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage


class NormalizationError(RichNoteError):
    """Exception raised when the normalization engine fails to converge.

    Parameters
    ----------
    message : str
        Description of the failure
    passes : int, optional
        Number of repair passes attempted
    original_error : Exception, optional
        The underlying exception

    """

    def __init__(self, message: str, passes: int | None = None, original_error: Exception | None = None):
        """Initialize the normalization error."""
        super().__init__(message, original_error)
        self.passes = passes


class IngestionError(RichNoteError):
    """Base exception for paste and drop processing errors."""


class FileReadError(IngestionError):
    """Exception raised when a pasted or dropped file cannot be read.

    Parameters
    ----------
    message : str
        Description of the read failure
    file_name : str, optional
        Name of the file that failed
    original_error : Exception, optional
        The underlying I/O or decode exception

    """

    def __init__(self, message: str, file_name: str | None = None, original_error: Exception | None = None):
        """Initialize the file read error."""
        super().__init__(message, original_error)
        self.file_name = file_name


class DependencyError(RichNoteError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the component requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    install_command : str, optional
        Suggested pip install command
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        install_command: str = "",
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{converter_name} requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_str = ", ".join(
                    f"'{name}' (requires {required}, but {installed} is installed)"
                    for name, required, installed in version_mismatches
                )
                message_parts.append(f"{converter_name} has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            if install_command:
                message += f"\nInstall with: {install_command}"
            else:
                all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
                if all_packages:
                    packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                    message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message, original_error=original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command
