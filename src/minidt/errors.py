"""
minidt.errors - Exception Hierarchy
===================================

Every failure minidt can report derives from :class:`MinidtError`, so the
CLI can catch one type at the command boundary and turn it into a message
and a non-zero exit code.

Each error also subclasses the closest builtin exception (``OSError``,
``FileNotFoundError``, ``ValueError`` ...) so library callers can keep using
the standard ``except`` clauses they already know.

Hierarchy
---------
::

    MinidtError
    ├── ConfigNotFoundError        (FileNotFoundError)
    ├── ConfigParseError           (ValueError)
    ├── AlreadyInitializedError    (FileExistsError)
    ├── FileOperationError         (OSError)
    ├── MissingRootTemplateError   (FileNotFoundError)
    ├── PathOutsideTemplatesError  (ValueError)
    ├── InvalidFileNameError       (ValueError)
    └── RenderError
"""

from __future__ import annotations

from pathlib import Path


class MinidtError(Exception):
    """Base class for all minidt errors."""


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigNotFoundError(MinidtError, FileNotFoundError):
    """
    No config file was found between the start directory and the filesystem root.

    Attributes
    ----------
    config_filename : str
        Name of the config file that was searched for.
    start : Path
        Directory the upward search started from.
    """

    def __init__(self, filename: str, start: Path) -> None:
        super().__init__(
            f"No configuration file '{filename}' found in {start} or any parent directory."
        )
        self.config_filename = filename
        self.start = start

    def __str__(self) -> str:
        return self.args[0]


class ConfigParseError(MinidtError, ValueError):
    """The config file is not valid TOML or holds invalid values."""


class AlreadyInitializedError(MinidtError, FileExistsError):
    """
    ``init`` was run inside a project that already has a config file.

    Attributes
    ----------
    config_path : Path
        Location of the existing config file.
    """

    def __init__(self, config_path: Path) -> None:
        super().__init__(
            f"Project already initialized. Configuration file found at: {config_path}. "
            "Skipping initialization."
        )
        self.config_path = config_path

    def __str__(self) -> str:
        return self.args[0]


class FileOperationError(MinidtError, OSError):
    """Reading, writing or creating a file or directory failed."""

    def __str__(self) -> str:
        return self.args[0] if self.args else ""


# =============================================================================
# Compilation Errors
# =============================================================================

class MissingRootTemplateError(MinidtError, FileNotFoundError):
    """A directory was given as input but it has no root template."""

    def __init__(self, directory: Path, root_template: str) -> None:
        super().__init__(
            f"No valid input file found. Expected file '{root_template}' "
            f"in the directory '{directory}'."
        )
        self.directory = directory
        self.root_template = root_template

    def __str__(self) -> str:
        return self.args[0]


class PathOutsideTemplatesError(MinidtError, ValueError):
    """The input file does not live under the configured templates folder."""

    def __init__(self, path: Path, templates_dir: Path) -> None:
        self.path = path
        self.templates_dir = templates_dir
        super().__init__(
            f"'{path}' is not inside the templates folder '{templates_dir}'."
        )


class InvalidFileNameError(MinidtError, ValueError):
    """An output file name could not be derived from the input file name."""


class RenderError(MinidtError):
    """Jinja2 failed to load or render a template."""
