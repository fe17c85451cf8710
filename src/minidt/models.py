"""
minidt.models - Pydantic Models for Project Configuration
=========================================================

This module defines the data models shared by the config loader, the
compiler and the CLI. Pydantic gives us validation of hand-edited TOML
files with clear error messages, and a plain dict for serialization.

Architecture Notes
------------------
::

    Config
    ├── macros_folder: str      (default "macros")
    ├── templates_folder: str   (default "models")
    ├── outputs_folder: str     (default "compiled")
    └── root_template: str      (default "main.sql.jinja")

    OutputType (enum)
    ├── view
    ├── table
    └── temp-table

Usage Example
-------------
>>> from minidt.models import Config
>>> config = Config()
>>> config.templates_folder
'models'
>>> config.to_toml_dict()["outputs_folder"]
'compiled'
"""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Constants
# =============================================================================

# Name of the file that marks a project root
CONFIG_FILE_NAME = ".miniDT.toml"

# Removed from template stems when deriving output names: a.sql.jinja -> a.sql
TEMPLATE_MARKER = ".jinja"

OUTPUT_SUFFIX = ".sql"


# =============================================================================
# Enumerations
# =============================================================================

class OutputType(str, Enum):
    """
    Kind of database object the compiled SQL is meant to create.

    The value is handed to templates as ``output_type`` so a model can
    wrap itself in the matching ``CREATE`` statement if it wants to.
    """

    VIEW = "view"
    TABLE = "table"
    TEMP_TABLE = "temp-table"

    @property
    def description(self) -> str:
        """Human-readable description for help output."""
        descriptions = {
            OutputType.VIEW: "Create a view",
            OutputType.TABLE: "Create a table",
            OutputType.TEMP_TABLE: "Create a temporary table",
        }
        return descriptions[self]


# =============================================================================
# Project Configuration
# =============================================================================

class Config(BaseModel):
    """
    Contents of a project's ``.miniDT.toml`` file.

    All folder names are relative to the directory holding the config
    file (the project root).

    Attributes
    ----------
    macros_folder : str
        Folder with shared Jinja macros. It is searched after the
        templates folder when resolving ``import``/``include`` names.

    templates_folder : str
        Folder holding the Jinja SQL models to compile.

    outputs_folder : str
        Folder compiled SQL is written to, mirroring the templates layout.

    root_template : str
        File compiled when a directory is passed instead of a file.

    Examples
    --------
    >>> Config(templates_folder="sql").templates_folder
    'sql'
    >>> Config(outputs_folder="  ")
    Traceback (most recent call last):
    ...
    pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    macros_folder: str = Field(
        default="macros",
        description="Folder containing shared Jinja macros",
    )
    templates_folder: str = Field(
        default="models",
        description="Folder containing the Jinja SQL templates",
    )
    outputs_folder: str = Field(
        default="compiled",
        description="Folder compiled SQL files are written to",
    )
    root_template: str = Field(
        default="main.sql.jinja",
        description="Template compiled when the input is a directory",
    )

    @field_validator("macros_folder", "templates_folder", "outputs_folder", "root_template")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Strip whitespace and reject empty names."""
        v = v.strip()
        if not v:
            msg = "value must be a non-empty string"
            raise ValueError(msg)
        return v

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def folders(self) -> list[str]:
        """The folders ``init`` creates, in creation order."""
        return [self.macros_folder, self.templates_folder, self.outputs_folder]

    # -------------------------------------------------------------------------
    # Serialization Methods
    # -------------------------------------------------------------------------

    def to_toml_dict(self) -> dict[str, str]:
        """
        Convert config to a dictionary suitable for TOML serialization.

        Returns
        -------
        dict[str, str]
            The four config keys and their values.
        """
        return self.model_dump(mode="json")

    @classmethod
    def from_toml(cls, path: Path) -> Config:
        """
        Load configuration from a TOML file.

        Parameters
        ----------
        path : Path
            Path to the TOML configuration file.

        Returns
        -------
        Config
            Validated configuration object.

        Raises
        ------
        OSError
            If the file cannot be read.
        tomllib.TOMLDecodeError
            If the file is not valid TOML.
        ValidationError
            If the config file has invalid values.
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)
