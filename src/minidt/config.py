"""
minidt.config - Project Config Discovery, Loading and Initialization
====================================================================

A minidt project is any directory holding a ``.miniDT.toml`` file. Commands
run from anywhere inside the project: the config is found by walking up from
the starting directory until the file turns up or the filesystem root is
reached.

Pipeline for ``init``::

    1. Refuse if a config is already discoverable (unless a path was given)
    2. Load the given config, or write a default one
    3. Create the macros / templates / outputs folders next to it

Nothing is cached between calls; the project root is recomputed every time
so callers (and tests) can pass any starting directory.

Usage Example
-------------
>>> from minidt.config import find_project_config, load_config
>>> path = find_project_config()
>>> config = load_config(path)
>>> config.templates_folder
'models'
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import tomlkit
from pydantic import ValidationError
from rich.console import Console

from minidt.errors import (
    AlreadyInitializedError,
    ConfigNotFoundError,
    ConfigParseError,
    FileOperationError,
)
from minidt.models import CONFIG_FILE_NAME, Config


# Console for rich output
console = Console()


@dataclass
class InitResult:
    """
    Outcome of :func:`init_project`.

    Attributes
    ----------
    config_path : Path
        Absolute path of the config file the project uses.

    config : Config
        The loaded or newly written configuration.

    config_created : bool
        True if the config file was written by this call.

    folders_created : list[Path]
        Folders that did not exist before this call.
    """

    config_path: Path
    config: Config
    config_created: bool = False
    folders_created: list[Path] = field(default_factory=list)


# =============================================================================
# Discovery
# =============================================================================

def find_project_config(
    filename: str = CONFIG_FILE_NAME,
    start: Path | None = None,
) -> Path:
    """
    Find the nearest config file at or above ``start``.

    Parameters
    ----------
    filename : str
        Config file name to look for.

    start : Path | None
        Directory to start from. Defaults to the current working directory.

    Returns
    -------
    Path
        Absolute path to the config file.

    Raises
    ------
    ConfigNotFoundError
        If no directory up to the filesystem root contains the file.
    """
    start_dir = (start or Path.cwd()).resolve()

    for directory in (start_dir, *start_dir.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate

    raise ConfigNotFoundError(filename, start_dir)


def is_project_initialized(
    filename: str = CONFIG_FILE_NAME,
    start: Path | None = None,
) -> Path | None:
    """Return the discoverable config path, or None when there is none."""
    try:
        return find_project_config(filename, start)
    except ConfigNotFoundError:
        return None


def project_root(config_path: Path) -> Path:
    """The project root is the directory holding the config file."""
    return config_path.resolve().parent


# =============================================================================
# Loading and Saving
# =============================================================================

def load_config(
    config_path: Path | None = None,
    start: Path | None = None,
) -> Config:
    """
    Read and validate a project config.

    Parameters
    ----------
    config_path : Path | None
        Explicit config file. When omitted the config is discovered by
        walking up from ``start``.

    start : Path | None
        Starting directory for discovery (default: current directory).

    Returns
    -------
    Config
        The validated configuration.

    Raises
    ------
    ConfigNotFoundError
        If no path was given and none could be discovered.
    FileOperationError
        If the file cannot be read.
    ConfigParseError
        If the file is not valid TOML or fails validation.
    """
    if config_path is None:
        config_path = find_project_config(start=start)

    try:
        return Config.from_toml(config_path)
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigParseError(msg) from e
    except ValidationError as e:
        msg = f"Invalid configuration in {config_path}: {e}"
        raise ConfigParseError(msg) from e
    except OSError as e:
        msg = f"Failed to read config file {config_path}: {e}"
        raise FileOperationError(msg) from e


def save_config(config: Config, config_path: Path) -> None:
    """
    Write ``config`` to ``config_path`` as TOML, replacing any existing file.

    Raises
    ------
    FileOperationError
        If the file cannot be created or written.
    """
    content = tomlkit.dumps(config.to_toml_dict())

    try:
        config_path.write_text(content, encoding="utf-8")
    except OSError as e:
        msg = f"Failed to write config file {config_path}: {e}"
        raise FileOperationError(msg) from e


def create_default_config(config_path: Path) -> Config:
    """Persist a default :class:`Config` at ``config_path`` and return it."""
    config = Config()
    save_config(config, config_path)
    return config


# =============================================================================
# Project Initialization
# =============================================================================

def ensure_project_folders(config: Config, root: Path) -> list[Path]:
    """
    Create the macros, templates and outputs folders under ``root``.

    Folders that already exist are left alone. Any other failure, such as
    a permission error or a file squatting on the folder name, is raised.

    Returns
    -------
    list[Path]
        The folders that were actually created.

    Raises
    ------
    FileOperationError
        If a folder cannot be created.
    """
    created: list[Path] = []

    for name in config.folders:
        folder = root / name
        try:
            folder.mkdir(parents=True)
        except FileExistsError:
            if not folder.is_dir():
                msg = f"Cannot create folder {folder}: a file with that name exists"
                raise FileOperationError(msg) from None
            continue
        except OSError as e:
            msg = f"Cannot create folder {folder}: {e}"
            raise FileOperationError(msg) from e
        created.append(folder)

    return created


def init_project(
    config_file: Path | None = None,
    start: Path | None = None,
    config: Config | None = None,
    verbose: bool = False,
) -> InitResult:
    """
    Initialize a minidt project.

    Parameters
    ----------
    config_file : Path | None
        Config file to use. An existing file is loaded as-is; a missing one
        is created. When omitted, ``.miniDT.toml`` in ``start`` is used and
        the command refuses to run inside an existing project.

    start : Path | None
        Directory to initialize (default: current directory). Relative
        ``config_file`` paths are resolved against it.

    config : Config | None
        Values to write when a new config file is created. Defaults to
        :class:`Config` defaults.

    verbose : bool
        Print progress to the console.

    Returns
    -------
    InitResult
        Where the config lives and what was created.

    Raises
    ------
    AlreadyInitializedError
        If no ``config_file`` was given and a config is already discoverable.
    ConfigParseError
        If an existing ``config_file`` is malformed.
    FileOperationError
        If the config or a folder cannot be written.
    """
    start_dir = (start or Path.cwd()).resolve()

    if verbose:
        console.print("[bold]Initializing a new project[/]")

    if config_file is None:
        existing = is_project_initialized(CONFIG_FILE_NAME, start_dir)
        if existing is not None:
            raise AlreadyInitializedError(existing)
        config_path = start_dir / CONFIG_FILE_NAME
    else:
        config_path = (start_dir / config_file).resolve()

    created = False
    if config_path.is_file():
        loaded = load_config(config_path)
    else:
        if config is None:
            loaded = create_default_config(config_path)
        else:
            loaded = config
            save_config(loaded, config_path)
        created = True
        if verbose:
            console.print(f"  Created {config_path.name}")

    folders = ensure_project_folders(loaded, config_path.parent)

    if verbose:
        for folder in folders:
            console.print(f"  Created {folder.name}/")

    return InitResult(
        config_path=config_path,
        config=loaded,
        config_created=created,
        folders_created=folders,
    )
