"""
minidt.compiler - Jinja SQL Compilation
=======================================

This module turns a Jinja-templated SQL model into plain SQL.

Architecture
------------
Compilation is a single linear pipeline; any failing step aborts before
anything is written:

    1. Locate and load the project config
    2. Resolve the input to a template name relative to the templates folder
    3. Render the template with Jinja2
    4. Work out the output path
    5. Write the SQL to disk

Template System
---------------
Templates are looked up by a Jinja2 ``FileSystemLoader`` rooted at the
project's templates folder, with the macros folder as a fallback search
path so models can ``{% import "helpers.sql" as h %}`` shared macros.

The render context holds a single variable:

    - output_type: "view", "table" or "temp-table" (from ``--output-type``)

File naming conventions:

- The literal ``.jinja`` is removed from the template's stem
- The output suffix is always ``.sql``
- ``models/a/b.sql.jinja`` -> ``compiled/a/b.sql``

Usage Example
-------------
>>> from minidt.compiler import compile_template
>>> result = compile_template(Path("models/orders.sql.jinja"))
>>> result.output_path
PosixPath('/path/to/project/compiled/orders.sql')
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape
from rich.console import Console

from minidt.config import find_project_config, load_config, project_root
from minidt.errors import (
    FileOperationError,
    InvalidFileNameError,
    MissingRootTemplateError,
    PathOutsideTemplatesError,
    RenderError,
)
from minidt.models import OUTPUT_SUFFIX, TEMPLATE_MARKER, Config, OutputType


# =============================================================================
# Module-Level Configuration
# =============================================================================

# Console for rich output
console = Console()


# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class CompilationResult:
    """
    Result of compiling one template.

    Attributes
    ----------
    input_path : Path
        Absolute path of the template file that was rendered.

    template_name : str
        Name the template was loaded under (POSIX path relative to the
        templates folder).

    output_path : Path
        Where the compiled SQL was written.

    output_type : OutputType
        The output type passed to the template.

    sql : str
        The rendered SQL.
    """

    input_path: Path
    template_name: str
    output_path: Path
    output_type: OutputType
    sql: str


# =============================================================================
# Template Engine Setup
# =============================================================================

def create_jinja_env(templates_dir: Path, macros_dir: Path | None = None) -> Environment:
    """
    Create the Jinja2 environment for a project.

    Parameters
    ----------
    templates_dir : Path
        Folder holding the SQL models; template names are relative to it.

    macros_dir : Path | None
        Folder with shared macros, searched after ``templates_dir``.
        Skipped if it doesn't exist.

    Returns
    -------
    Environment
        Environment with autoescaping disabled (we're generating SQL, not HTML).
    """
    search_path = [templates_dir]
    if macros_dir is not None and macros_dir.is_dir():
        search_path.append(macros_dir)

    return Environment(
        loader=FileSystemLoader(search_path),
        autoescape=select_autoescape([]),
    )


def render_template(
    env: Environment,
    template_name: str,
    output_type: OutputType = OutputType.VIEW,
) -> str:
    """
    Render a single template.

    Raises
    ------
    RenderError
        If the template is missing, has a syntax error, or fails while
        rendering.
    """
    try:
        template = env.get_template(template_name)
    except TemplateError as e:
        msg = f"Failed to load template '{template_name}': {e}"
        raise RenderError(msg) from e
    except UnicodeDecodeError as e:
        msg = f"Template '{template_name}' is not valid UTF-8: {e}"
        raise RenderError(msg) from e

    # Template expressions can raise arbitrary Python exceptions
    try:
        return template.render(output_type=output_type.value)
    except Exception as e:
        msg = f"Failed to render template '{template_name}': {e}"
        raise RenderError(msg) from e


# =============================================================================
# Path Resolution
# =============================================================================

def resolve_input_path(
    input_path: Path,
    templates_dir: Path,
    config: Config,
    start: Path | None = None,
) -> Path:
    """
    Resolve the input to a path relative to the templates folder.

    Parameters
    ----------
    input_path : Path
        File or directory given on the command line. Relative paths are
        taken relative to ``start``.

    templates_dir : Path
        Canonical templates folder.

    config : Config
        Project config, used for the root template name.

    start : Path | None
        Base for relative inputs (default: current directory).

    Returns
    -------
    Path
        The template path relative to ``templates_dir``.

    Raises
    ------
    MissingRootTemplateError
        If ``input_path`` is a directory without a root template.
    FileOperationError
        If the input file doesn't exist.
    PathOutsideTemplatesError
        If the input is not inside ``templates_dir``.
    """
    resolved = (start or Path.cwd()) / input_path

    if resolved.is_dir():
        root_template = resolved / config.root_template
        if not root_template.is_file():
            raise MissingRootTemplateError(input_path, config.root_template)
        resolved = root_template

    try:
        absolute = resolved.resolve(strict=True)
    except OSError as e:
        msg = f"Input file not found: {input_path}"
        raise FileOperationError(msg) from e

    try:
        return absolute.relative_to(templates_dir)
    except ValueError:
        raise PathOutsideTemplatesError(absolute, templates_dir) from None


def output_filename(template_path: Path) -> Path:
    """
    Derive the compiled file name from a template path.

    Examples
    --------
    >>> output_filename(Path("a/b.sql.jinja"))
    PosixPath('b.sql')
    >>> output_filename(Path("report.jinja.sql"))
    PosixPath('report.sql')

    Raises
    ------
    InvalidFileNameError
        If nothing is left of the name once the marker is removed.
    """
    stem = template_path.stem.replace(TEMPLATE_MARKER, "")
    if not stem:
        msg = f"Cannot derive an output file name from '{template_path}'"
        raise InvalidFileNameError(msg)

    try:
        return Path(stem).with_suffix(OUTPUT_SUFFIX)
    except ValueError as e:
        msg = f"Cannot derive an output file name from '{template_path}': {e}"
        raise InvalidFileNameError(msg) from e


def resolve_output_path(
    output_path: Path | None,
    template_path: Path,
    config: Config,
    root: Path,
) -> Path:
    """
    Work out where the compiled SQL goes.

    An explicit ``output_path`` is returned unchanged. Otherwise the
    template's folder structure is mirrored under the outputs folder.

    Parameters
    ----------
    output_path : Path | None
        Output given by the user, if any.

    template_path : Path
        Template path relative to the templates folder.

    config : Config
        Project config.

    root : Path
        Project root (the folder holding the config file).
    """
    if output_path is not None:
        return output_path

    output_dir = root / config.outputs_folder / template_path.parent
    return output_dir / output_filename(template_path)


# =============================================================================
# File Writing
# =============================================================================

def write_output_file(output_path: Path, sql: str) -> None:
    """
    Write compiled SQL to ``output_path``, overwriting any existing file.

    Parent folders are created as needed. The SQL is written to a
    temporary sibling first and then renamed into place, so the target
    is never left half-written.

    Raises
    ------
    FileOperationError
        If the folder or file cannot be written.
    """
    tmp_path = output_path.with_name(f".{output_path.name}.tmp")

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Cannot create output folder {output_path.parent}: {e}"
        raise FileOperationError(msg) from e

    try:
        tmp_path.write_text(sql, encoding="utf-8")
        tmp_path.replace(output_path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        msg = f"Failed to write compiled SQL to {output_path}: {e}"
        raise FileOperationError(msg) from e


# =============================================================================
# Main Compilation Function
# =============================================================================

def compile_template(
    input_path: Path,
    output_path: Path | None = None,
    *,
    output_type: OutputType = OutputType.VIEW,
    start: Path | None = None,
    verbose: bool = False,
) -> CompilationResult:
    """
    Compile a Jinja SQL template to plain SQL.

    Parameters
    ----------
    input_path : Path
        Template file, or a folder containing the project's root template.

    output_path : Path | None
        Where to write the SQL. Defaults to the mirrored location under
        the outputs folder.

    output_type : OutputType
        Exposed to the template as ``output_type``.

    start : Path | None
        Directory the command runs from (default: current directory). The
        config is discovered from here and relative paths are anchored here.

    verbose : bool
        Print progress to the console.

    Returns
    -------
    CompilationResult
        What was rendered and where it was written.

    Raises
    ------
    MinidtError
        Any of the config or compilation errors; nothing is written when
        an error is raised before the final write.
    """
    start_dir = (start or Path.cwd()).resolve()

    if verbose:
        console.print("[bold]Compiling SQL to remove Jinja[/]")

    config_path = find_project_config(start=start_dir)
    config = load_config(config_path)
    root = project_root(config_path)

    templates_dir = (root / config.templates_folder).resolve()
    template_path = resolve_input_path(input_path, templates_dir, config, start_dir)
    template_name = template_path.as_posix()

    if verbose:
        console.print(f"  Rendering {template_name}...")

    env = create_jinja_env(templates_dir, root / config.macros_folder)
    sql = render_template(env, template_name, output_type)

    if output_path is not None:
        output_path = start_dir / output_path
    target = resolve_output_path(output_path, template_path, config, root)

    if verbose:
        console.print(f"  Writing compiled SQL to {target}")

    write_output_file(target, sql)

    return CompilationResult(
        input_path=templates_dir / template_path,
        template_name=template_name,
        output_path=target,
        output_type=output_type,
        sql=sql,
    )
