"""
minidt - Jinja to SQL Compiler
==============================

A small command-line tool for SQL projects written as Jinja templates.
It sets up a project layout and renders templated models into plain SQL.

Quick Start
-----------
```bash
# Create .miniDT.toml plus macros/, models/ and compiled/
minidt init

# Render models/orders.sql.jinja into compiled/orders.sql
minidt compile models/orders.sql.jinja
```

Example
-------
>>> from minidt import compile_template
>>> result = compile_template(Path("models/orders.sql.jinja"))
>>> result.output_path.name
'orders.sql'

Architecture
------------
- ``cli``: Typer-based command line interface
- ``config``: Config discovery, loading and project initialization
- ``compiler``: Template rendering and output path resolution
- ``models``: Pydantic config model and output types
- ``errors``: Exception hierarchy
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from minidt.compiler import CompilationResult, compile_template
from minidt.config import find_project_config, init_project, load_config, save_config
from minidt.errors import MinidtError
from minidt.models import CONFIG_FILE_NAME, Config, OutputType


__all__ = [
    "CONFIG_FILE_NAME",
    "CompilationResult",
    # Configuration
    "Config",
    "MinidtError",
    "OutputType",
    # Version info
    "__version__",
    # Core functions
    "compile_template",
    "find_project_config",
    "init_project",
    "load_config",
    "save_config",
]
