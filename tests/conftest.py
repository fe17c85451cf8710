"""
pytest configuration and shared fixtures for minidt tests.

Fixtures defined here are automatically available to all tests.

Fixtures
--------
project_dir : Path
    A temporary, fully initialized minidt project.

sample_config : str
    Sample .miniDT.toml content with non-default folder names.
"""

import pytest
from pathlib import Path

from minidt.models import CONFIG_FILE_NAME


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """
    Create a temporary project with the default layout.

    The layout is::

        project/
        ├── .miniDT.toml
        ├── macros/
        ├── models/
        └── compiled/

    Returns
    -------
    Path
        Path to the project root.
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / CONFIG_FILE_NAME).write_text(
        'macros_folder = "macros"\n'
        'templates_folder = "models"\n'
        'outputs_folder = "compiled"\n'
        'root_template = "main.sql.jinja"\n',
        encoding="utf-8",
    )
    for name in ("macros", "models", "compiled"):
        (root / name).mkdir()
    return root


@pytest.fixture
def sample_config() -> str:
    """
    Provide sample config content for testing.

    Returns
    -------
    str
        A valid .miniDT.toml with custom folder names.
    """
    return '''
macros_folder = "lib"
templates_folder = "sql"
outputs_folder = "build"
root_template = "index.sql.jinja"
'''
