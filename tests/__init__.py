"""
minidt test suite
=================

Test Modules
------------
- test_models.py: Tests for the Pydantic config model
- test_config.py: Tests for config discovery, loading and init
- test_compiler.py: Tests for template compilation
- test_cli.py: Tests for the command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_compiler.py

    # Run specific test class
    pytest tests/test_config.py::TestFindProjectConfig
"""
