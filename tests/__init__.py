"""
STARCATALOG Test Suite

Test Organization:
    tests/
    ├── __init__.py          # This file
    ├── conftest.py          # Shared fixtures (synthetic catalog directories)
    ├── fixtures/            # Writers for synthetic catalog files
    └── unit/                # Unit tests, one module per component

Running Tests:
    # Run all tests
    pytest tests/

    # Include the scenarios that need the real catalog files
    STARCATALOG_TEST_DATA=/usr/local/starcatalogs pytest tests/

Requirements:
    pip install -e ".[test]"
"""
