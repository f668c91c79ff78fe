"""
air prompt test suite.

Test Categories:
- test_includes.py: include expansion, cycle and escape detection
- test_variables.py: placeholder substitution and variable merging
- test_config.py: frontmatter parsing and validation
- test_client.py: generation client with a mocked OpenAI client
- test_cli.py: command-line behavior and exit codes
- conftest.py: Shared fixtures and test configuration

To run tests:
    pytest tests/                    # Run all tests
    pytest tests/test_includes.py    # Run specific test file
    pytest -v                        # Verbose output
"""
