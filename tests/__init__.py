"""
Unit Tests for Shogi Engine

This package contains unit tests for all engine components.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_state.py

    # Run with coverage
    pytest tests/ --cov=shogi_engine --cov-report=html

    # Run specific test
    pytest tests/test_search.py::TestMinimax::test_takes_free_capture

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
