"""
Unit Tests for chess_eval

This package contains unit tests for all chess_eval components.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_parser.py

    # Run with coverage
    pytest tests/ --cov=chess_eval --cov-report=html

Engine-dependent tests run against tests/fixtures/fake_engine.py, a scripted
UCI responder. Tests marked for a real Stockfish skip when it is missing.

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
"""
