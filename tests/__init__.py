"""
Assurance API Test Suite
========================

Test organization:
- tests/unit/                 - Shared library tests (auth, config)
- tests/services/assurance/   - Core workflows, repositories and API routes

Run tests:
    pytest                                # All tests
    pytest tests/services/assurance       # Service tests only
    pytest --cov=services --cov=shared    # With coverage
"""
