import pytest

def pytest_collection_modifyitems(items):
    """Mark the convergence evaluations as slow, they integrate the test
    problems with a whole ladder of step sizes and tolerances."""
    for item in items:
        if "evals" in item.path.parts:
            item.add_marker(pytest.mark.slow)
