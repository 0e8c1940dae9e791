"""
Metrics Computer tests.
"""

from analyzers.metrics import compute_average_churn
from conftest import make_commit


def test_statless_commit_is_excluded():
    commits = [
        make_commit("1", stats=(10, 2)),
        make_commit("2", stats=(20, 4)),
        make_commit("3", stats=None),
    ]

    assert compute_average_churn(commits) == (15, 3)


def test_only_window_is_considered():
    commits = [
        make_commit("1", stats=(10, 0)),
        make_commit("2", stats=(10, 0)),
        make_commit("3", stats=(10, 0)),
        make_commit("4", stats=(1000, 1000)),
    ]

    assert compute_average_churn(commits, window=3) == (10, 0)


def test_no_qualifying_commits():
    assert compute_average_churn([]) == (0, 0)
    assert compute_average_churn([make_commit("1", stats=None)]) == (0, 0)


def test_rounds_half_up():
    commits = [make_commit("1", stats=(1, 2)), make_commit("2", stats=(2, 3))]

    assert compute_average_churn(commits) == (2, 3)
