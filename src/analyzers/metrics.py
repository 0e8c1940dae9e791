"""
Metrics Computer.

Average code churn over the most recent commits of a repository.
"""

import math
from typing import List, Tuple

import pandas as pd

from analyzers.models import CommitRecord


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_average_churn(
    commits: List[CommitRecord], window: int = 3
) -> Tuple[int, int]:
    """
    Average additions and deletions over the first ``window`` commits.

    Commits without stats count neither towards the sums nor the divisor.

    Args:
        commits (List[CommitRecord]): Commits, most recent first
        window (int): Number of leading commits considered

    Returns:
        Tuple[int, int]: (average additions, average deletions), (0, 0) when no
            commit in the window carries stats
    """
    rows = [
        {"additions": commit.stats.additions, "deletions": commit.stats.deletions}
        for commit in commits[:window]
        if commit.stats is not None
    ]
    if not rows:
        return 0, 0

    stats_df = pd.DataFrame(rows)
    return (
        _round_half_up(stats_df["additions"].mean()),
        _round_half_up(stats_df["deletions"].mean()),
    )
