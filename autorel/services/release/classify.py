"""Commit-summary based bump classification.

Only the summary line of each commit is looked at, with literal matching:

- any summary containing ``BREAKING`` -> major
- otherwise any summary starting with ``feat:`` or ``feat(<scope>):`` -> minor
- otherwise -> patch, including when there are no commits at all
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from autorel.services.release.model import BumpKind, CommitCounts


BREAKING_MARKER = "BREAKING"
_FEAT_RE = re.compile(r"^feat(\(.*\))?:")


def is_breaking(summary: str) -> bool:
    return BREAKING_MARKER in summary


def is_feat(summary: str) -> bool:
    return _FEAT_RE.match(summary) is not None


def count_commits(summaries: Iterable[str]) -> CommitCounts:
    items = list(summaries)
    return CommitCounts(
        breaking=sum(1 for s in items if is_breaking(s)),
        feat=sum(1 for s in items if is_feat(s)),
    )


def bump_for_counts(counts: CommitCounts) -> BumpKind:
    if counts.breaking > 0:
        return "major"
    if counts.feat > 0:
        return "minor"
    return "patch"


def classify_bump(summaries: Iterable[str]) -> BumpKind:
    return bump_for_counts(count_commits(summaries))
