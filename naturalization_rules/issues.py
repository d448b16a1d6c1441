# naturalization_rules/issues.py

from __future__ import annotations

from dataclasses import replace
from typing import List

from .validate import Issue


def tag_issues(issues: List[Issue], ref_id: str) -> List[Issue]:
    """
    Return a new list of Issues with ref_id populated when missing.
    Issues that already point at something keep their ref_id.
    """
    return [tag_issue(i, ref_id) for i in issues]


def tag_issue(issue: Issue, ref_id: str) -> Issue:
    """Tag a single Issue if it doesn't already have a ref_id."""
    if issue.ref_id is not None:
        return issue
    return replace(issue, ref_id=ref_id)
