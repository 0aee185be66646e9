"""
sidkik_firebase.rules.resolver

Latest-active ruleset resolution.

Responsibilities:
- Pick the ruleset currently live for a rule family out of an unordered release
  history.
"""

from __future__ import annotations

from collections.abc import Iterable

from sidkik_firebase.rules.models import Release


def latest_active(releases: Iterable[Release], discriminator: str) -> str | None:
    """
    Return the `rulesetName` of the most recently created release whose name
    contains `discriminator`, or None when no release matches.

    Releases sharing a `createTime` keep their server order (the sort is stable), so
    the first of them as listed wins.
    """

    matches = [r for r in releases if discriminator in r.name]
    if not matches:
        return None
    matches.sort(key=lambda r: r.create_time, reverse=True)
    return matches[0].ruleset_name


# --- Module Notes -----------------------------------------------------------
# The server does not sort the history; this function is the only place recency is
# decided.
