"""
tests.test_resolver

Latest-active ruleset resolution.
"""

from __future__ import annotations

import random
from datetime import UTC, datetime, timedelta

from sidkik_firebase.rules.families import RuleFamily
from sidkik_firebase.rules.models import Release
from sidkik_firebase.rules.resolver import latest_active


def _release(name: str, ruleset: str, created: str | datetime) -> Release:
    return Release.model_validate({"name": name, "rulesetName": ruleset, "createTime": created})


HISTORY = [
    _release(
        "projects/p/releases/cloud.firestore",
        "projects/p/rulesets/firestore-1",
        "2021-12-15T18:57:44Z",
    ),
    _release(
        "projects/p/releases/firebase.storage/p.appspot.com",
        "projects/p/rulesets/storage-1",
        "2021-12-15T02:42:56Z",
    ),
]


def test_resolves_each_family_from_mixed_history() -> None:
    assert latest_active(HISTORY, "cloud.firestore") == "projects/p/rulesets/firestore-1"
    assert latest_active(HISTORY, "firebase.storage") == "projects/p/rulesets/storage-1"


def test_unknown_family_is_absent() -> None:
    assert latest_active(HISTORY, "unknown.family") is None
    assert latest_active([], RuleFamily.firestore.discriminator) is None


def test_most_recent_create_time_wins() -> None:
    history = [
        _release("projects/p/releases/cloud.firestore", "old", "2021-01-01T00:00:00Z"),
        _release("projects/p/releases/cloud.firestore", "new", "2022-01-01T00:00:00.5Z"),
        _release("projects/p/releases/cloud.firestore", "mid", "2021-06-01T00:00:00+02:00"),
    ]
    assert latest_active(history, "cloud.firestore") == "new"


def test_argmax_over_random_histories_is_order_independent() -> None:
    rng = random.Random(1234)
    base = datetime(2021, 12, 15, tzinfo=UTC)
    families = ["cloud.firestore", "firebase.storage", "other.service"]

    for _ in range(200):
        # Distinct timestamps so the expected winner is unique.
        offsets = rng.sample(range(1_000_000), rng.randint(1, 12))
        history = [
            _release(
                f"projects/p/releases/{rng.choice(families)}",
                f"projects/p/rulesets/{i}",
                base + timedelta(seconds=offset),
            )
            for i, offset in enumerate(offsets)
        ]

        for family in families:
            matching = [r for r in history if family in r.name]
            expected = max(matching, key=lambda r: r.create_time).ruleset_name if matching else None
            assert latest_active(history, family) == expected

            shuffled = history[:]
            rng.shuffle(shuffled)
            assert latest_active(shuffled, family) == expected


def test_equal_create_times_keep_server_order() -> None:
    history = [
        _release("projects/p/releases/cloud.firestore", "first", "2021-12-15T18:57:44Z"),
        _release("projects/p/releases/cloud.firestore", "second", "2021-12-15T18:57:44Z"),
    ]
    assert latest_active(history, "cloud.firestore") == "first"
    assert latest_active(list(reversed(history)), "cloud.firestore") == "second"


def test_does_not_reorder_the_input() -> None:
    history = list(HISTORY)
    latest_active(history, "firebase.storage")
    assert history == HISTORY
