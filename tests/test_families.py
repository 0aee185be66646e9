"""
tests.test_families

Release naming per rule family.
"""

from __future__ import annotations

import pytest

from sidkik_firebase.rules.families import RuleFamily


def test_firestore_release_name() -> None:
    assert RuleFamily.firestore.release_name("p") == "projects/p/releases/cloud.firestore"


def test_storage_release_embeds_default_bucket() -> None:
    assert (
        RuleFamily.storage.release_name("p")
        == "projects/p/releases/firebase.storage/p.appspot.com"
    )


@pytest.mark.parametrize("family", list(RuleFamily))
def test_release_name_contains_discriminator(family: RuleFamily) -> None:
    assert family.discriminator in family.release_name("demo")


def test_family_from_file_name() -> None:
    assert RuleFamily("firestore.rules") is RuleFamily.firestore
    assert RuleFamily.storage.file_name == "storage.rules"
