"""
sidkik_firebase.rules.families

Rule families and their release naming.

Responsibilities:
- Map each family (Firestore, Storage) to its source file name, release-history
  discriminator and deterministic release id.
"""

from __future__ import annotations

import enum


class RuleFamily(enum.StrEnum):
    # Values double as the name of the single source file inside a ruleset.
    firestore = "firestore.rules"
    storage = "storage.rules"

    @property
    def file_name(self) -> str:
        return self.value

    @property
    def discriminator(self) -> str:
        # Substring identifying this family's releases in the release history.
        return _DISCRIMINATORS[self]

    def default_bucket(self, project: str) -> str:
        return f"{project}.appspot.com"

    def release_id(self, project: str) -> str:
        if self is RuleFamily.storage:
            return f"{self.discriminator}/{self.default_bucket(project)}"
        return self.discriminator

    def release_name(self, project: str) -> str:
        return f"projects/{project}/releases/{self.release_id(project)}"


_DISCRIMINATORS: dict[RuleFamily, str] = {
    RuleFamily.firestore: "cloud.firestore",
    RuleFamily.storage: "firebase.storage",
}


# --- Module Notes -----------------------------------------------------------
# Storage releases embed the project's default bucket, so one project has exactly
# one storage release managed here.
