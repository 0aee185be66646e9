"""
sidkik_firebase.emulator.store

In-memory state behind the emulator.

Responsibilities:
- Hold rulesets, releases and the auth config per project, in wire format.
- Seed new projects with default rules, the way real Firebase projects start.
- Enforce the server-side invariants the client relies on (immutable rulesets,
  stable release names, server-assigned ruleset names).
"""

from __future__ import annotations

import copy
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sidkik_firebase.emulator.errors import invalid_argument, not_found
from sidkik_firebase.rules.families import RuleFamily

DEFAULT_RULES: dict[RuleFamily, str] = {
    RuleFamily.firestore: (
        "rules_version = '2';\n"
        "service cloud.firestore {\n"
        "  match /databases/{database}/documents {\n"
        "    match /{document=**} {\n"
        "      allow read, write: if false;\n"
        "    }\n"
        "  }\n"
        "}\n"
    ),
    RuleFamily.storage: (
        "rules_version = '2';\n"
        "service firebase.storage {\n"
        "  match /b/{bucket}/o {\n"
        "    match /{allPaths=**} {\n"
        "      allow read, write: if false;\n"
        "    }\n"
        "  }\n"
        "}\n"
    ),
}

MAX_PAGE_SIZE = 100


def rfc3339_now() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="microseconds").replace("+00:00", "Z")


@dataclass
class ProjectState:
    rulesets: dict[str, dict[str, Any]] = field(default_factory=dict)
    # Insertion order is the order the history is listed in.
    releases: dict[str, dict[str, Any]] = field(default_factory=dict)
    auth_config: dict[str, Any] = field(default_factory=dict)


class InMemoryRulesStore:
    def __init__(
        self,
        *,
        seed_default_rules: bool = True,
        clock: Callable[[], str] = rfc3339_now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._seed = seed_default_rules
        self._clock = clock
        self._new_id = id_factory
        self._projects: dict[str, ProjectState] = {}

    @property
    def project_count(self) -> int:
        return len(self._projects)

    def project(self, project: str) -> ProjectState:
        state = self._projects.get(project)
        if state is None:
            state = self._projects[project] = self._bootstrap(project)
        return state

    def _bootstrap(self, project: str) -> ProjectState:
        state = ProjectState(
            auth_config={
                "name": f"projects/{project}/config",
                "signIn": {"allowDuplicateEmails": False},
                "authorizedDomains": ["localhost", f"{project}.firebaseapp.com", f"{project}.web.app"],
            }
        )
        self._projects[project] = state
        if self._seed:
            for family, content in DEFAULT_RULES.items():
                ruleset = self.create_ruleset(project, [{"name": family.file_name, "content": content}])
                self.put_release(project, family.release_name(project), ruleset["name"])
        return state

    # --- rulesets ---------------------------------------------------------

    def create_ruleset(self, project: str, files: list[dict[str, Any]]) -> dict[str, Any]:
        if not files:
            raise invalid_argument("Ruleset source must contain at least one file.")
        name = f"projects/{project}/rulesets/{self._new_id()}"
        ruleset = {
            "name": name,
            "source": {"files": [dict(f) for f in files]},
            "createTime": self._clock(),
        }
        self.project(project).rulesets[name] = ruleset
        return copy.deepcopy(ruleset)

    def get_ruleset(self, project: str, ruleset_id: str) -> dict[str, Any]:
        name = f"projects/{project}/rulesets/{ruleset_id}"
        ruleset = self.project(project).rulesets.get(name)
        if ruleset is None:
            raise not_found(f"Ruleset {name} not found.")
        return copy.deepcopy(ruleset)

    # --- releases ---------------------------------------------------------

    def put_release(self, project: str, name: str, ruleset_name: str) -> dict[str, Any]:
        """Create a release, or repoint it if it exists (createTime is kept)."""
        state = self.project(project)
        if ruleset_name not in state.rulesets:
            raise invalid_argument(f"Ruleset {ruleset_name} does not exist.")
        now = self._clock()
        release = state.releases.get(name)
        if release is None:
            release = state.releases[name] = {"name": name, "createTime": now}
        release["rulesetName"] = ruleset_name
        release["updateTime"] = now
        return copy.deepcopy(release)

    def patch_release(self, project: str, name: str, ruleset_name: str) -> dict[str, Any]:
        if name not in self.project(project).releases:
            raise not_found(f"Release {name} not found.")
        return self.put_release(project, name, ruleset_name)

    def list_releases(
        self,
        project: str,
        *,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict[str, Any]:
        releases = list(self.project(project).releases.values())
        size = min(page_size or MAX_PAGE_SIZE, MAX_PAGE_SIZE)
        try:
            offset = int(page_token) if page_token else 0
        except ValueError as e:
            raise invalid_argument(f"Invalid page token {page_token!r}.") from e

        page = releases[offset : offset + size]
        body: dict[str, Any] = {"releases": copy.deepcopy(page)}
        if offset + size < len(releases):
            body["nextPageToken"] = str(offset + size)
        return body

    # --- auth config ------------------------------------------------------

    def get_auth_config(self, project: str) -> dict[str, Any]:
        return copy.deepcopy(self.project(project).auth_config)

    def patch_auth_config(
        self,
        project: str,
        patch: dict[str, Any],
        update_mask: list[str],
    ) -> dict[str, Any]:
        config = self.project(project).auth_config
        for path in update_mask:
            _apply_masked_field(config, patch, path.split("."))
        return copy.deepcopy(config)


def _apply_masked_field(target: dict[str, Any], patch: dict[str, Any], path: list[str]) -> None:
    head, rest = path[0], path[1:]
    if not rest:
        if head in patch:
            target[head] = copy.deepcopy(patch[head])
        else:
            # Masked but absent in the patch: clear it.
            target.pop(head, None)
        return
    sub_patch = patch.get(head)
    child = target.setdefault(head, {})
    _apply_masked_field(child, sub_patch if isinstance(sub_patch, dict) else {}, rest)


# --- Module Notes -----------------------------------------------------------
# Rulesets are stored once and never modified; only release pointers move.
