"""
sidkik_firebase.rules.service

Rule deployment protocol.

Responsibilities:
- Deploy rule source in two phases: create an immutable ruleset, then patch the
  family release to reference it.
- Read back the live rules by resolving the latest release for the family and
  fetching its ruleset source.
- Treat delete as a no-op (a family always keeps a previous ruleset).
"""

from __future__ import annotations

from dataclasses import dataclass

from sidkik_firebase.clients.firebase_rules import FirebaseRulesClient
from sidkik_firebase.errors import DeploymentError, NotFoundError, SidkikError
from sidkik_firebase.locks import KeyedLocks
from sidkik_firebase.observability.logging import get_logger
from sidkik_firebase.rules.families import RuleFamily
from sidkik_firebase.rules.resolver import latest_active

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class RuleState:
    """
    Live rules of one family, as observed on the server.
    """

    project: str
    family: RuleFamily
    release_name: str
    ruleset_name: str
    content: str


class RuleDeploymentService:
    def __init__(self, *, client: FirebaseRulesClient, locks: KeyedLocks | None = None) -> None:
        self._client = client
        self._locks = locks or KeyedLocks()

    async def deploy(self, *, project: str, family: RuleFamily, source: str) -> RuleState:
        if not source:
            raise DeploymentError(f"no {family} source specified", phase="create")

        release_name = family.release_name(project)
        async with self._locks.hold(release_name):
            # Phase 1: create. Nothing to clean up if this fails.
            try:
                ruleset = await self._client.create_ruleset(
                    project=project, family=family, content=source
                )
            except SidkikError as e:
                raise DeploymentError(f"error creating {family} ruleset: {e}", phase="create") from e
            if not ruleset.name:
                raise DeploymentError(
                    f"error creating {family} ruleset: server returned no ruleset name",
                    phase="create",
                )
            log.debug("ruleset_created", project=project, family=str(family), ruleset=ruleset.name)

            # Phase 2: release. A failure leaves the new ruleset orphaned; it is
            # immutable and harmless, so no rollback is attempted.
            try:
                release = await self._client.patch_release(
                    project=project, family=family, ruleset_name=ruleset.name
                )
            except SidkikError as e:
                raise DeploymentError(
                    f"error releasing ruleset {ruleset.name} to {release_name}: {e}",
                    phase="release",
                    ruleset_name=ruleset.name,
                ) from e
            log.info(
                "ruleset_released",
                project=project,
                release=release.name,
                ruleset=release.ruleset_name,
            )

            state = await self.read(project=project, family=family)

        if state is None:
            raise DeploymentError(
                f"release {release_name} not visible after deploy",
                phase="release",
                ruleset_name=ruleset.name,
            )
        return state

    async def read(self, *, project: str, family: RuleFamily) -> RuleState | None:
        try:
            releases = await self._client.list_releases(project=project)
        except NotFoundError:
            log.warning("rules_release_history_not_found", project=project, family=str(family))
            return None

        ruleset_name = latest_active(releases, family.discriminator)
        if ruleset_name is None:
            log.info("rules_family_empty", project=project, family=str(family))
            return None

        try:
            ruleset = await self._client.get_ruleset(ruleset_name)
        except NotFoundError:
            log.warning("ruleset_not_found", project=project, ruleset=ruleset_name)
            return None

        log.debug("rules_read", project=project, family=str(family), ruleset=ruleset_name)
        return RuleState(
            project=project,
            family=family,
            release_name=family.release_name(project),
            ruleset_name=ruleset_name,
            content=ruleset.content,
        )

    async def delete(self, *, project: str, family: RuleFamily) -> None:
        # Removing the release would leave the family without rules.
        log.info(
            "rules_delete_skipped",
            project=project,
            family=str(family),
            reason="a newer ruleset has already been released",
        )


# --- Module Notes -----------------------------------------------------------
# Which ruleset is live is decided solely by `latest_active` over the release
# history; concurrent deploys to one release are serialized by `KeyedLocks`.
