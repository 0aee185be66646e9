"""
sidkik_firebase.rules.models

Typed payloads for the Firebase Rules API.

Responsibilities:
- Define request/response models (Ruleset, Release, release history).
- Keep wire names (camelCase) out of the rest of the codebase.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RulesModel(BaseModel):
    # Unknown response fields are ignored; missing required ones fail validation.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SourceFile(RulesModel):
    name: str
    content: str
    fingerprint: str | None = None


class Source(RulesModel):
    files: list[SourceFile] = Field(min_length=1)


class Ruleset(RulesModel):
    # Server-assigned; absent on create requests.
    name: str | None = None
    source: Source
    create_time: datetime | None = Field(default=None, alias="createTime")

    @property
    def content(self) -> str:
        return self.source.files[0].content


class Release(RulesModel):
    name: str
    ruleset_name: str = Field(alias="rulesetName")
    create_time: datetime = Field(alias="createTime")
    update_time: datetime | None = Field(default=None, alias="updateTime")


class ListReleasesResponse(RulesModel):
    releases: list[Release] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


class ReleaseRef(RulesModel):
    name: str
    ruleset_name: str = Field(alias="rulesetName")


class UpdateReleaseRequest(RulesModel):
    release: ReleaseRef
    update_mask: str = Field(default="rulesetName", alias="updateMask")


# --- Module Notes -----------------------------------------------------------
# Serialize with `model_dump(by_alias=True, exclude_none=True, mode="json")` to get
# the wire shape.
