from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PageType(str, Enum):
    HOMEPAGE = "Homepage"
    PLP = "PLP"
    PDP = "PDP"
    BLOG = "Blog"


SECTION_NAMES: tuple[str, ...] = (
    "Product Discovery",
    "Branding & Trust",
    "Mobile Experience",
    "Performance Perception",
    "Recommendations",
)

CHECKLIST_STATUSES: tuple[str, ...] = ("✅ Pass", "⚠️ Needs Improvement", "❌ Fail")


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional at the schema level so a missing URL is reported as InvalidInput.
    url: str | None = Field(default=None, description="Page URL; https:// is assumed when no scheme is given")
    page_type: str = Field(default=PageType.HOMEPAGE.value, alias="pageType")

    @field_validator("page_type", mode="before")
    @classmethod
    def default_page_type(cls, v: Any) -> str:
        if v is None or (isinstance(v, str) and not v.strip()):
            return PageType.HOMEPAGE.value
        return str(v).strip()


class ChecklistEntry(BaseModel):
    model_config = ConfigDict(extra="allow")

    category: str = ""
    status: str = ""


class AuditResult(BaseModel):
    score: int = Field(ge=0, le=100)
    page_speed: int | None = Field(default=None, ge=0, le=100)
    sections: dict[str, str] = Field(default_factory=dict)
    checklist: list[ChecklistEntry] = Field(default_factory=list)


class AuditRecord(BaseModel):
    audit_id: str
    url: str
    page_type: str
    score: int
    page_speed: int | None = None
    sections: dict[str, str] = Field(default_factory=dict)
    checklist: list[ChecklistEntry] = Field(default_factory=list)
    created_at: datetime


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    score: int
    page_speed: int | None = Field(default=None, alias="pageSpeed")
    analysis_sections: dict[str, str] = Field(default_factory=dict, alias="analysisSections")
    checklist: list[ChecklistEntry] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: AuditRecord) -> "AnalyzeResponse":
        return cls(
            score=record.score,
            page_speed=record.page_speed,
            analysis_sections=record.sections,
            checklist=record.checklist,
        )
