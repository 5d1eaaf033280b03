"""
Scraping Models - Records and outcomes exchanged between pipeline stages
"""

from datetime import datetime, timezone
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# A single URL to fetch
Location = str


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalizedField(BaseModel):
    """One extracted attribute in both supported locales"""
    model_config = ConfigDict(frozen=True)

    en: str = ""
    ar: str = ""


class PageState(BaseModel):
    """Snapshot of a loaded page, ready for extraction"""
    model_config = ConfigDict(frozen=True)

    url: Location
    final_url: str
    html: str
    status_code: Optional[int] = None
    captured_at: datetime = Field(default_factory=utcnow)


class ExtractionRecord(BaseModel):
    """SEO fields extracted from one successfully fetched page"""
    model_config = ConfigDict(frozen=True)

    url: Location
    final_url: str
    meta_title: LocalizedField = Field(default_factory=LocalizedField)
    meta_description: LocalizedField = Field(default_factory=LocalizedField)
    h1: LocalizedField = Field(default_factory=LocalizedField)
    intro_text: LocalizedField = Field(default_factory=LocalizedField)
    structured_data: Optional[Any] = None
    status_code: Optional[int] = None
    timestamp: datetime


class FetchSuccess(BaseModel):
    """Location fetched and extracted"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["success"] = "success"
    record: ExtractionRecord
    attempts: int = 1

    @property
    def url(self) -> Location:
        return self.record.url


class FetchFailure(BaseModel):
    """Location that could not be fetched within the retry budget"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["failure"] = "failure"
    url: Location
    error: str
    error_type: str
    attempts: int


FetchOutcome = Annotated[Union[FetchSuccess, FetchFailure], Field(discriminator="kind")]


class RunStats(BaseModel):
    """Derived counts for downstream reporting"""
    model_config = ConfigDict(frozen=True)

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    success_ratio: float = 0.0


class RunResult(BaseModel):
    """Aggregate of every outcome of one run"""
    model_config = ConfigDict(frozen=True)

    successes: List[ExtractionRecord] = Field(default_factory=list)
    failures: List[FetchFailure] = Field(default_factory=list)
    started_at: Optional[datetime] = None
    timestamp: datetime = Field(default_factory=utcnow)
    stats: RunStats = Field(default_factory=RunStats)
