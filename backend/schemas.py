from datetime import datetime, timezone
from typing import Any, List, Literal, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator

import config


class AttractionCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class AttractionImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    src: str
    subject: str = ""
    ext: str = ""


class Attraction(BaseModel):
    """One point of interest from the Taipei open tourism dataset."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    name: str
    name_zh: Optional[str] = None
    open_status: int = 0
    introduction: str = ""
    open_time: str = ""
    zipcode: str = ""
    distric: str = ""
    address: str = ""
    tel: str = ""
    fax: str = ""
    email: str = ""
    months: str = ""
    nlat: float = 0.0
    elong: float = 0.0
    official_site: str = ""
    facebook: str = ""
    ticket: str = ""
    remind: str = ""
    staytime: str = ""
    modified: str = ""
    url: str = ""
    category: List[AttractionCategory] = Field(default_factory=list)
    target: List[AttractionCategory] = Field(default_factory=list)
    service: List[AttractionCategory] = Field(default_factory=list)
    friendly: List[AttractionCategory] = Field(default_factory=list)
    images: List[AttractionImage] = Field(default_factory=list)
    files: List[Any] = Field(default_factory=list)
    links: List[Any] = Field(default_factory=list)

    # The upstream feed sends null for blank fields.
    @field_validator(
        "introduction", "open_time", "zipcode", "distric", "address", "tel",
        "fax", "email", "months", "official_site", "facebook", "ticket",
        "remind", "staytime", "modified", "url",
        mode="before",
    )
    @classmethod
    def _null_to_empty_str(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator(
        "category", "target", "service", "friendly", "images", "files", "links",
        mode="before",
    )
    @classmethod
    def _null_to_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("open_status", "nlat", "elong", mode="before")
    @classmethod
    def _null_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @property
    def primary_category(self) -> str:
        return self.category[0].name if self.category else config.DEFAULT_CATEGORY_LABEL

    @property
    def cover_image(self) -> str:
        return self.images[0].src if self.images else config.DEFAULT_COVER_IMAGE

    @property
    def teaser(self) -> str:
        return self.introduction or config.DEFAULT_INTRODUCTION

    @property
    def map_search_url(self) -> str:
        """Google Maps search deep link for name + address."""
        query = quote(f"{self.name} {self.address}", safe="")
        return f"https://www.google.com/maps/search/?api=1&query={query}"


class AttractionsResponse(BaseModel):
    """Envelope returned by GET /open-api/{locale}/Attractions/All."""
    total: int = 0
    data: Optional[List[Any]] = None


class FilterCriteria(BaseModel):
    search_text: str = ""
    category: str = config.ALL_CATEGORY


class GeoPosition(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class GroundingUrl(BaseModel):
    title: str = ""
    uri: str = ""


class ChatPart(BaseModel):
    text: str


class ChatTurn(BaseModel):
    """One history turn in the backend's conversational format."""
    role: Literal["user", "model"]
    parts: List[ChatPart]


class ChatReply(BaseModel):
    text: str
    urls: List[GroundingUrl] = Field(default_factory=list)


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    grounding_urls: List[GroundingUrl] = Field(default_factory=list)

    def to_turn(self) -> ChatTurn:
        return ChatTurn(role=self.role, parts=[ChatPart(text=self.content)])
