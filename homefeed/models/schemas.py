from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from typing import Any


class FeedItem(BaseModel):
    """One article as published in the feed."""

    title: str = ""
    link: str = ""
    image: str = ""
    meta: dict[str, Any] = Field(default_factory=dict)

    # shortened meta description, filled in after download
    description: str = Field(default="", exclude=True)

    @field_validator("title", "link", "image", mode="before")
    @classmethod
    def _null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("meta", mode="before")
    @classmethod
    def _null_meta(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("description", mode="before")
    @classmethod
    def _not_on_the_wire(cls, v: Any) -> Any:
        return ""


class Source(BaseModel):
    """
    A feed authority, the place content is fetched from
    (BBC, NYT, Reddit, ...). `entries` are positions in Feed.entries.
    """

    model_config = ConfigDict(populate_by_name=True)

    feed_url: str = Field(default="", alias="feedUrl")
    title: str = ""
    url: str = Field(default="", alias="link")
    entries: list[StrictInt] = Field(default_factory=list)

    @field_validator("feed_url", "title", "url", mode="before")
    @classmethod
    def _null_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("entries", mode="before")
    @classmethod
    def _null_entries(cls, v: Any) -> Any:
        return [] if v is None else v


class Feed(BaseModel):
    feeds: dict[str, Source] = Field(default_factory=dict)
    entries: list[FeedItem] = Field(default_factory=list)

    # grouping key ("all" or a source title) -> entries, derived locally
    items: dict[str, list[FeedItem]] = Field(default_factory=dict, exclude=True)

    @field_validator("feeds", "entries", mode="before")
    @classmethod
    def _null_collections(cls, v: Any, info) -> Any:
        if v is None:
            return {} if info.field_name == "feeds" else []
        if info.field_name == "entries" and isinstance(v, list):
            # a null article decodes as an empty one
            return [{} if e is None else e for e in v]
        return v

    @field_validator("items", mode="before")
    @classmethod
    def _not_on_the_wire(cls, v: Any) -> Any:
        return {}
