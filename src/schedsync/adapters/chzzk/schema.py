"""Pydantic models describing the Chzzk channel video listing payload."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ChzzkBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class VideoPayload(ChzzkBaseModel):
    video_no: int | None = Field(default=None, alias="videoNo")
    video_id: str = Field(alias="videoId")
    video_title: str = Field(default="", alias="videoTitle")
    publish_date_at: int = Field(alias="publishDateAt")
    duration: int = 0
    video_type: str | None = Field(default=None, alias="videoType")

    @field_validator("video_title", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value


class VideoPage(ChzzkBaseModel):
    page: int = 0
    size: int = 0
    total_count: int = Field(default=0, alias="totalCount")
    total_pages: int = Field(default=0, alias="totalPages")
    data: list[VideoPayload] = Field(default_factory=list[VideoPayload])


class VideoListResponse(ChzzkBaseModel):
    code: int
    message: str | None = None
    content: VideoPage | None = None
