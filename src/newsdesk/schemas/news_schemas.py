# src/newsdesk/schemas/news_schemas.py
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from newsdesk.models.news_models import NewsSource


class NewsItem(BaseModel):
  id: int
  pid: int
  alias: str | None = None
  headline: str
  teaser: str | None = None
  url: str | None = None
  date: int
  source: NewsSource
  featured: bool
  published: bool
  start: int | None = None
  stop: int | None = None

  model_config = ConfigDict(from_attributes=True)


class NewsCountResponse(BaseModel):
  count: int = Field(ge=0)


class NewsImport(BaseModel):
  """Запись новости при импорте; пустая строка в start/stop = граница не задана."""

  pid: int = Field(gt=0)
  headline: str
  alias: str | None = None
  teaser: str | None = None
  url: str | None = None
  date: int = 0
  source: NewsSource = NewsSource.DEFAULT
  featured: bool = False
  published: bool = False
  start: int | None = None
  stop: int | None = None

  @field_validator("start", "stop", mode="before")
  @classmethod
  def empty_string_is_unset(cls, value: Any) -> Any:
    if isinstance(value, str) and value.strip() == "":
      return None
    return value

  @field_validator("alias", mode="before")
  @classmethod
  def blank_alias_is_none(cls, value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
      return None
    return value
