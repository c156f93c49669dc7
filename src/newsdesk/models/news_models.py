from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from newsdesk.core.config import settings
from newsdesk.db.base import Base


class NewsSource(str, Enum):
    DEFAULT = "default"
    INTERNAL = "internal"
    ARTICLE = "article"
    EXTERNAL = "external"


class NewsArchive(Base):
    __tablename__ = settings.archive_table

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    # страница читалки новостей
    jump_to: Mapped[int | None] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=datetime.utcnow
    )

    items: Mapped[list["News"]] = relationship("News", back_populates="archive")


class News(Base):
    __tablename__ = settings.news_table

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    pid: Mapped[int] = mapped_column(
        ForeignKey(f"{settings.archive_table}.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    alias: Mapped[str | None] = mapped_column(String(128), unique=True, index=True)
    headline: Mapped[str] = mapped_column(String(255), nullable=False)
    teaser: Mapped[str | None] = mapped_column(Text)
    url: Mapped[str | None] = mapped_column(String(255))

    # Unix timestamp, по нему сортируем и фильтруем диапазоны
    date: Mapped[int] = mapped_column(Integer, nullable=False, index=True, default=0)

    source: Mapped[NewsSource] = mapped_column(
        SQLEnum(
            NewsSource,
            name="news_source",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        nullable=False,
        default=NewsSource.DEFAULT,
    )

    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # NULL = граница не задана; 0 — это реальная граница
    start: Mapped[int | None] = mapped_column(Integer)
    stop: Mapped[int | None] = mapped_column(Integer)

    archive: Mapped["NewsArchive"] = relationship("NewsArchive", back_populates="items")
