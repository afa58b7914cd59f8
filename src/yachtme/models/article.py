"""Article (CMS) models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .base import pick_localized, utcnow


class ArticleCategory(str, Enum):
    BLOG = "blog"
    ESCURSIONI = "escursioni"
    NEWS = "news"
    INFO = "info"


class ArticleStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


ARTICLE_CATEGORY_LABELS: Dict[ArticleCategory, str] = {
    ArticleCategory.BLOG: "Blog",
    ArticleCategory.ESCURSIONI: "Escursioni",
    ArticleCategory.NEWS: "Novità",
    ArticleCategory.INFO: "Informazioni",
}

ARTICLE_STATUS_LABELS: Dict[ArticleStatus, str] = {
    ArticleStatus.DRAFT: "Bozza",
    ArticleStatus.PUBLISHED: "Pubblicato",
}


class ArticleFields(BaseModel):
    """Editable article attributes. ``content`` is Markdown."""

    title: str = ""
    title_en: Optional[str] = None
    slug: str = ""
    excerpt: Optional[str] = None
    excerpt_en: Optional[str] = None
    content: str = ""
    content_en: Optional[str] = None
    cover_image: Optional[str] = None
    category: ArticleCategory = ArticleCategory.BLOG
    status: ArticleStatus = ArticleStatus.DRAFT
    author: Optional[str] = None


class Article(ArticleFields):
    """A stored blog post, excursion, news item or info page."""

    id: UUID = Field(default_factory=uuid4)
    published_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_published(self) -> bool:
        return self.status == ArticleStatus.PUBLISHED

    def localized(self, locale: str) -> "LocalizedArticle":
        return LocalizedArticle(
            id=self.id,
            slug=self.slug,
            title=pick_localized(self.title, self.title_en, locale),
            excerpt=pick_localized(self.excerpt, self.excerpt_en, locale),
            content=pick_localized(self.content, self.content_en, locale),
            cover_image=self.cover_image,
            category=self.category,
            category_label=ARTICLE_CATEGORY_LABELS[self.category],
            author=self.author,
            published_at=self.published_at,
        )


class LocalizedArticle(BaseModel):
    """Article as shown to visitors in one locale."""

    id: UUID
    slug: str
    title: str
    excerpt: Optional[str] = None
    content: str
    cover_image: Optional[str] = None
    category: ArticleCategory
    category_label: str
    author: Optional[str] = None
    published_at: Optional[datetime] = None
