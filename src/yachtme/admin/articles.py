"""Article (blog, excursions, news, info) administration."""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from ..catalog.filters import ALL, contains_ci
from ..models.article import Article, ArticleCategory, ArticleFields, ArticleStatus
from ..storage.base import CatalogGateway, GatewayError, InvalidImageError
from ..utils import generate_slug
from .base import ActionResult, blank, run_action
from .errors import ActionFailedError, DraftValidationError, RecordNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "Rimini Charter"
TITLE_CONTENT_REQUIRED = "Titolo e contenuto sono obbligatori"
COVER_SETTING_KEY = "article-cover"


class ArticleDraft(BaseModel):
    """Article form state with IT and EN texts."""

    id: Optional[UUID] = None
    title: str = ""
    title_en: str = ""
    slug: str = ""
    excerpt: str = ""
    excerpt_en: str = ""
    content: str = ""
    content_en: str = ""
    cover_image: str = ""
    category: ArticleCategory = ArticleCategory.BLOG
    status: ArticleStatus = ArticleStatus.DRAFT
    author: str = DEFAULT_AUTHOR

    @classmethod
    def from_article(cls, article: Article) -> "ArticleDraft":
        return cls(
            id=article.id,
            title=article.title,
            title_en=article.title_en or "",
            slug=article.slug,
            excerpt=article.excerpt or "",
            excerpt_en=article.excerpt_en or "",
            content=article.content,
            content_en=article.content_en or "",
            cover_image=article.cover_image or "",
            category=article.category,
            status=article.status,
            author=article.author or "",
        )

    def set_title(self, title: str) -> None:
        """Update the title; the slug follows it unless it was edited by hand."""
        if self.slug == "" or self.slug == generate_slug(self.title):
            self.slug = generate_slug(title)
        self.title = title

    def to_fields(self, status: Optional[ArticleStatus] = None) -> ArticleFields:
        if blank(self.title) or blank(self.content):
            raise DraftValidationError(TITLE_CONTENT_REQUIRED)
        return ArticleFields(
            title=self.title.strip(),
            title_en=self.title_en or None,
            slug=generate_slug(self.slug) or generate_slug(self.title),
            excerpt=self.excerpt or None,
            excerpt_en=self.excerpt_en or None,
            content=self.content,
            content_en=self.content_en or None,
            cover_image=self.cover_image or None,
            category=self.category,
            status=status or self.status,
            author=self.author or None,
        )


class ArticleAdmin:
    def __init__(self, gateway: CatalogGateway):
        self.gateway = gateway
        self.articles: List[Article] = []

    async def load(self) -> None:
        self.articles = await run_action(
            self.gateway.list_articles(), "load articles", "Errore nel caricamento articoli"
        )

    def filter(
        self, search: str = "", category: Optional[str] = ALL, status: Optional[str] = ALL
    ) -> List[Article]:
        """Title or excerpt substring AND category AND status."""
        term = (search or "").strip()
        return [
            a
            for a in self.articles
            if (contains_ci(a.title, term) or (bool(a.excerpt) and contains_ci(a.excerpt, term)))
            and (category in (None, ALL) or a.category.value == category)
            and (status in (None, ALL) or a.status.value == status)
        ]

    async def get(self, article_id: UUID) -> Article:
        article = await run_action(
            self.gateway.get_article_by_id(article_id), "get article", "Errore nel caricamento articoli"
        )
        if article is None:
            raise RecordNotFoundError("Articolo non trovato")
        return article

    async def save(
        self, draft: ArticleDraft, status: Optional[ArticleStatus] = None
    ) -> ActionResult[Article]:
        """Create or update; ``status`` overrides the draft (publish / save as draft)."""
        fields = draft.to_fields(status)
        if draft.id:
            saved = await run_action(
                self.gateway.update_article(draft.id, fields),
                "update article",
                "Errore durante il salvataggio dell'articolo",
            )
            message = "Articolo aggiornato"
        else:
            saved = await run_action(
                self.gateway.create_article(fields),
                "create article",
                "Errore durante la creazione dell'articolo",
            )
            message = "Articolo creato"
        self.articles = [saved, *[a for a in self.articles if a.id != saved.id]]
        return ActionResult(message=message, record=saved)

    async def delete(self, article_id: UUID) -> ActionResult[Article]:
        await run_action(
            self.gateway.delete_article(article_id),
            "delete article",
            "Errore durante l'eliminazione dell'articolo",
        )
        self.articles = [a for a in self.articles if a.id != article_id]
        return ActionResult(message="Articolo eliminato")

    async def upload_cover(
        self, content: bytes, filename: str, content_type: Optional[str]
    ) -> ActionResult[str]:
        try:
            url = await self.gateway.upload_site_image(
                content, filename, content_type, COVER_SETTING_KEY
            )
        except InvalidImageError as e:
            raise DraftValidationError("Solo immagini") from e
        except GatewayError as e:
            logger.error("Article cover upload failed: %s", e)
            raise ActionFailedError(
                "Errore durante il caricamento dell'immagine", action="upload cover"
            ) from e
        return ActionResult(message="Immagine caricata", record=url)
