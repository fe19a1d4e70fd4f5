"""
AI content assist I/O models.

``AIGeneratedContent`` doubles as the structured output type handed to the
pydantic-ai agent, so its field descriptions are part of the model prompt.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class AvailableTag(BaseModel):
    id: str
    name: str


class GenerateContentRequest(BaseModel):
    title: str = Field(description="Working title of the post")
    content: str = Field(description="Post body (markdown)")
    available_tags: List[AvailableTag] = Field(default_factory=list)
    existing_excerpt: Optional[str] = Field(default=None, description="Excerpt already written by the author")


class SeoFields(BaseModel):
    meta_title: str = Field(description="SEO title, at most 60 characters")
    meta_description: str = Field(description="SEO description, at most 160 characters")
    primary_keyword: str = Field(description="Main search keyword")
    secondary_keywords: List[str] = Field(default_factory=list, description="3-6 related keywords")


class ContentFields(BaseModel):
    subtitle: str = Field(description="One-sentence subtitle")
    excerpt: str = Field(description="Two-sentence teaser for listings")
    suggested_titles: List[str] = Field(default_factory=list, description="Alternative titles")


class AIOptimizationFields(BaseModel):
    ai_summary: str = Field(description="Neutral 2-3 sentence summary for answer engines")
    key_takeaways: List[str] = Field(default_factory=list)
    questions_answered: List[str] = Field(default_factory=list)
    definitive_statements: List[str] = Field(default_factory=list)


class CategorizationFields(BaseModel):
    suggested_tag_ids: List[str] = Field(
        default_factory=list, description="Ids chosen only from the available tags list"
    )


class GeneratedFaq(BaseModel):
    question: str
    answer: str


class GeneratedEntity(BaseModel):
    name: str
    type: str


class AIGeneratedContent(BaseModel):
    seo: SeoFields
    content: ContentFields
    ai_optimization: AIOptimizationFields
    categorization: CategorizationFields = Field(default_factory=CategorizationFields)
    faqs: List[GeneratedFaq] = Field(default_factory=list)
    entities: List[GeneratedEntity] = Field(default_factory=list)
