"""Pydantic models for extracted documents, slides and decks."""
from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FALLBACK_TITLE = "Untitled Research Paper"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class DocumentMetadata(CamelModel):
    title: Optional[str] = None
    author: Optional[str] = None
    subject: Optional[str] = None
    keywords: Optional[str] = None


class ExtractedDocument(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    pages: List[List[str]] = Field(default_factory=list)
    full_text: str = ""
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)

    @property
    def first_page(self) -> List[str]:
        return list(self.pages[0]) if self.pages else []

    @property
    def all_lines(self) -> List[str]:
        return [line for page in self.pages for line in page]

    @property
    def text(self) -> str:
        """Full text, rebuilt from the page lines when the extractor left it empty."""
        if self.full_text.strip():
            return self.full_text
        return "\n".join(self.all_lines)


class BulletsBlock(CamelModel):
    kind: Literal["bullets"] = "bullets"
    items: List[str] = Field(default_factory=list)


class ParagraphBlock(CamelModel):
    kind: Literal["paragraph"] = "paragraph"
    text: str


class QuoteBlock(CamelModel):
    kind: Literal["quote"] = "quote"
    text: str


class ImageBlock(CamelModel):
    kind: Literal["image"] = "image"
    path: str
    caption: Optional[str] = None
    width: Optional[str] = None


SlideBlock = Annotated[
    Union[BulletsBlock, ParagraphBlock, QuoteBlock, ImageBlock],
    Field(discriminator="kind"),
]


class Slide(CamelModel):
    id: str
    title: str
    section: Optional[str] = None
    subsection: Optional[str] = None
    blocks: List[SlideBlock] = Field(default_factory=list)
    notes: Optional[str] = None

    def bullet_items(self) -> List[str]:
        items: List[str] = []
        for block in self.blocks:
            if isinstance(block, BulletsBlock):
                items.extend(block.items)
        return items


class DeckMetadata(CamelModel):
    paper_title: str = FALLBACK_TITLE
    paper_subtitle: Optional[str] = None
    authors: Optional[str] = None
    generated_at: str = ""
    mode: Literal["static", "llm"] = "static"
    slide_count: int = 2


class GeneratedDeck(CamelModel):
    metadata: DeckMetadata
    outline: List[str] = Field(default_factory=list)
    slides: List[Slide] = Field(default_factory=list)


class AnalysisResult(GeneratedDeck):
    sentences: List[str] = Field(default_factory=list)


class FigureDescriptor(CamelModel):
    id: str
    filename: str
    caption: Optional[str] = None


class LlmSlidePayload(CamelModel):
    section: Optional[str] = None
    subsection: Optional[str] = None
    title: Optional[str] = None
    bullets: Optional[List[str]] = None
    paragraph: Optional[str] = None
    notes: Optional[str] = None


class LlmResponsePayload(CamelModel):
    paper_title: Optional[str] = None
    paper_subtitle: Optional[str] = None
    authors: Optional[str] = None
    outline: Optional[List[str]] = None
    slides: Optional[List[LlmSlidePayload]] = None
