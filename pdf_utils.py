"""Turn a PDF (or a pre-extracted JSON dump) into an ExtractedDocument."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, List

import fitz
from pydantic import ValidationError

from models import DocumentMetadata, ExtractedDocument
from text_utils import normalize


def _page_lines(page) -> List[str]:
    lines = []
    for raw in page.get_text("text").splitlines():
        line = normalize(raw)
        if line:
            lines.append(line)
    return lines


def _info(meta: Dict[str, str]) -> DocumentMetadata:
    fields = {}
    for key in ("title", "author", "subject", "keywords"):
        value = normalize((meta or {}).get(key) or "")
        fields[key] = value or None
    return DocumentMetadata(**fields)


def extract_pdf_content(pdf_path: Path) -> ExtractedDocument:
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(f"PDF not found: {pdf_path}")

    with fitz.open(str(pdf_path)) as doc:
        pages = [_page_lines(page) for page in doc]
        metadata = _info(doc.metadata)

    full_text = "\n".join(line for page in pages for line in page)
    return ExtractedDocument(pages=pages, full_text=full_text, metadata=metadata)


def load_extracted_document(json_path: Path) -> ExtractedDocument:
    """Read ``{pages, fullText, metadata}`` written by an external extractor."""
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"Extracted document not found: {json_path}")
    try:
        return ExtractedDocument.model_validate_json(json_path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise ValueError(f"Invalid extracted document {json_path}: {exc}") from exc
