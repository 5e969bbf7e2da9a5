from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from models import GeneratedDeck

logger = logging.getLogger("paper2deck")
TQDM_NCOLS = 100

DEFAULT_TARGET_SLIDES = 12
MIN_TARGET_SLIDES = 6
MAX_TARGET_SLIDES = 30
MIN_CONTENT_SLIDES = 3
MAX_CONTENT_SLIDES = 15
# Title and agenda frames are added by the renderer.
FIXED_FRAMES = 2


@dataclass
class RunConfig:
    out_dir: Path
    pdf_paths: List[Path] = field(default_factory=list)
    extracted_paths: List[Path] = field(default_factory=list)
    target_slides: int = DEFAULT_TARGET_SLIDES
    mode: str = "static"
    provider: str = "openai"
    model: str = ""
    api_base_url: str = ""
    api_key: str = ""
    prompt: str = ""
    figures_path: Optional[Path] = None
    verbose: bool = False
    show_deck: bool = False


def parse_target_slides(value) -> int:
    """Parse a requested slide total; anything outside 6-30 becomes the default."""
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return DEFAULT_TARGET_SLIDES
    if MIN_TARGET_SLIDES <= parsed <= MAX_TARGET_SLIDES:
        return parsed
    return DEFAULT_TARGET_SLIDES


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def sanitize_filename_part(s: str, max_len: int = 48) -> str:
    s = (s or "").lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    s = re.sub(r"-{2,}", "-", s)
    s = s.strip("-")[:max_len]
    return s or "paper2deck"


class DeckJSONStore:
    def __init__(self, out_dir: Path) -> None:
        self.out_dir = Path(out_dir)
        self.out_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, deck: GeneratedDeck) -> Path:
        stem = sanitize_filename_part(deck.metadata.paper_title)
        stamp = (deck.metadata.generated_at or now_iso()).replace(":", "-").replace("T", "-").split("+")[0]
        return self.out_dir / f"Paper2Deck-{stem}-{stamp}.json"

    def save(self, deck: GeneratedDeck) -> Path:
        path = self.path_for(deck)
        path.write_text(deck.to_json() + "\n", encoding="utf-8")
        return path
