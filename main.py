"""CLI entrypoint for turning research papers into slide-deck JSON."""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from tqdm import tqdm

from llm import PROVIDERS, ChatCompletionClient, LLMConfig, init_llm
from logging_utils import setup_logging
from models import ExtractedDocument, FigureDescriptor
from pdf_utils import extract_pdf_content, load_extracted_document
from pipeline import Pipeline, print_deck
from pipeline_common import (
    TQDM_NCOLS,
    DeckJSONStore,
    RunConfig,
    logger,
    parse_target_slides,
)
from pipeline_figures import load_figure_descriptors

VERSION = "0.1.0"

API_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "azure": "AZURE_OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
    "custom": "OPENAI_API_KEY",
}


def print_helper() -> None:
    print("paper2deck help")
    print("")
    print("Quick start:")
    print('  paper2deck --pdf "/path/to/paper.pdf" --slides 12')
    print('  paper2deck --pdf-dir "/path/to/pdfs" --slides 10 --show')
    print('  paper2deck --extracted "/path/to/extracted.json" --slides 8')
    print('  paper2deck --pdf paper.pdf --mode llm --provider anthropic --slides 12')
    print("")
    print("Defaults:")
    print("  Output dir: ~/paper2deck_runs or $PAPER2DECK_OUT_DIR")
    print("  API key: $PAPER2DECK_API_KEY or the provider variable (e.g. $OPENAI_API_KEY)")
    print("")
    print("Full options:")
    print("  paper2deck --help")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate slide-deck JSON from research paper PDFs.")
    p.add_argument("--version", action="version", version=f"paper2deck {VERSION}")
    p.add_argument("--pdf", action="append", help="Path to a local PDF file (repeatable or comma-separated list)")
    p.add_argument("--pdf-dir", action="append", help="Directory containing PDFs (repeatable)")
    p.add_argument(
        "--extracted",
        action="append",
        help="Pre-extracted document JSON {pages, fullText, metadata} (repeatable or comma-separated list)",
    )
    p.add_argument("--slides", default="12", help="Total slides including title and agenda (6-30, default 12)")
    p.add_argument("--mode", choices=["static", "llm"], default="static", help="Heuristic only, or LLM-augmented")
    p.add_argument("--provider", choices=list(PROVIDERS), default="openai", help="LLM provider for --mode llm")
    p.add_argument("--model", default="", help="LLM model name (provider default if omitted)")
    p.add_argument("--api-base-url", default="", help="LLM API base URL (provider default if omitted)")
    p.add_argument("--prompt", default="", help="Extra instructions for the LLM (replaces the default prompt)")
    p.add_argument("--prompt-file", default=None, help="Read --prompt from a file")
    p.add_argument("--figures", default=None, help="JSON array of {id, filename, caption} figure descriptors")
    p.add_argument(
        "--out-dir",
        default=None,
        help="Output directory (default: $PAPER2DECK_OUT_DIR or ~/paper2deck_runs)",
    )
    p.add_argument("--show", action="store_true", help="Print each generated deck")
    p.add_argument("--verbose", action="store_true", help="Verbose logging")
    return p.parse_args(argv)


def _split_list_args(values: List[str]) -> List[str]:
    out: List[str] = []
    for v in values:
        for part in v.split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out


def _collect_pdfs(paths: List[str], dirs: List[str]) -> List[Path]:
    out: List[Path] = [Path(p).expanduser().resolve() for p in _split_list_args(paths)]
    for d in dirs:
        root = Path(d).expanduser().resolve()
        if not root.exists():
            logger.warning("PDF directory not found: %s", root)
            continue
        out.extend(sorted(root.glob("*.pdf")))
    return out


def _resolve_api_key(provider: str) -> str:
    return (os.environ.get("PAPER2DECK_API_KEY") or os.environ.get(API_KEY_ENV[provider], "")).strip()


def _build_config(args: argparse.Namespace) -> RunConfig:
    out_root = args.out_dir or os.environ.get("PAPER2DECK_OUT_DIR", "~/paper2deck_runs")
    prompt = args.prompt
    if args.prompt_file:
        prompt = Path(args.prompt_file).expanduser().read_text(encoding="utf-8")
    return RunConfig(
        out_dir=Path(out_root).expanduser().resolve(),
        pdf_paths=_collect_pdfs(args.pdf or [], args.pdf_dir or []),
        extracted_paths=[Path(p).expanduser().resolve() for p in _split_list_args(args.extracted or [])],
        target_slides=parse_target_slides(args.slides),
        mode=args.mode,
        provider=args.provider,
        model=args.model,
        api_base_url=args.api_base_url,
        api_key=_resolve_api_key(args.provider),
        prompt=prompt.strip(),
        figures_path=Path(args.figures).expanduser().resolve() if args.figures else None,
        verbose=args.verbose,
        show_deck=args.show,
    )


def _load_document(path: Path) -> ExtractedDocument:
    if path.suffix.lower() == ".json":
        return load_extracted_document(path)
    return extract_pdf_content(path)


def _load_figures(cfg: RunConfig) -> List[FigureDescriptor]:
    if cfg.figures_path is None:
        return []
    if not cfg.figures_path.exists():
        logger.warning("Figure metadata not found: %s", cfg.figures_path)
        return []
    return load_figure_descriptors(cfg.figures_path.read_text(encoding="utf-8"))


def _print_summary(rows: List[Tuple[str, str, str, str]]) -> None:
    table = Table(title="PAPER2DECK RESULTS", show_lines=True)
    table.add_column("Source")
    table.add_column("Title")
    table.add_column("Slides", justify="right")
    table.add_column("Output")
    for row in rows:
        table.add_row(*row)
    Console().print(table)


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if argv and argv[0] == "help":
        print_helper()
        return 0

    load_dotenv(Path.cwd() / ".env", override=False)
    args = parse_args(argv)
    cfg = _build_config(args)

    setup_logging(cfg.verbose)

    sources = list(cfg.pdf_paths) + list(cfg.extracted_paths)
    if not sources:
        logger.error("Provide at least one source via --pdf, --pdf-dir, or --extracted.")
        return 2

    store = DeckJSONStore(cfg.out_dir)
    setup_logging(cfg.verbose, log_path=cfg.out_dir / "run.log")

    llm: Optional[ChatCompletionClient] = None
    if cfg.mode == "llm":
        if not cfg.api_key:
            logger.error("LLM mode needs an API key ($PAPER2DECK_API_KEY or $%s).", API_KEY_ENV[cfg.provider])
            return 2
        try:
            llm = init_llm(
                LLMConfig(
                    api_key=cfg.api_key,
                    provider=cfg.provider,
                    api_base_url=cfg.api_base_url,
                    model=cfg.model,
                )
            )
        except ValueError as exc:
            logger.error("%s", exc)
            return 2

    pipeline = Pipeline(cfg, llm)
    figures = _load_figures(cfg)
    rows: List[Tuple[str, str, str, str]] = []
    failures = 0

    for src in tqdm(sources, desc="Papers", unit="paper", ncols=TQDM_NCOLS):
        try:
            doc = _load_document(src)
            deck = pipeline.run(doc, figures)
            path = store.save(deck)
        except Exception:
            logger.exception("Failed to build deck for %s", src)
            failures += 1
            rows.append((src.name, "-", "-", "FAILED"))
            continue

        logger.info("Saved deck JSON: %s", path)
        if cfg.show_deck:
            print_deck(deck)
        rows.append((src.name, deck.metadata.paper_title, str(deck.metadata.slide_count), str(path)))

    _print_summary(rows)
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
