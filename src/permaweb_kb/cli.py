from __future__ import annotations

import asyncio
import json
import logging
import sys
import warnings
from pathlib import Path

import typer

from src.config.composition import build_docs_use_case
from src.domain.errors import DocsError
from src.domain.sources import get_source

from .config import get_settings
from .exceptions import ConfigurationError
from .logging_setup import setup_logging

app = typer.Typer(add_completion=False, no_args_is_help=True, help="Permaweb docs tools")


def _log_level(quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    return logging.DEBUG if get_settings().debug_mode else logging.INFO


@app.command("query")
def query_cmd(
    text: str = typer.Argument(..., help="Query text"),
    domain: list[str] = typer.Option(  # noqa: B008 - Typer keeps options in signature
        None, "--domain", "-d", help="Restrict to documentation domain (repeatable)."
    ),
    max_results: int = typer.Option(0, help="Maximum fragments (0 = configured default)."),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
    outfile: Path | None = typer.Option(  # noqa: B008 - Typer keeps options in signature
        None,
        "--outfile",
        "-o",
        help="Write JSON to file (UTF-8); logs are suppressed",
    ),
) -> None:
    """Query the documentation sources and print the most relevant fragments."""
    quiet = bool(as_json or outfile)
    setup_logging(_log_level(quiet))
    if quiet:
        warnings.filterwarnings("ignore")

    if max_results < 0:
        raise ConfigurationError(f"max_results must not be negative: {max_results}")

    svc = build_docs_use_case()
    response = asyncio.run(
        svc.search(text, domains=(domain or None), max_results=(max_results or None))
    )
    hits = response.results

    if as_json or outfile:
        payload = {
            "strategy": response.strategy.value if response.strategy else None,
            "sources": response.sources,
            "totalResults": response.total_results,
            "failedDomains": response.failed_domains,
            "estimatedTokens": svc.estimate_response_tokens(hits),
            "results": [
                {
                    "index": i + 1,
                    "domain": h.domain,
                    "relevanceScore": h.relevance_score,
                    "url": h.url,
                    "isFullDocument": h.is_full_document,
                    "content": h.content,
                }
                for i, h in enumerate(hits)
            ],
        }
        data = json.dumps(payload, ensure_ascii=False, indent=2)
        if outfile:
            outfile.parent.mkdir(parents=True, exist_ok=True)
            with open(outfile, "w", encoding="utf-8", newline="\n") as f:
                f.write(data + "\n")
        else:
            sys.stdout.write(data + "\n")
        raise typer.Exit()

    if not hits:
        typer.echo("No results.")
        return

    typer.echo(f"strategy={response.strategy.value if response.strategy else '-'}")
    for i, h in enumerate(hits, start=1):
        typer.echo(f"[{i}] score={h.relevance_score:g}  {h.domain}  {h.url}")
        content_line = (h.content or "").strip().replace("\n", " ")
        if len(content_line) > 600:
            content_line = content_line[:600] + "..."
        typer.echo(content_line)
        typer.echo("-" * 80)


@app.command("preload")
def preload_cmd(
    domain: list[str] = typer.Option(  # noqa: B008 - Typer keeps options in signature
        None, "--domain", "-d", help="Domain to warm (repeatable); default all."
    ),
) -> None:
    """Fetch documentation into the cache and report per-domain status."""
    setup_logging(_log_level(False))
    svc = build_docs_use_case()
    results = asyncio.run(svc.preload(domain or None))
    failed = {r.domain: r.error for r in results if not r.success}

    for name, status in svc.get_cache_status().items():
        if status.loaded and status.age is not None:
            line = f"{name}: loaded (age {status.age.total_seconds():.0f}s)"
        elif name in failed:
            line = f"{name}: failed ({failed[name]})"
        else:
            line = f"{name}: not loaded"
        typer.echo(line)

    if failed:
        raise typer.Exit(code=1)


@app.command("domains")
def domains_cmd() -> None:
    """List the registered documentation domains."""
    svc = build_docs_use_case()
    for name in svc.get_available_domains():
        source = get_source(name)
        typer.echo(f"{name}\t{source.url}\t{source.description}")


def main() -> int:
    try:
        app()
        return 0
    except ConfigurationError as ce:
        typer.secho(f"Config error: {ce}", fg=typer.colors.RED)
        return 2
    except DocsError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED)
        return 1


if __name__ == "__main__":
    sys.exit(main())
