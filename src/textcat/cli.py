"""Command-line interface for textcat.

Provides ``train``, ``classify``, ``categories`` and ``patterns`` commands
with rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    textcat train profiles.tcat 1 english.txt
    textcat train profiles.tcat 2 french.txt
    textcat classify profiles.tcat letter.txt
    echo "Quelle belle journée ..." | textcat classify profiles.tcat -c 1 -c 2
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .classifier import TextClassifier
from .codec import load_profiles, save_profiles
from .config import ClassifierConfig
from .errors import AmbiguousError, ClassificationError, CorruptProfileError
from .models import ClassificationResult, ExtractionMode
from .patterns import extract_patterns
from .profiles import ProfileRegistry
from .sources import read_source

console = Console()
err_console = Console(stderr=True)

EXIT_CLASSIFICATION = 1
EXIT_CORRUPT = 2


def _load_registry(path: Path, missing_ok: bool = False) -> ProfileRegistry:
    if missing_ok and not path.exists():
        return ProfileRegistry()
    try:
        return load_profiles(path)
    except CorruptProfileError as e:
        err_console.print(f"[bold red]CorruptProfile:[/] {path}: {e}")
        sys.exit(EXIT_CORRUPT)


def _read(file: Path) -> str:
    try:
        return read_source(file)
    except (ValueError, ImportError) as e:
        err_console.print(f"[bold red]Error:[/] {e}")
        sys.exit(EXIT_CLASSIFICATION)


@click.group()
@click.version_option(package_name="textcat")
@click.option("--log-level", default="WARNING", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Logging verbosity.")
def main(log_level: str) -> None:
    """N-gram text categorization.

    Train category profiles from sample text and identify the category
    (language, topic, ...) of new documents.
    """
    load_dotenv()
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("profiles", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("category_id", type=int)
@click.argument("files", nargs=-1, required=True,
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
def train(profiles: Path, category_id: int, files: tuple[Path, ...]) -> None:
    """Train CATEGORY_ID from FILES and store it in PROFILES.

    The profile file is created if needed; an existing profile for the
    category is replaced.

    Example: textcat train profiles.tcat 1 english.txt
    """
    registry = _load_registry(profiles, missing_ok=True)
    samples = [_read(f) for f in files]

    profile = registry.train(category_id, *samples)
    if profile is None:
        err_console.print(f"[yellow]No usable text for category {category_id}; nothing saved.[/]")
        sys.exit(EXIT_CLASSIFICATION)

    save_profiles(registry, profiles)
    console.print(
        f"Trained category [bold]{category_id}[/] with {len(profile)} patterns "
        f"from {len(files)} file(s) -> {profiles}"
    )


@main.command()
@click.argument("profiles", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("file", required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--category", "-c", "categories", type=int, multiple=True,
              help="Category to consider (repeatable). Defaults to all.")
@click.option("--threshold", type=float, default=None,
              help="Candidate multiplier on the best score.")
@click.option("--max-candidates", type=int, default=None,
              help="Most candidates reported before giving up as ambiguous.")
@click.option("--min-doc-size", type=int, default=None,
              help="Minimum number of letters in the document.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def classify(
    profiles: Path,
    file: Path | None,
    categories: tuple[int, ...],
    threshold: float | None,
    max_candidates: int | None,
    min_doc_size: int | None,
    output: str,
) -> None:
    """Classify FILE (or standard input) against PROFILES.

    Settings come from TEXTCAT_* environment variables (or a .env file)
    and can be overridden with options.

    Example: textcat classify profiles.tcat letter.txt
    """
    registry = _load_registry(profiles)
    if categories:
        registry.enable(*categories)
    else:
        registry.enable_all()

    try:
        config = ClassifierConfig()
        classifier = TextClassifier(registry, config)
        if threshold is not None:
            classifier.threshold_value = threshold
        if max_candidates is not None:
            classifier.max_candidates = max_candidates
        if min_doc_size is not None:
            classifier.min_doc_size = min_doc_size
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    document = _read(file) if file else click.get_text_stream("stdin").read()

    try:
        result = classifier.classify(document)
    except ClassificationError as e:
        if output == "json":
            payload = {"error": e.kind.value, "message": str(e)}
            if isinstance(e, AmbiguousError):
                payload["result"] = e.result.to_dict()
            click.echo(json.dumps(payload, indent=2))
        else:
            err_console.print(f"[bold red]{e.kind.value}:[/] {e}")
            if isinstance(e, AmbiguousError):
                _render_result(e.result)
        sys.exit(EXIT_CLASSIFICATION)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _render_result(result)


@main.command()
@click.argument("profiles", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def categories(profiles: Path, output: str) -> None:
    """List the categories stored in PROFILES."""
    registry = _load_registry(profiles)
    records = [registry.get_category(cid) for cid in registry.available_categories()]

    if output == "json":
        click.echo(json.dumps([r.to_dict() for r in records if r], indent=2))
        return

    table = Table(title=f"Categories: {profiles.name}")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Patterns", justify="right")
    for record in records:
        if record:
            table.add_row(str(record.category_id), str(len(record.profile or ())))
    console.print(table)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--mode", type=click.Choice([m.value for m in ExtractionMode]),
              default=ExtractionMode.CODEPOINTS.value, help="Extraction mode.")
@click.option("--top", "-n", type=int, default=20, show_default=True,
              help="Number of patterns to show.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def patterns(file: Path, mode: str, top: int, output: str) -> None:
    """Show the most frequent n-grams of FILE."""
    ranked = extract_patterns(_read(file), ExtractionMode(mode))[: max(top, 0)]

    if output == "json":
        click.echo(json.dumps([p.to_dict() for p in ranked], indent=2, ensure_ascii=False))
        return

    table = Table(title=f"N-grams: {file.name} ({mode})")
    table.add_column("Rank", justify="right", width=6)
    table.add_column("N-gram", style="cyan")
    table.add_column("Count", justify="right")
    for p in ranked:
        table.add_row(str(p.rank), p.to_dict()["gram"], str(p.count))
    console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_result(result: ClassificationResult) -> None:
    """Render a ClassificationResult as a panel and a score table."""
    best = result.best if result.best is not None else "-"
    console.print(Panel(
        f"Best match: [bold green]{best}[/]\n"
        f"Candidates: {', '.join(str(c) for c in result.categories) or '-'}",
        title="Classification",
        border_style="blue",
    ))

    table = Table(show_lines=False)
    table.add_column("Category", justify="right", style="cyan")
    table.add_column("Distance", justify="right")
    table.add_column("Candidate", justify="center")
    candidates = set(result.categories)
    for cid, score in sorted(result.scores.items(), key=lambda x: (x[1], x[0])):
        table.add_row(str(cid), str(score), "✔" if cid in candidates else "")
    console.print(table)


if __name__ == "__main__":
    main()
