"""``progressgate graph <corpus> [entity-id]`` -- Inspect the dependency graph.

Without an entity id, prints graph statistics. With one, prints the
entity's full prerequisite chain, its dependents, its depth and any cycles
it takes part in.

Exit Codes:
    0 -- Success.
    1 -- The entity id is not in the corpus.
    2 -- Corpus file could not be loaded.
"""

from __future__ import annotations

import sys
from dataclasses import asdict

import click

from progressgate.cli.output import (
    echo_json,
    print_dependency_info,
    print_graph_stats,
    report_error,
)
from progressgate.core.corpus import load_corpus, normalize_id
from progressgate.core.validation import ValidationService
from progressgate.exceptions import ProgressGateError


@click.command("graph")
@click.argument("corpus_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("entity_id", required=False)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def graph_command(corpus_path: str, entity_id: str | None, output_format: str) -> None:
    """Show dependency graph statistics, or the chain of ENTITY_ID."""
    try:
        corpus = load_corpus(corpus_path)
    except ProgressGateError as exc:
        report_error(str(exc), output_format)
        sys.exit(2)

    service = ValidationService(corpus)

    if entity_id is None:
        stats = service.graph.stats()
        if output_format == "json":
            echo_json(asdict(stats))
        else:
            print_graph_stats(stats)
        sys.exit(0)

    entity_id = normalize_id(entity_id)
    if not service.graph.has_entity(entity_id):
        report_error(f"Entity '{entity_id}' is not in the corpus", output_format)
        sys.exit(1)

    info = service.dependency_info(entity_id)
    if output_format == "json":
        echo_json({
            "entity_id": info.entity_id,
            "depth": info.depth,
            "dependencies": info.dependencies,
            "dependents": info.dependents,
            "cycles": [list(c.path) for c in info.cycles],
        })
    else:
        print_dependency_info(info)
    sys.exit(0)
