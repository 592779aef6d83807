"""``progressgate check <corpus> <entity-id>`` -- Resolve one entity's prerequisites.

Exit Codes:
    0 -- All prerequisites are satisfied.
    1 -- At least one prerequisite is unmet (or the entity is unknown).
    2 -- Corpus, snapshot or rule file could not be loaded.
"""

from __future__ import annotations

import sys

import click

from progressgate.cli.output import echo_json, print_prerequisite_result, report_error
from progressgate.config import RuleTables, load_rules
from progressgate.core.corpus import load_corpus, normalize_id
from progressgate.core.resolver import PrerequisiteResolver, load_snapshot
from progressgate.exceptions import ProgressGateError


@click.command("check")
@click.argument("corpus_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("entity_id")
@click.option("--snapshot", "snapshot_path", required=True,
              type=click.Path(exists=True, dir_okay=False),
              help="YAML/JSON progression snapshot.")
@click.option("--rules", "rules_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file overriding the default rule tables.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def check_command(
    corpus_path: str,
    entity_id: str,
    snapshot_path: str,
    rules_path: str | None,
    output_format: str,
) -> None:
    """Check whether ENTITY_ID is unlocked for the given snapshot."""
    try:
        rules = load_rules(rules_path) if rules_path else RuleTables()
        corpus = load_corpus(corpus_path)
        snapshot = load_snapshot(snapshot_path)
    except ProgressGateError as exc:
        report_error(str(exc), output_format)
        sys.exit(2)

    entity_id = normalize_id(entity_id)
    result = PrerequisiteResolver(corpus, rules).check_entity(entity_id, snapshot)

    if output_format == "json":
        echo_json({"entity_id": entity_id, **result.to_dict()})
    else:
        print_prerequisite_result(entity_id, result)

    sys.exit(0 if result.satisfied else 1)
