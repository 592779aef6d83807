"""``progressgate validate <corpus>`` -- Statically validate an entity corpus.

Runs every corpus check (cycles, dangling prerequisites, stage and tool
gating, material reachability, bootstrap economy) and prints the findings.

Exit Codes:
    0 -- Corpus is valid (no errors; no warnings with ``--strict``).
    1 -- Corpus has errors (or warnings with ``--strict``).
    2 -- Corpus or rule file could not be loaded.
"""

from __future__ import annotations

import sys

import click

from progressgate.cli.output import echo_json, print_corpus_report, report_error
from progressgate.config import RuleTables, load_rules
from progressgate.core.analyzer import CorpusValidator
from progressgate.core.corpus import load_corpus
from progressgate.exceptions import ProgressGateError


@click.command("validate")
@click.argument("corpus_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--rules", "rules_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file overriding the default rule tables.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
@click.option("--strict", is_flag=True, help="Treat warnings as failures.")
def validate_command(
    corpus_path: str, rules_path: str | None, output_format: str, strict: bool
) -> None:
    """Validate the entity corpus at CORPUS_PATH.

    Exit code 0 if the corpus is valid, 1 if it has errors.
    """
    try:
        rules = load_rules(rules_path) if rules_path else RuleTables()
        corpus = load_corpus(corpus_path)
    except ProgressGateError as exc:
        report_error(str(exc), output_format)
        sys.exit(2)

    report = CorpusValidator(corpus, rules).validate_all()

    if output_format == "json":
        echo_json(report.to_dict())
    else:
        print_corpus_report(report, len(corpus))

    failed = not report.valid or (strict and bool(report.warnings))
    sys.exit(1 if failed else 0)
