"""``progressgate can-perform <corpus>`` -- Decide whether an action can be performed.

Builds a ``GameAction`` from the options, validates it against the snapshot
with ``ValidationService`` and prints the categorised verdict.

Exit Codes:
    0 -- The action can be performed.
    1 -- The action is denied.
    2 -- Corpus, snapshot or rule file could not be loaded.
"""

from __future__ import annotations

import sys

import click

from progressgate.cli.output import echo_json, print_action_result, report_error
from progressgate.config import RuleTables, load_rules
from progressgate.core.corpus import load_corpus
from progressgate.core.resolver import load_snapshot
from progressgate.core.validation import ActionKind, GameAction, ValidationService
from progressgate.exceptions import ProgressGateError


def _parse_materials(values: tuple[str, ...]) -> dict[str, int]:
    """Parse ``name=amount`` pairs into a cost mapping."""
    costs: dict[str, int] = {}
    for value in values:
        name, sep, amount = value.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=AMOUNT, got {value!r}")
        try:
            costs[name.strip()] = int(amount)
        except ValueError:
            raise click.BadParameter(f"amount in {value!r} is not an integer") from None
    return costs


@click.command("can-perform")
@click.argument("corpus_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--snapshot", "snapshot_path", required=True,
              type=click.Path(exists=True, dir_okay=False),
              help="YAML/JSON progression snapshot.")
@click.option("--kind", required=True,
              type=click.Choice([k.value for k in ActionKind]),
              help="Action kind.")
@click.option("--target", default=None, help="Target entity id or crop type.")
@click.option("--screen", default=None, help="Screen the action must be performed from.")
@click.option("--energy", default=0, show_default=True, help="Energy cost.")
@click.option("--gold", default=0, show_default=True, help="Gold cost.")
@click.option("--water", default=0, show_default=True, help="Water cost.")
@click.option("--material", "materials", multiple=True, metavar="NAME=AMOUNT",
              help="Material cost; repeatable.")
@click.option("--rules", "rules_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML file overriding the default rule tables.")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text).",
)
def can_perform_command(
    corpus_path: str,
    snapshot_path: str,
    kind: str,
    target: str | None,
    screen: str | None,
    energy: int,
    gold: int,
    water: int,
    materials: tuple[str, ...],
    rules_path: str | None,
    output_format: str,
) -> None:
    """Check whether an action of KIND can be performed from the snapshot.

    Exit code 0 if the action is allowed, 1 if it is denied.
    """
    material_costs = _parse_materials(materials)
    try:
        rules = load_rules(rules_path) if rules_path else RuleTables()
        corpus = load_corpus(corpus_path)
        snapshot = load_snapshot(snapshot_path)
    except ProgressGateError as exc:
        report_error(str(exc), output_format)
        sys.exit(2)

    action_kind = ActionKind(kind)
    action = GameAction(
        id=f"{kind}_{target}" if target else kind,
        kind=action_kind,
        target=target,
        screen=screen,
        energy_cost=energy,
        gold_cost=gold,
        water_cost=water,
        material_costs=material_costs,
    )
    result = ValidationService(corpus, rules).can_perform(action, snapshot)

    if output_format == "json":
        echo_json({"action": action.id, **result.to_dict()})
    else:
        print_action_result(action.id, result)

    sys.exit(0 if result.can_perform else 1)
