# catalog/services/modifier_rules.py

"""
MODIFIER RULES (DOMAIN)

Composition rules between a product's modifier groups and a customer's selections.

DESIGN PRINCIPLES:
- No database access
- Selections are a mapping: group id -> collection of option ids
- Canonical form: groups sorted, option ids de-duplicated + sorted, empty groups dropped
"""

from __future__ import annotations

from typing import Iterable, Mapping

from catalog.services.catalog_snapshot import ModifierGroupSpec
from catalog.services.exceptions import ModifierSelectionError

Selections = dict[str, tuple[str, ...]]


def normalize_selections(selections: Mapping[str, Iterable[str]] | None) -> Selections:
    """
    Canonical selection map.

    {"sugar": ["less"], "addons": ["shot", "oat", "shot"], "size": []}
      -> {"addons": ("oat", "shot"), "sugar": ("less",)}
    """
    if not selections:
        return {}

    if not isinstance(selections, Mapping):
        raise ModifierSelectionError("Modifier selections must be a mapping of group -> options")

    out: Selections = {}
    for raw_group, raw_options in selections.items():
        group_id = str(raw_group).strip()
        if not group_id:
            continue

        if raw_options is None:
            continue
        if isinstance(raw_options, str):
            raw_options = [raw_options]

        option_ids = sorted({str(o).strip() for o in raw_options if str(o).strip()})
        if option_ids:
            out[group_id] = tuple(option_ids)

    return dict(sorted(out.items()))


def validate_selections(groups: Iterable[ModifierGroupSpec], selections: Selections) -> None:
    """
    Commit-time validation (when the item goes into the cart, not on every toggle).

    - every selected group/option must exist on the product
    - single groups: at most one option
    - required groups: at least one option
    """
    groups = list(groups)
    by_id = {g.id: g for g in groups}

    for group_id, option_ids in selections.items():
        group = by_id.get(group_id)
        if group is None:
            raise ModifierSelectionError(f"Unknown modifier group '{group_id}'")

        for option_id in option_ids:
            if group.option(option_id) is None:
                raise ModifierSelectionError(
                    f"Unknown option '{option_id}' for modifier group '{group.name}'"
                )

        if group.is_single and len(option_ids) > 1:
            raise ModifierSelectionError(f"Choose only one option for '{group.name}'")

    for group in groups:
        if group.is_required and not selections.get(group.id):
            raise ModifierSelectionError(f"Please choose an option for '{group.name}'")


def modifier_extra(groups: Iterable[ModifierGroupSpec], selections: Selections) -> int:
    """Sum of additional prices of the selected options (per unit)."""
    total = 0
    for group in groups:
        for option_id in selections.get(group.id, ()):
            option = group.option(option_id)
            if option is not None:
                total += int(option.price)
    return total


def describe_selections(groups: Iterable[ModifierGroupSpec], selections: Selections) -> list[dict]:
    """
    Human-readable lines for receipts / order summaries:
    [{"group": "Milk", "options": "Oat", "extra": 5000}, ...]
    """
    lines = []
    for group in groups:
        chosen = [group.option(o) for o in selections.get(group.id, ())]
        chosen = [o for o in chosen if o is not None]
        if not chosen:
            continue
        lines.append(
            {
                "group": group.name,
                "options": ", ".join(o.name for o in chosen),
                "extra": sum(int(o.price) for o in chosen),
            }
        )
    return lines
