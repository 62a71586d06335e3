"""Buyer-side option filtering.

A selection is a tuple with one slot per option position, ``None`` meaning
nothing is chosen there. Filtering reads variants and selections only and
never modifies them.

Values have three states for the buyer:

- IN_STOCK: at least one matching variant is in stock
- OUT_OF_STOCK: matching variants exist but none is in stock; shown disabled
- UNAVAILABLE: no matching variant at all; not offered
"""
import logging
import re
from dataclasses import dataclass

from app.variants.reconciler import same_combination

logger = logging.getLogger(__name__)

IN_STOCK = "in_stock"
OUT_OF_STOCK = "out_of_stock"
UNAVAILABLE = "unavailable"

STOCK_SIGNALS = ("available", "inventory")

_LEADING_INT = re.compile(r"\s*([-+]?\d+)")


@dataclass(frozen=True)
class AdmissibleValue:
    value: str
    in_stock: bool


def empty_selection(arity):
    return (None,) * arity


def parse_quantity(raw):
    """Leading integer of an inventory string; 0 when there is none."""
    match = _LEADING_INT.match(str(raw if raw is not None else ""))
    return int(match.group(1)) if match else 0


def is_in_stock(variant, stock_signal="available"):
    if stock_signal == "available":
        return bool(variant.available)
    if stock_signal == "inventory":
        return parse_quantity(variant.inventory) > 0
    raise ValueError(f"Unknown stock signal: {stock_signal!r}")


def _agrees(variant, selection, skip_index):
    combination = variant.combination
    for position, chosen in enumerate(selection):
        if position == skip_index or chosen is None:
            continue
        if position >= len(combination) or combination[position] != chosen:
            return False
    return True


def available_values(option_index, variants, selection, stock_signal="available"):
    """Admissible values at ``option_index`` given the other selected positions.

    Values come back in the order they first appear among the matching
    variants. The selection at ``option_index`` itself is ignored.
    """
    found = {}
    for variant in variants:
        if option_index >= len(variant.combination):
            continue
        if not _agrees(variant, selection, option_index):
            continue
        value = variant.combination[option_index]
        found[value] = found.get(value, False) or is_in_stock(variant, stock_signal)
    return [AdmissibleValue(value, in_stock) for value, in_stock in found.items()]


def color_images(option_index, variants):
    """First non-empty ``color_image`` for each value at ``option_index``."""
    images = {}
    for variant in variants:
        if option_index >= len(variant.combination) or not variant.color_image:
            continue
        images.setdefault(variant.combination[option_index], variant.color_image)
    return images


def value_states(option, option_index, variants, selection, stock_signal="available"):
    """Every declared value of ``option`` with its buyer-facing state.

    Values of a color option also carry ``image`` and ``has_image``.
    """
    admissible = {
        a.value: a.in_stock
        for a in available_values(option_index, variants, selection, stock_signal)
    }
    images = color_images(option_index, variants) if option.is_color else None
    states = []
    for value in option.values:
        if value not in admissible:
            state = UNAVAILABLE
        elif admissible[value]:
            state = IN_STOCK
        else:
            state = OUT_OF_STOCK
        entry = {
            "value": value,
            "state": state,
            "selected": selection[option_index] == value,
        }
        if images is not None:
            entry["image"] = images.get(value, "")
            entry["has_image"] = value in images
        states.append(entry)
    return states


def select_value(variants, selection, option_index, value):
    """Return a new selection with ``value`` chosen at ``option_index``.

    Any other chosen value that no variant pairs with the new selection is
    cleared. Out-of-stock pairs are kept; only absent ones are cleared.
    Passing ``None`` clears the position.
    """
    updated = list(selection)
    updated[option_index] = value
    if value is None:
        return tuple(updated)

    for position, chosen in enumerate(updated):
        if position == option_index or chosen is None:
            continue
        admissible = {a.value for a in available_values(position, variants, updated)}
        if chosen not in admissible:
            logger.debug(
                "Clearing %r at position %d: no variant with %r at position %d",
                chosen, position, value, option_index,
            )
            updated[position] = None
    return tuple(updated)


def toggle_value(variants, selection, option_index, value):
    """Choosing the value that is already selected clears it."""
    if selection[option_index] == value:
        return select_value(variants, selection, option_index, None)
    return select_value(variants, selection, option_index, value)


def resolve_variant(variants, selection):
    """The variant matching a complete selection, or None."""
    if any(chosen is None for chosen in selection):
        return None
    for variant in variants:
        if same_combination(variant.combination, tuple(selection)):
            return variant
    return None
