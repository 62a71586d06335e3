"""Storefront option selection for a published product.

Selections arrive keyed by option name (query string or JSON body) and are
turned into positional tuples for the variant engine here.
"""
import logging
from app.services.product_service import load_options, load_variants
from app.variants.options import option_index
from app.variants.selection import (
    available_values,
    empty_selection,
    is_in_stock,
    resolve_variant,
    select_value,
    toggle_value,
    value_states,
)
from app.variants.summary import variant_row

logger = logging.getLogger(__name__)


def selection_from_mapping(options, mapping):
    """Positional selection from ``{option name: value}``.

    Unknown option names, blank values and values the option does not
    declare are ignored.
    """
    selection = list(empty_selection(len(options)))
    for name, value in (mapping or {}).items():
        i = option_index(options, name)
        if i is not None and value and value in options[i].values:
            selection[i] = value
    return tuple(selection)


def selection_to_mapping(options, selection):
    return {option.name: value for option, value in zip(options, selection)}


def normalize_selection(variants, selection):
    """Apply chosen values in option order, clearing impossible pairs.

    When two chosen values cannot go together the later option wins.
    """
    normalized = empty_selection(len(selection))
    for i, value in enumerate(selection):
        if value is not None:
            normalized = select_value(variants, normalized, i, value)
    return normalized


def build_view(options, variants, selection, stock_signal="available"):
    """Everything the option pickers need for one selection state."""
    option_views = []
    for i, option in enumerate(options):
        admissible = available_values(i, variants, selection, stock_signal)
        option_views.append({
            "id": option.id,
            "name": option.name,
            "role": option.role,
            "selected": selection[i],
            "values": value_states(option, i, variants, selection, stock_signal),
            "admissible": [
                {"value": a.value, "in_stock": a.in_stock} for a in admissible
            ],
        })

    variant = resolve_variant(variants, selection)
    return {
        "selection": selection_to_mapping(options, selection),
        "options": option_views,
        "variant": variant_row(variant, options) if variant else None,
        "purchasable": bool(variant) and is_in_stock(variant, stock_signal),
        "has_variants": bool(variants),
    }


def product_view(product, mapping=None, stock_signal="available"):
    options = load_options(product)
    variants = load_variants(product, options)
    selection = normalize_selection(variants, selection_from_mapping(options, mapping))
    return build_view(options, variants, selection, stock_signal)


def apply_click(product, mapping, option_name, value, stock_signal="available"):
    """Apply one buyer click to a selection and return the new view.

    Returns None if ``option_name`` is not an option of the product or
    ``value`` is not one of its values. An empty value clears the option.
    """
    options = load_options(product)
    i = option_index(options, option_name)
    if i is None:
        return None
    if value and value not in options[i].values:
        return None

    variants = load_variants(product, options)
    selection = normalize_selection(variants, selection_from_mapping(options, mapping))
    selection = toggle_value(variants, selection, i, value or None)
    logger.debug("Selection for %s is now %s", product.style_id, selection)
    return build_view(options, variants, selection, stock_signal)
