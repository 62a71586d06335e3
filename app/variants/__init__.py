"""Variant engine: option sets, combinations, reconciliation and buyer selection.

Pure in-memory logic with no Flask or database imports. Callers persist what
it returns.
"""
from app.variants.authoring import ProductDraft
from app.variants.combinations import count_combinations, generate
from app.variants.errors import (
    MalformedOptionSetError,
    TooManyCombinationsError,
    UnknownVariantError,
    VariantEngineError,
)
from app.variants.options import OptionType, make_option
from app.variants.reconciler import Variant, reconcile
from app.variants.selection import available_values, resolve_variant, select_value
from app.variants.summary import summarize

__all__ = [
    "MalformedOptionSetError",
    "OptionType",
    "ProductDraft",
    "TooManyCombinationsError",
    "UnknownVariantError",
    "Variant",
    "VariantEngineError",
    "available_values",
    "count_combinations",
    "generate",
    "make_option",
    "reconcile",
    "resolve_variant",
    "select_value",
    "summarize",
]
