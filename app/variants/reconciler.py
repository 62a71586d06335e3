"""Merge freshly generated combinations with previously known variants.

Matching policy: composite key only. A variant matches a combination when the
two tuples have the same length and the same string at every position. Values
are compared exactly, so renaming "red" to "Red" orphans the old variant.

- Matching combination -> KEEP (id and editable fields carried forward)
- New combination -> ADD (scaffolded with defaults)
- Variant whose combination is gone -> DROP
"""
import logging
import uuid
from dataclasses import dataclass, field, replace

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("price", "sku", "inventory", "barcode", "available", "color_image")


@dataclass(frozen=True)
class Variant:
    id: str
    combination: tuple
    price: str = ""
    sku: str = ""
    inventory: str = ""
    barcode: str = ""
    available: bool = False
    color_image: str = ""

    @property
    def title(self):
        return self.combination[0] if self.combination else ""


@dataclass
class ReconciliationResult:
    """Outcome of one reconciliation pass."""
    variants: list = field(default_factory=list)
    kept: list = field(default_factory=list)
    added: list = field(default_factory=list)
    dropped: list = field(default_factory=list)

    @property
    def summary(self):
        return {
            "kept": len(self.kept),
            "added": len(self.added),
            "dropped": len(self.dropped),
        }


def new_variant_id():
    return uuid.uuid4().hex


def same_combination(a, b):
    return len(a) == len(b) and all(x == y for x, y in zip(a, b))


def scaffold_variant(combination, id_factory=new_variant_id):
    return Variant(id=id_factory(), combination=tuple(combination))


def _index_by_combination(variants):
    # First variant wins when two share a combination.
    index = {}
    for variant in variants:
        index.setdefault(tuple(variant.combination), variant)
    return index


def reconcile_report(combinations, existing_variants, id_factory=new_variant_id):
    existing_variants = list(existing_variants)
    index = _index_by_combination(existing_variants)
    result = ReconciliationResult()
    matched = set()

    for combination in combinations:
        key = tuple(combination)
        existing = index.get(key)
        if existing is not None:
            variant = replace(existing, combination=key)
            result.kept.append(variant)
            matched.add(id(existing))
        else:
            variant = scaffold_variant(key, id_factory)
            result.added.append(variant)
        result.variants.append(variant)

    result.dropped = [v for v in existing_variants if id(v) not in matched]
    logger.debug("Reconciled variants: %s", result.summary)
    return result


def reconcile(combinations, existing_variants, id_factory=new_variant_id):
    """Return one variant per combination, in combination order.

    Existing data is carried forward for combinations that still exist,
    defaults are scaffolded for new ones, and variants whose combination is
    no longer generated are left out. Inputs are never modified.
    """
    return reconcile_report(combinations, existing_variants, id_factory).variants
