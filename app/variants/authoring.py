"""Immutable authoring state for a product's options and variants.

Each operation returns a new ``ProductDraft``. Operations that change the
option set regenerate the combinations and reconcile them against the
current variants, so the working set always matches the option set.
"""
import logging
from dataclasses import dataclass, replace

from app.variants.combinations import DEFAULT_MAX_COMBINATIONS, generate
from app.variants.errors import MalformedOptionSetError, UnknownVariantError
from app.variants.options import (
    OptionType,
    placeholder_option,
    role_for_name,
    validate_option,
    validate_option_set,
    validate_role,
)
from app.variants.reconciler import EDITABLE_FIELDS, reconcile_report
from app.variants.summary import summarize

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on", "y"}


def _coerce_field(field, value):
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"{field!r} is not an editable variant field")
    if field == "available":
        if isinstance(value, str):
            return value.strip().lower() in _TRUTHY
        return bool(value)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class ProductDraft:
    options: tuple = ()
    variants: tuple = ()
    pending: OptionType = None
    excluded: tuple = ()
    max_combinations: int = DEFAULT_MAX_COMBINATIONS

    @classmethod
    def from_existing(cls, options, variants=(), excluded=(),
                      max_combinations=DEFAULT_MAX_COMBINATIONS):
        """Build a draft from persisted options and variants.

        Persisted variants are reconciled against the persisted options, so
        stale rows fall out and missing rows are scaffolded.
        """
        draft = cls(
            variants=tuple(variants),
            excluded=tuple(tuple(c) for c in excluded),
            max_combinations=max_combinations,
        )
        return draft._regenerate(tuple(options))

    # -- read-only views ---------------------------------------------------

    @property
    def combinations(self):
        skip = set(self.excluded)
        return [
            c for c in generate(self.options, self.max_combinations)
            if c not in skip
        ]

    def find_option(self, option_id):
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def find_variant(self, variant_id):
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None

    def summary(self):
        return summarize(self.variants, self.options)

    # -- option editing ----------------------------------------------------

    def add_option(self, name="", values=None, role=None):
        """Open a new, unsaved option. Replaces any option already being edited."""
        draft = replace(self, pending=placeholder_option())
        if name or values or role:
            draft = draft.edit_pending(name=name or None, values=values or None, role=role)
        return draft

    def edit_option(self, option_id):
        """Reopen a saved option for editing; saving it replaces it in place."""
        option = self.find_option(option_id)
        if option is None:
            raise MalformedOptionSetError(f"Unknown option: {option_id!r}")
        return replace(self, pending=replace(option, saved=False))

    def edit_pending(self, name=None, values=None, role=None):
        if self.pending is None:
            raise MalformedOptionSetError("No option is being edited.")
        changes = {}
        if name is not None:
            changes["name"] = name.strip()
            if role is None and not self.find_option(self.pending.id):
                changes["role"] = role_for_name(name)
        if values is not None:
            changes["values"] = tuple(values)
        if role is not None:
            changes["role"] = validate_role(role)
        return replace(self, pending=replace(self.pending, **changes))

    def choose_attribute(self, name, values):
        """Fill the pending option from an attribute catalog entry."""
        return self.edit_pending(name=name, values=values)

    def cancel_option(self):
        return replace(self, pending=None)

    def save_option(self):
        if self.pending is None:
            raise MalformedOptionSetError("No option is being edited.")
        option = validate_option(replace(self.pending, saved=True))

        options = list(self.options)
        for i, existing in enumerate(options):
            if existing.id == option.id:
                options[i] = option
                break
        else:
            options.append(option)

        logger.info("Saved option %r with %d values", option.name, len(option.values))
        return replace(self._regenerate(tuple(options)), pending=None)

    def update_option_values(self, option_id, values):
        return self._replace_option(option_id, values=tuple(values))

    def rename_option(self, option_id, name):
        return self._replace_option(option_id, name=(name or "").strip())

    def remove_option(self, option_id):
        """Drop an option. Every variant changes arity, so all rows are rebuilt."""
        if self.find_option(option_id) is None:
            raise MalformedOptionSetError(f"Unknown option: {option_id!r}")
        options = tuple(o for o in self.options if o.id != option_id)
        return self._regenerate(options, excluded=())

    # -- variant editing ---------------------------------------------------

    def edit_variant_field(self, variant_id, field, value):
        return self.edit_variant(variant_id, **{field: value})

    def edit_variant(self, variant_id, **fields):
        changes = {name: _coerce_field(name, value) for name, value in fields.items()}
        variants = list(self.variants)
        for i, variant in enumerate(variants):
            if variant.id == variant_id:
                variants[i] = replace(variant, **changes)
                return replace(self, variants=tuple(variants))
        raise UnknownVariantError(variant_id)

    def set_color_image(self, variant_id, url):
        return self.edit_variant_field(variant_id, "color_image", url)

    def remove_combination(self, combination):
        """Take one combination out of the working set until it is restored."""
        key = tuple(combination)
        if key in self.excluded:
            return self
        if key not in generate(self.options, self.max_combinations):
            return self
        return replace(
            self,
            variants=tuple(v for v in self.variants if v.combination != key),
            excluded=self.excluded + (key,),
        )

    def restore_combination(self, combination):
        key = tuple(combination)
        if key not in self.excluded:
            return self
        excluded = tuple(c for c in self.excluded if c != key)
        return self._regenerate(self.options, excluded=excluded)

    # -- internals ---------------------------------------------------------

    def _replace_option(self, option_id, **changes):
        options = list(self.options)
        for i, option in enumerate(options):
            if option.id == option_id:
                options[i] = replace(option, **changes)
                return self._regenerate(tuple(options))
        raise MalformedOptionSetError(f"Unknown option: {option_id!r}")

    def _regenerate(self, options, excluded=None):
        options = validate_option_set(options)
        all_combinations = generate(options, self.max_combinations)
        present = set(all_combinations)
        if excluded is None:
            excluded = self.excluded
        # Exclusions only live as long as their combination does.
        excluded = tuple(c for c in excluded if c in present)
        skip = set(excluded)

        result = reconcile_report(
            [c for c in all_combinations if c not in skip], self.variants
        )
        logger.debug("Regenerated %d options: %s", len(options), result.summary)
        return replace(
            self,
            options=options,
            variants=tuple(result.variants),
            excluded=excluded,
        )
