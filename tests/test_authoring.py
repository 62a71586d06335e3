"""Tests for the product draft authoring state."""
import pytest

from app.variants.authoring import ProductDraft
from app.variants.errors import (
    MalformedOptionSetError,
    TooManyCombinationsError,
    UnknownVariantError,
)
from app.variants.options import make_option
from app.variants.reconciler import Variant


def _draft_with_color_size():
    return (
        ProductDraft()
        .add_option("Color", ["Red", "Blue"])
        .save_option()
        .add_option("Size", ["S", "M"])
        .save_option()
    )


def test_add_and_save_options_generate_variants():
    draft = _draft_with_color_size()

    assert [o.name for o in draft.options] == ["Color", "Size"]
    assert [o.role for o in draft.options] == ["color", "size"]
    assert [v.combination for v in draft.variants] == [
        ("Red", "S"), ("Red", "M"), ("Blue", "S"), ("Blue", "M"),
    ]
    assert draft.pending is None


def test_pending_option_does_not_change_variants():
    draft = ProductDraft().add_option("Color", ["Red"]).save_option()
    editing = draft.add_option()

    assert editing.pending.values == ("",)
    assert editing.variants == draft.variants
    assert editing.cancel_option().pending is None


def test_saving_unnamed_option_fails():
    with pytest.raises(MalformedOptionSetError):
        ProductDraft().add_option().save_option()


@pytest.mark.parametrize("role", ["banana", "Color", "  "])
def test_unknown_role_is_rejected_while_authoring(role):
    with pytest.raises(MalformedOptionSetError):
        ProductDraft().add_option("Shade", ["a"], role=role).save_option()

    with pytest.raises(MalformedOptionSetError):
        ProductDraft().add_option("Shade", ["a"]).edit_pending(role=role)


def test_explicit_role_overrides_name():
    draft = ProductDraft().add_option("Shade", ["Red"], role="color").save_option()

    assert draft.options[0].is_color
    assert draft.summary()["show_color_image"] is True


def test_save_without_pending_fails():
    with pytest.raises(MalformedOptionSetError):
        ProductDraft().save_option()


def test_choose_attribute_fills_pending_option():
    draft = ProductDraft().add_option().choose_attribute("Size", ["S", "M", "L"])

    assert draft.pending.name == "Size"
    assert draft.pending.role == "size"
    assert len(draft.save_option().variants) == 3


def test_edit_variant_field_and_preserve_on_new_value():
    draft = _draft_with_color_size()
    red_s = draft.variants[0]
    draft = draft.edit_variant_field(red_s.id, "price", "19.99")
    draft = draft.edit_variant_field(red_s.id, "available", "true")

    size_id = draft.options[1].id
    draft = draft.update_option_values(size_id, ["S", "M", "L"])

    kept = draft.find_variant(red_s.id)
    assert kept.price == "19.99"
    assert kept.available is True
    assert len(draft.variants) == 6


def test_removing_a_value_drops_its_rows():
    draft = _draft_with_color_size()
    red_ids = [v.id for v in draft.variants if v.combination[0] == "Red"]

    draft = draft.update_option_values(draft.options[0].id, ["Red"])

    assert [v.id for v in draft.variants] == red_ids


def test_edit_option_replaces_in_place():
    draft = _draft_with_color_size()
    color_id = draft.options[0].id

    draft = draft.edit_option(color_id).edit_pending(values=["Red", "Blue", "Black"]).save_option()

    assert [o.id for o in draft.options][0] == color_id
    assert draft.options[0].role == "color"
    assert len(draft.options) == 2
    assert len(draft.variants) == 6


def test_rename_keeps_variants_and_role():
    draft = _draft_with_color_size()
    ids = [v.id for v in draft.variants]

    draft = draft.rename_option(draft.options[0].id, "Shade")

    assert draft.options[0].name == "Shade"
    assert draft.options[0].role == "color"
    assert [v.id for v in draft.variants] == ids


def test_remove_option_rebuilds_rows():
    draft = _draft_with_color_size()
    old_ids = {v.id for v in draft.variants}

    draft = draft.remove_option(draft.options[1].id)

    assert [v.combination for v in draft.variants] == [("Red",), ("Blue",)]
    assert not old_ids & {v.id for v in draft.variants}


def test_unknown_variant_and_field():
    draft = _draft_with_color_size()
    with pytest.raises(UnknownVariantError):
        draft.edit_variant_field("missing", "price", "1")
    with pytest.raises(ValueError):
        draft.edit_variant_field(draft.variants[0].id, "combination", ("x",))


def test_set_color_image():
    draft = _draft_with_color_size()
    variant_id = draft.variants[2].id

    draft = draft.set_color_image(variant_id, "https://cdn.example.com/blue.jpg")

    assert draft.find_variant(variant_id).color_image == "https://cdn.example.com/blue.jpg"


def test_remove_and_restore_combination():
    draft = _draft_with_color_size()
    blue_m = draft.variants[3]

    draft = draft.remove_combination(("Blue", "M"))
    assert len(draft.variants) == 3
    assert draft.excluded == (("Blue", "M"),)
    assert ("Blue", "M") not in draft.combinations

    # Regeneration does not bring it back
    draft = draft.update_option_values(draft.options[1].id, ["S", "M", "L"])
    assert ("Blue", "M") not in [v.combination for v in draft.variants]
    assert len(draft.variants) == 5

    draft = draft.restore_combination(("Blue", "M"))
    restored = [v for v in draft.variants if v.combination == ("Blue", "M")]
    assert len(restored) == 1
    assert restored[0].id != blue_m.id
    assert draft.excluded == ()


def test_exclusion_forgotten_when_combination_disappears():
    draft = _draft_with_color_size().remove_combination(("Blue", "M"))
    draft = draft.update_option_values(draft.options[0].id, ["Red"])
    assert draft.excluded == ()

    draft = draft.update_option_values(draft.options[0].id, ["Red", "Blue"])
    assert ("Blue", "M") in [v.combination for v in draft.variants]


def test_remove_unknown_combination_is_a_no_op():
    draft = _draft_with_color_size()
    assert draft.remove_combination(("Green", "S")) is draft


def test_from_existing_reconciles_rows():
    options = (make_option("Color", ["Red"]), make_option("Size", ["S", "M"]))
    stale = Variant(id="stale", combination=("Blue", "S"))
    kept = Variant(id="kept", combination=("Red", "M"), sku="R-M")

    draft = ProductDraft.from_existing(options, [stale, kept])

    assert [v.combination for v in draft.variants] == [("Red", "S"), ("Red", "M")]
    assert draft.variants[1] == kept


def test_combination_limit_applies():
    draft = ProductDraft(max_combinations=10).add_option("A", list("abcd")).save_option()
    with pytest.raises(TooManyCombinationsError):
        draft.add_option("B", list("abc")).save_option()


def test_operations_return_new_snapshots():
    draft = _draft_with_color_size()
    edited = draft.edit_variant_field(draft.variants[0].id, "sku", "X")

    assert draft.variants[0].sku == ""
    assert edited.variants[0].sku == "X"


def test_summary():
    draft = _draft_with_color_size()
    draft = draft.edit_variant(draft.variants[0].id, available=True, inventory="2")

    summary = draft.summary()

    assert summary["count"] == 4
    assert summary["available_count"] == 1
    assert summary["in_stock_count"] == 1
    assert summary["show_color_image"] is True
    assert summary["columns"] == ["Color", "Size"]
    assert summary["rows"][0]["values"] == {"Color": "Red", "Size": "S"}
    assert summary["rows"][0]["title"] == "Red"
