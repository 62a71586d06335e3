"""Tests for mapping product rows to and from the variant engine."""
from app.models.product import Product
from app.models.variant import ProductOption, ProductVariant
from app.services import product_service
from app.variants import ProductDraft, make_option


def _product(db, style_id):
    p = Product(style_id=style_id, title="Service Tee", status="DRAFT", excluded_combinations=[])
    db.session.add(p)
    db.session.flush()
    return p


def _draft():
    return (
        ProductDraft()
        .add_option("Color", ["Red", "Blue"]).save_option()
        .add_option("Size", ["S", "M"]).save_option()
    )


def test_save_and_load_round_trip(db):
    p = _product(db, "S-8001")
    draft = _draft()
    red_m = next(v for v in draft.variants if v.combination == ("Red", "M"))
    draft = draft.edit_variant(red_m.id, price="12.50", inventory="4", available=True)

    product_service.save_draft(p, draft)
    db.session.flush()
    db.session.refresh(p)

    row = next(r for r in p.variants if r.variant_uid == red_m.id)
    assert row.option_values == {"Color": "Red", "Size": "M"}

    loaded = product_service.load_draft(p)
    assert [o.name for o in loaded.options] == ["Color", "Size"]
    assert [o.role for o in loaded.options] == ["color", "size"]
    assert [v.id for v in loaded.variants] == [v.id for v in draft.variants]
    variant = loaded.find_variant(red_m.id)
    assert (variant.price, variant.inventory, variant.available) == ("12.50", "4", True)


def test_rows_are_keyed_by_name_not_position(db):
    p = _product(db, "S-8002")
    draft = _draft()
    blue_s = next(v for v in draft.variants if v.combination == ("Blue", "S"))
    product_service.save_draft(p, draft.edit_variant(blue_s.id, sku="BLUE-S"))
    db.session.flush()
    db.session.refresh(p)

    # Swap the stored option order; values must still land on the right option
    size_row = next(o for o in p.options if o.name == "Size")
    color_row = next(o for o in p.options if o.name == "Color")
    size_row.sort_order, color_row.sort_order = 0, 1
    db.session.flush()
    db.session.expire(p)

    loaded = product_service.load_draft(p)
    assert [o.name for o in loaded.options] == ["Size", "Color"]
    assert loaded.find_variant(blue_s.id).combination == ("S", "Blue")
    assert loaded.find_variant(blue_s.id).sku == "BLUE-S"


def test_derive_options_from_legacy_rows(db):
    p = _product(db, "S-8003")
    db.session.add_all([
        ProductVariant(
            product_id=p.id, variant_uid="legacy1", sort_order=0,
            option_values={"Size": "M", "Fit": "Slim", "Color": "Red"},
        ),
        ProductVariant(
            product_id=p.id, variant_uid="legacy2", sort_order=1,
            option_values={"Size": "L", "Fit": "Slim", "Color": "Red"},
        ),
    ])
    db.session.flush()
    db.session.refresh(p)

    options = product_service.load_options(p)

    assert [o.name for o in options] == ["Color", "Size", "Fit"]
    assert options[1].values == ("M", "L")
    assert options[0].is_color

    draft = product_service.load_draft(p)
    assert {v.id for v in draft.variants} == {"legacy1", "legacy2"}


def test_combination_for():
    options = (make_option("Color", ["Red"]), make_option("Size", ["S"]))

    assert product_service.combination_for({"Size": "S", "Color": "Red"}, options) == ("Red", "S")
    assert product_service.combination_for({"Color": "Red"}, options) is None
    assert product_service.combination_for({"Color": "Red", "Size": "S", "Fit": "Slim"}, options) is None
    assert product_service.combination_for(None, options) is None


def test_rows_that_no_longer_fit_are_dropped(db):
    p = _product(db, "S-8004")
    db.session.add_all([
        ProductOption(
            product_id=p.id, option_uid="c", name="Color", role="color",
            values=["Red"], sort_order=0,
        ),
        ProductVariant(
            product_id=p.id, variant_uid="fits", sort_order=0,
            option_values={"Color": "Red"}, price="9",
        ),
        ProductVariant(
            product_id=p.id, variant_uid="stale", sort_order=1,
            option_values={"Color": "Red", "Size": "S"},
        ),
    ])
    db.session.flush()
    db.session.refresh(p)

    draft = product_service.load_draft(p)

    assert [v.id for v in draft.variants] == ["fits"]
    assert draft.variants[0].price == "9"


def test_color_image_needs_color_option(db):
    p = _product(db, "S-8005")
    draft = ProductDraft().add_option("Size", ["S"]).save_option()
    draft = draft.set_color_image(draft.variants[0].id, "https://cdn.example.com/s.jpg")

    product_service.save_draft(p, draft)
    db.session.flush()

    assert p.variants[0].color_image == ""


def test_exclusions_are_persisted_by_name(db):
    p = _product(db, "S-8006")
    draft = _draft().remove_combination(("Blue", "M"))

    product_service.save_draft(p, draft)
    db.session.flush()
    db.session.refresh(p)

    assert p.excluded_combinations == [{"Color": "Blue", "Size": "M"}]
    loaded = product_service.load_draft(p)
    assert loaded.excluded == (("Blue", "M"),)
    assert ("Blue", "M") not in [v.combination for v in loaded.variants]
    assert len(loaded.variants) == 3


def test_removed_rows_are_deleted(db):
    p = _product(db, "S-8007")
    draft = _draft()
    product_service.save_draft(p, draft)
    db.session.flush()

    color = draft.options[0]
    product_service.save_draft(p, draft.update_option_values(color.id, ["Red"]))
    db.session.flush()
    db.session.refresh(p)

    assert sorted(r.option_values["Size"] for r in p.variants) == ["M", "S"]
    assert ProductVariant.query.filter_by(product_id=p.id).count() == 2
