"""Product persistence and admin variant authoring.

The variant engine works on positional tuples; rows are stored keyed by
option name. This module is the only place that translates between the two.
"""
import logging
from datetime import datetime, timezone
from flask import current_app
from app.extensions import db
from app.models.product import Product
from app.models.variant import ProductOption, ProductVariant
from app.models.audit_log import AuditLog
from app.variants import ProductDraft, Variant
from app.variants.options import OptionType, has_color_option, role_for_name

logger = logging.getLogger(__name__)


def generate_style_id():
    """Generate next style ID.

    Uses Postgres sequence in production, fallback to max(id) for SQLite.
    """
    db_uri = current_app.config["SQLALCHEMY_DATABASE_URI"]
    if "postgresql" in db_uri:
        result = db.session.execute(db.text("SELECT nextval('style_id_seq')"))
        seq = result.scalar()
    else:
        # SQLite fallback: use max product id + 1001
        result = db.session.execute(
            db.text("SELECT COALESCE(MAX(id), 0) FROM products")
        )
        seq = result.scalar() + 1001
    return f"S-{seq}"


def create_product(title, admin_id, description=""):
    """Create a DRAFT product with no options yet."""
    product = Product(
        style_id=generate_style_id(),
        title=title,
        description=description,
        status="DRAFT",
        excluded_combinations=[],
    )
    db.session.add(product)
    db.session.flush()

    db.session.add(
        AuditLog(
            admin_id=admin_id,
            action="CREATE_PRODUCT",
            product_id=product.id,
            payload={"style_id": product.style_id, "title": title},
        )
    )
    db.session.commit()
    logger.info("Created product %s (%s)", product.style_id, title)
    return product


def get_product_by_style_id(style_id):
    return Product.query.filter_by(style_id=style_id.upper()).first()


# ---------------------------------------------------------------------------
# Rows <-> engine
# ---------------------------------------------------------------------------

def options_from_rows(option_rows):
    return tuple(
        OptionType(
            id=row.option_uid,
            name=row.name,
            values=tuple(row.values or ()),
            role=row.role or role_for_name(row.name),
        )
        for row in option_rows
    )


def derive_options_from_variant_rows(variant_rows):
    """Rebuild an option set from variant rows alone.

    Used for products imported without option rows. Color comes first, then
    Size, then any other option names in the order they were first seen.
    """
    values_by_name = {}
    for row in variant_rows:
        for name, value in (row.option_values or {}).items():
            values = values_by_name.setdefault(name, [])
            if value not in values:
                values.append(value)

    rank = {"color": 0, "size": 1}
    names = sorted(
        values_by_name,
        key=lambda n: rank.get(role_for_name(n), 2),
    )
    return tuple(
        OptionType(
            id=name.lower(),
            name=name,
            values=tuple(values_by_name[name]),
            role=role_for_name(name),
        )
        for name in names
    )


def combination_for(option_values, options):
    """Positional tuple for a name-keyed mapping, or None if the keys differ."""
    names = [option.name for option in options]
    if set(option_values or {}) != set(names):
        return None
    return tuple(option_values[name] for name in names)


def variants_from_rows(variant_rows, options):
    variants = []
    for row in variant_rows:
        combination = combination_for(row.option_values, options)
        if combination is None:
            logger.debug(
                "Variant %s does not fit the current options, dropping",
                row.variant_uid,
            )
            continue
        variants.append(
            Variant(
                id=row.variant_uid,
                combination=combination,
                price=row.price or "",
                sku=row.sku or "",
                inventory=row.inventory or "",
                barcode=row.barcode or "",
                available=bool(row.available),
                color_image=row.color_image or "",
            )
        )
    return variants


def load_options(product):
    if product.options:
        return options_from_rows(product.options)
    return derive_options_from_variant_rows(product.variants)


def load_variants(product, options=None):
    if options is None:
        options = load_options(product)
    return variants_from_rows(product.variants, options)


def load_draft(product):
    """Rebuild the authoring state for a product from its rows."""
    options = load_options(product)
    excluded = []
    for mapping in product.excluded_combinations or []:
        combination = combination_for(mapping, options)
        if combination is not None:
            excluded.append(combination)
    return ProductDraft.from_existing(
        options,
        load_variants(product, options),
        excluded=excluded,
        max_combinations=current_app.config["MAX_VARIANT_COMBINATIONS"],
    )


def save_draft(product, draft):
    """Write a draft's options, variants and exclusions back to the product rows."""
    names = [option.name for option in draft.options]
    keep_images = has_color_option(draft.options)

    existing_options = {row.option_uid: row for row in product.options}
    option_rows = []
    for i, option in enumerate(draft.options):
        row = existing_options.pop(option.id, None) or ProductOption(
            option_uid=option.id
        )
        row.name = option.name
        row.role = option.role
        row.values = list(option.values)
        row.sort_order = i
        option_rows.append(row)
    product.options = option_rows

    existing_variants = {row.variant_uid: row for row in product.variants}
    variant_rows = []
    for i, variant in enumerate(draft.variants):
        row = existing_variants.pop(variant.id, None) or ProductVariant(
            variant_uid=variant.id
        )
        row.option_values = dict(zip(names, variant.combination))
        row.price = variant.price
        row.sku = variant.sku
        row.inventory = variant.inventory
        row.barcode = variant.barcode
        row.available = variant.available
        row.color_image = variant.color_image if keep_images else ""
        row.sort_order = i
        variant_rows.append(row)
    product.variants = variant_rows

    product.excluded_combinations = [
        dict(zip(names, combination)) for combination in draft.excluded
    ]
    product.updated_at = datetime.now(timezone.utc)
    return product


def apply_change(product, admin_id, action, change, payload=None):
    """Run ``change`` against the product's draft, persist it and audit it.

    ``change`` takes a ``ProductDraft`` and returns the next one. Engine
    errors propagate before anything is written. Returns the draft as
    reloaded from the stored rows.
    """
    draft = change(load_draft(product))
    save_draft(product, draft)
    db.session.add(
        AuditLog(
            admin_id=admin_id,
            action=action,
            product_id=product.id,
            payload=payload,
        )
    )
    db.session.commit()
    logger.info(
        "%s on %s by %s: %d variants", action, product.style_id, admin_id,
        len(draft.variants),
    )
    return load_draft(product)


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------

def publish_product(style_id, admin_id):
    """Transition product from DRAFT or HIDDEN → PUBLISHED."""
    product = get_product_by_style_id(style_id)
    if not product or product.status not in ("DRAFT", "HIDDEN"):
        return None

    product.status = "PUBLISHED"
    product.updated_at = datetime.now(timezone.utc)
    db.session.add(
        AuditLog(admin_id=admin_id, action="PUBLISH", product_id=product.id)
    )
    db.session.commit()
    return product


def hide_product(style_id, admin_id):
    product = get_product_by_style_id(style_id)
    if not product or product.status != "PUBLISHED":
        return None
    product.status = "HIDDEN"
    product.updated_at = datetime.now(timezone.utc)
    db.session.add(
        AuditLog(admin_id=admin_id, action="HIDE", product_id=product.id)
    )
    db.session.commit()
    return product


def get_published_products(sort="newest", page=1, per_page=24):
    """Fetch published products for the catalog."""
    query = Product.query.filter_by(status="PUBLISHED")

    if sort == "newest":
        query = query.order_by(Product.created_at.desc())
    elif sort == "title":
        query = query.order_by(Product.title.asc())

    return query.paginate(page=page, per_page=per_page, error_out=False)


def get_stats():
    """Product counts by status for the stats command."""
    rows = (
        db.session.query(Product.status, db.func.count(Product.id))
        .group_by(Product.status)
        .all()
    )
    return dict(rows)


def get_variant_count():
    return db.session.query(db.func.count(ProductVariant.id)).scalar()
