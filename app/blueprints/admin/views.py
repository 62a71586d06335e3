"""Admin endpoints for product option and variant authoring.

Every mutation loads the product's draft, applies one engine operation,
persists the result and writes an audit log row. Authentication is handled
in front of this blueprint; the acting admin is taken from X-Admin-Id.
"""
import logging
from flask import request, abort
from app.blueprints.admin import admin_bp
from app.extensions import db
from app.services import attribute_service, product_service
from app.variants.errors import (
    MalformedOptionSetError,
    TooManyCombinationsError,
    UnknownVariantError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------

@admin_bp.errorhandler(MalformedOptionSetError)
def _malformed(error):
    db.session.rollback()
    return {"error": str(error)}, 400


@admin_bp.errorhandler(UnknownVariantError)
def _unknown_variant(error):
    db.session.rollback()
    return {"error": str(error)}, 404


@admin_bp.errorhandler(TooManyCombinationsError)
def _too_many(error):
    db.session.rollback()
    return {"error": str(error), "total": error.total, "limit": error.limit}, 422


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _admin_id():
    try:
        return int(request.headers.get("X-Admin-Id", "0"))
    except ValueError:
        abort(400)


def _body():
    return request.get_json(silent=True) or {}


def _product_or_404(style_id):
    product = product_service.get_product_by_style_id(style_id)
    if not product:
        abort(404)
    return product


def _draft_response(product, draft=None, status=200):
    if draft is None:
        draft = product_service.load_draft(product)
    return {
        "style_id": product.style_id,
        "status": product.status,
        "options": [
            {"id": o.id, "name": o.name, "role": o.role, "values": list(o.values)}
            for o in draft.options
        ],
        "excluded": [list(c) for c in draft.excluded],
        **draft.summary(),
    }, status


def _values_from(body):
    values = body.get("values")
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise MalformedOptionSetError("values must be a list of strings.")
    return [v.strip() for v in values]


def _combination_from(product, body):
    """Positional combination from {"combination": {"Color": "Red", ...}}."""
    mapping = body.get("combination")
    if not isinstance(mapping, dict):
        raise MalformedOptionSetError("combination must map option names to values.")
    options = product_service.load_options(product)
    combination = product_service.combination_for(mapping, options)
    if combination is None:
        raise MalformedOptionSetError("combination must name every option exactly once.")
    return combination


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

@admin_bp.route("/products", methods=["POST"])
def create_product():
    body = _body()
    title = (body.get("title") or "").strip()
    if not title:
        return {"error": "title is required"}, 400
    product = product_service.create_product(
        title, _admin_id(), description=body.get("description", "")
    )
    return {"style_id": product.style_id, "title": product.title, "status": product.status}, 201


@admin_bp.route("/products/<style_id>/variants")
def variant_table(style_id):
    product = _product_or_404(style_id)
    return _draft_response(product)


@admin_bp.route("/products/<style_id>/publish", methods=["POST"])
def publish(style_id):
    product = product_service.publish_product(style_id, _admin_id())
    if not product:
        return {"error": f"{style_id} not found or not in valid state."}, 409
    return {"style_id": product.style_id, "status": product.status}


@admin_bp.route("/products/<style_id>/hide", methods=["POST"])
def hide(style_id):
    product = product_service.hide_product(style_id, _admin_id())
    if not product:
        return {"error": f"{style_id} not found or not in valid state."}, 409
    return {"style_id": product.style_id, "status": product.status}


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

@admin_bp.route("/products/<style_id>/options", methods=["POST"])
def add_option(style_id):
    product = _product_or_404(style_id)
    body = _body()
    name = (body.get("name") or "").strip()
    values = _values_from(body)
    role = body.get("role")

    draft = product_service.apply_change(
        product,
        _admin_id(),
        "ADD_OPTION",
        lambda d: d.add_option(name, values, role=role).save_option(),
        payload={"name": name, "values": values},
    )
    return _draft_response(product, draft, 201)


@admin_bp.route("/products/<style_id>/options/from-attribute", methods=["POST"])
def add_option_from_attribute(style_id):
    product = _product_or_404(style_id)
    attribute = attribute_service.get_attribute(_body().get("attribute_id"))
    if not attribute:
        return {"error": "Unknown attribute"}, 404

    draft = product_service.apply_change(
        product,
        _admin_id(),
        "ADD_OPTION",
        lambda d: d.add_option()
        .choose_attribute(attribute.name, attribute.values)
        .save_option(),
        payload={"attribute_id": attribute.id, "name": attribute.name},
    )
    return _draft_response(product, draft, 201)


@admin_bp.route("/products/<style_id>/options/<option_id>", methods=["PUT"])
def update_option(style_id, option_id):
    product = _product_or_404(style_id)
    body = _body()

    def change(draft):
        if "name" in body:
            draft = draft.rename_option(option_id, body["name"])
        if "values" in body:
            draft = draft.update_option_values(option_id, _values_from(body))
        return draft

    draft = product_service.apply_change(
        product, _admin_id(), "UPDATE_OPTION", change,
        payload={"option_id": option_id, **body},
    )
    return _draft_response(product, draft)


@admin_bp.route("/products/<style_id>/options/<option_id>", methods=["DELETE"])
def remove_option(style_id, option_id):
    product = _product_or_404(style_id)
    draft = product_service.apply_change(
        product, _admin_id(), "REMOVE_OPTION",
        lambda d: d.remove_option(option_id),
        payload={"option_id": option_id},
    )
    return _draft_response(product, draft)


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------

@admin_bp.route("/products/<style_id>/variants/<variant_id>", methods=["PATCH"])
def edit_variant(style_id, variant_id):
    product = _product_or_404(style_id)
    fields = _body()
    if not fields:
        return {"error": "No fields to update"}, 400

    try:
        draft = product_service.apply_change(
            product, _admin_id(), "EDIT_VARIANT",
            lambda d: d.edit_variant(variant_id, **fields),
            payload={"variant_id": variant_id, "fields": sorted(fields)},
        )
    except (ValueError, TypeError) as e:
        db.session.rollback()
        return {"error": str(e)}, 400
    return _draft_response(product, draft)


@admin_bp.route("/products/<style_id>/combinations", methods=["DELETE"])
def remove_combination(style_id):
    product = _product_or_404(style_id)
    body = _body()
    combination = _combination_from(product, body)
    draft = product_service.apply_change(
        product, _admin_id(), "REMOVE_COMBINATION",
        lambda d: d.remove_combination(combination),
        payload={"combination": body["combination"]},
    )
    return _draft_response(product, draft)


@admin_bp.route("/products/<style_id>/combinations/restore", methods=["POST"])
def restore_combination(style_id):
    product = _product_or_404(style_id)
    body = _body()
    combination = _combination_from(product, body)
    draft = product_service.apply_change(
        product, _admin_id(), "RESTORE_COMBINATION",
        lambda d: d.restore_combination(combination),
        payload={"combination": body["combination"]},
    )
    return _draft_response(product, draft)


# ---------------------------------------------------------------------------
# Attribute catalog
# ---------------------------------------------------------------------------

@admin_bp.route("/attributes")
def list_attributes():
    return {"attributes": [a.to_dict() for a in attribute_service.list_attributes()]}


@admin_bp.route("/attributes", methods=["POST"])
def create_attribute():
    body = _body()
    try:
        attribute = attribute_service.create_attribute(
            body.get("name"), body.get("values"), _admin_id(),
            display=body.get("display", ""),
        )
    except ValueError as e:
        return {"error": str(e)}, 400
    if attribute is None:
        return {"error": "Attribute already exists"}, 409
    return attribute.to_dict(), 201
