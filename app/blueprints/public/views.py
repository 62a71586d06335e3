"""Public-facing catalog, product and option-selection endpoints."""
from flask import request, abort, current_app
from app.blueprints.public import public_bp
from app.services.product_service import get_published_products, get_product_by_style_id
from app.services import selection_service

VISIBLE_STATUSES = ("PUBLISHED",)


def _published_or_404(style_id):
    product = get_product_by_style_id(style_id)
    if not product or product.status not in VISIBLE_STATUSES:
        abort(404)
    return product


def _product_summary(product):
    return {
        "style_id": product.style_id,
        "title": product.title,
        "description": product.description or "",
        "variant_count": product.variant_count,
    }


@public_bp.route("/products")
def catalog():
    """Published products, newest first."""
    sort = request.args.get("sort", "newest")
    page = request.args.get("page", 1, type=int)
    per_page = current_app.config["STOREFRONT_PAGE_SIZE"]

    pagination = get_published_products(sort=sort, page=page, per_page=per_page)
    return {
        "products": [_product_summary(p) for p in pagination.items],
        "page": pagination.page,
        "pages": pagination.pages,
        "total": pagination.total,
    }


@public_bp.route("/products/<style_id>")
def product_detail(style_id):
    """Product with every option value and its state before any selection."""
    product = _published_or_404(style_id)
    view = selection_service.product_view(
        product, stock_signal=current_app.config["STOREFRONT_STOCK_SIGNAL"]
    )
    return {"product": _product_summary(product), **view}


@public_bp.route("/products/<style_id>/selection")
def selection_state(style_id):
    """Option states for a selection passed as ?Color=Red&Size=M."""
    product = _published_or_404(style_id)
    mapping = {key: value for key, value in request.args.items()}
    return selection_service.product_view(
        product, mapping, stock_signal=current_app.config["STOREFRONT_STOCK_SIGNAL"]
    )


@public_bp.route("/products/<style_id>/selection", methods=["POST"])
def select_option(style_id):
    """Apply one click: {"selection": {...}, "option": "Color", "value": "Red"}."""
    product = _published_or_404(style_id)
    body = request.get_json(silent=True) or {}
    option_name = body.get("option")
    if not option_name:
        return {"error": "option is required"}, 400

    view = selection_service.apply_click(
        product,
        body.get("selection") or {},
        option_name,
        body.get("value"),
        stock_signal=current_app.config["STOREFRONT_STOCK_SIGNAL"],
    )
    if view is None:
        return {"error": f"Unknown option or value: {option_name}={body.get('value')!r}"}, 400
    return view
