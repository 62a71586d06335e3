"""Display-ready view of a reconciled variant set."""
from app.variants.options import has_color_option
from app.variants.selection import is_in_stock


def variant_row(variant, options=()):
    names = [option.name for option in options]
    return {
        "id": variant.id,
        "title": variant.title,
        "combination": list(variant.combination),
        "values": dict(zip(names, variant.combination)),
        "price": variant.price,
        "sku": variant.sku,
        "inventory": variant.inventory,
        "barcode": variant.barcode,
        "available": variant.available,
        "color_image": variant.color_image,
    }


def summarize(variants, options=()):
    """Variant counts and table rows for the admin variant table."""
    variants = list(variants)
    return {
        "count": len(variants),
        "available_count": sum(1 for v in variants if is_in_stock(v, "available")),
        "in_stock_count": sum(1 for v in variants if is_in_stock(v, "inventory")),
        "show_color_image": has_color_option(options),
        "columns": [option.name for option in options],
        "rows": [variant_row(v, options) for v in variants],
    }
