#!/usr/bin/env python3
"""Seed sample products with options and stocked variants for local development."""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app
from app.extensions import db
from app.models.product import Product
from app.services import product_service

app = create_app()

SAMPLE_PRODUCTS = [
    {
        "title": "Classic Crew Tee",
        "options": [
            ("Color", ["Red", "Navy", "White"]),
            ("Size", ["S", "M", "L", "XL"]),
        ],
        "price": "19.99",
        # (Color, Size) pairs with stock; every other row stays unavailable
        "stock": {("Red", "S"): 4, ("Red", "M"): 2, ("Navy", "L"): 7, ("White", "M"): 1},
        "removed": [("White", "XL")],
    },
    {
        "title": "Everyday Hoodie",
        "options": [
            ("Color", ["Black", "Heather Grey"]),
            ("Size", ["M", "L"]),
        ],
        "price": "49.00",
        "stock": {("Black", "M"): 3, ("Heather Grey", "L"): 5},
        "removed": [],
    },
    {
        "title": "Wool Beanie",
        "options": [("Color", ["Charcoal", "Mustard"])],
        "price": "15.00",
        "stock": {("Charcoal",): 10},
        "removed": [],
    },
    {
        "title": "Canvas Tote",
        "options": [],
        "price": "",
        "stock": {},
        "removed": [],
    },
]


def _stock_variants(item):
    def change(draft):
        for combination in item["removed"]:
            draft = draft.remove_combination(combination)
        for variant in draft.variants:
            quantity = item["stock"].get(variant.combination, 0)
            draft = draft.edit_variant(
                variant.id,
                price=item["price"],
                sku="-".join(v[:3].upper() for v in variant.combination),
                inventory=str(quantity),
                available=quantity > 0,
            )
        return draft
    return change


def seed():
    with app.app_context():
        if Product.query.first():
            print("Products already exist — skipping seed.")
            return

        for item in SAMPLE_PRODUCTS:
            product = product_service.create_product(item["title"], 0)

            for name, values in item["options"]:
                product_service.apply_change(
                    product, 0, "ADD_OPTION",
                    lambda d, n=name, v=values: d.add_option(n, v).save_option(),
                    payload={"name": name, "values": values},
                )

            draft = product_service.apply_change(
                product, 0, "EDIT_VARIANT", _stock_variants(item),
                payload={"seed": True},
            )
            product_service.publish_product(product.style_id, 0)
            print(f"  Created {product.style_id}: {item['title']} ({len(draft.variants)} variants)")

        db.session.commit()
        print(f"\nSeeded {len(SAMPLE_PRODUCTS)} products.")


if __name__ == "__main__":
    seed()
