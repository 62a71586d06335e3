"""Flask CLI commands for admin operations."""
import click
from flask import current_app


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables and the style ID sequence."""
        from app.extensions import db

        db.create_all()

        # Create sequence for style IDs (Postgres only)
        db_uri = current_app.config["SQLALCHEMY_DATABASE_URI"]
        if "postgresql" in db_uri:
            db.session.execute(
                db.text(
                    "CREATE SEQUENCE IF NOT EXISTS style_id_seq START WITH 1001"
                )
            )
            db.session.commit()

        click.echo("Database initialized.")

    @app.cli.command("seed-demo")
    def seed_demo():
        """Seed the attribute catalog and demo products (idempotent)."""
        from app.models.attribute import Attribute
        from app.models.product import Product
        from app.services import attribute_service, product_service

        if Product.query.first():
            click.echo("Products already exist — skipping demo seed.")
            return

        if not Attribute.query.first():
            attribute_service.create_attribute("Color", ["Red", "Blue", "Black"], 0)
            attribute_service.create_attribute("Size", ["S", "M", "L", "XL"], 0)
            click.echo("Seeded Color and Size attributes.")

        demo_products = [
            ("Classic Crew Tee", {"Color": ["Red", "Blue"], "Size": ["S", "M", "L"]}),
            ("Everyday Hoodie", {"Color": ["Black"], "Size": ["M", "L", "XL"]}),
            ("Canvas Tote", {}),
        ]
        for title, options in demo_products:
            product = product_service.create_product(title, 0)
            for name, values in options.items():
                product_service.apply_change(
                    product, 0, "ADD_OPTION",
                    lambda d, n=name, v=values: d.add_option(n, v).save_option(),
                    payload={"name": name, "values": values},
                )
            product_service.publish_product(product.style_id, 0)
        click.echo(f"Seeded {len(demo_products)} demo products.")

    @app.cli.command("create-product")
    @click.option("--title", required=True)
    @click.option("--description", default="")
    def create_product(title, description):
        """Create a DRAFT product."""
        from app.services.product_service import create_product as _create

        product = _create(title, 0, description=description)
        click.echo(f"Created: {product.style_id} — {title}")

    @app.cli.command("add-option")
    @click.argument("style_id")
    @click.argument("name")
    @click.argument("values", nargs=-1, required=True)
    def add_option(style_id, name, values):
        """Add an option, e.g. add-option S-1001 Color Red Blue."""
        from app.services import product_service
        from app.variants import VariantEngineError

        product = product_service.get_product_by_style_id(style_id)
        if not product:
            raise click.ClickException(f"{style_id} not found")
        try:
            draft = product_service.apply_change(
                product, 0, "ADD_OPTION",
                lambda d: d.add_option(name, list(values)).save_option(),
                payload={"name": name, "values": list(values)},
            )
        except VariantEngineError as e:
            raise click.ClickException(str(e))
        click.echo(f"{product.style_id}: {len(draft.variants)} variants")

    @app.cli.command("show-variants")
    @click.argument("style_id")
    def show_variants(style_id):
        """Print the variant table for a product."""
        from app.services import product_service

        product = product_service.get_product_by_style_id(style_id)
        if not product:
            raise click.ClickException(f"{style_id} not found")

        summary = product_service.load_draft(product).summary()
        click.echo(f"{product.style_id} — {summary['count']} variants")
        for row in summary["rows"]:
            values = " / ".join(row["combination"])
            flag = "available" if row["available"] else "unavailable"
            click.echo(
                f"  {values}: price={row['price'] or '-'} "
                f"sku={row['sku'] or '-'} qty={row['inventory'] or '0'} [{flag}]"
            )

    @app.cli.command("stats")
    def stats():
        """Show product statistics."""
        from app.services.product_service import get_stats, get_variant_count

        s = get_stats()
        total = sum(s.values())
        click.echo(f"Total products: {total}")
        for status, count in sorted(s.items()):
            click.echo(f"  {status}: {count}")
        click.echo(f"Total variants: {get_variant_count()}")
