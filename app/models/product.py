from datetime import datetime, timezone
from app.extensions import db


class Product(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    style_id = db.Column(db.String(20), unique=True, nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    status = db.Column(
        db.String(20), nullable=False, default="DRAFT", index=True
    )
    # [{"Color": "Red", "Size": "S"}, ...] rows removed from the variant table
    excluded_combinations = db.Column(db.JSON, default=list)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    options = db.relationship(
        "ProductOption",
        backref="product",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="ProductOption.sort_order",
    )
    variants = db.relationship(
        "ProductVariant",
        backref="product",
        lazy="select",
        cascade="all, delete-orphan",
        order_by="ProductVariant.sort_order",
    )

    @property
    def is_visible(self):
        return self.status == "PUBLISHED"

    @property
    def variant_count(self):
        return len(self.variants)

    def __repr__(self):
        return f"<Product {self.style_id}: {self.title}>"
