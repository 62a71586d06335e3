from app.extensions import db


class ProductOption(db.Model):
    __tablename__ = "product_options"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    option_uid = db.Column(db.String(32), nullable=False)
    name = db.Column(db.String(50), nullable=False)  # "Color", "Size"
    role = db.Column(db.String(20), nullable=False, default="generic")
    values = db.Column(db.JSON, nullable=False, default=list)  # ["Red", "Blue"]
    sort_order = db.Column(db.Integer, default=0)

    __table_args__ = (
        db.UniqueConstraint("product_id", "name", name="uq_product_option_name"),
    )

    def __repr__(self):
        return f"<ProductOption {self.name}: {self.values}>"


class ProductVariant(db.Model):
    __tablename__ = "product_variants"

    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(
        db.Integer,
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    variant_uid = db.Column(db.String(32), nullable=False, index=True)
    # Keyed by option name, never by position: {"Color": "Red", "Size": "M"}
    option_values = db.Column(db.JSON, nullable=False, default=dict)
    price = db.Column(db.String(20), nullable=False, default="")
    sku = db.Column(db.String(64), nullable=False, default="")
    inventory = db.Column(db.String(20), nullable=False, default="")
    barcode = db.Column(db.String(64), nullable=False, default="")
    available = db.Column(db.Boolean, nullable=False, default=False)
    color_image = db.Column(db.String(1024), nullable=False, default="")
    sort_order = db.Column(db.Integer, default=0)

    def __repr__(self):
        return f"<ProductVariant {self.variant_uid}: {self.option_values}>"
