from datetime import datetime, timezone
from app.extensions import db


class Attribute(db.Model):
    """Catalog of option definitions an admin can attach to a product."""

    __tablename__ = "attributes"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)  # "Color"
    display = db.Column(db.String(100), nullable=False, default="")
    values = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(
        db.DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "display": self.display or self.name,
            "values": list(self.values or []),
        }

    def __repr__(self):
        return f"<Attribute {self.name}: {len(self.values or [])} values>"
