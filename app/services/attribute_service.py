"""Attribute catalog: candidate options an admin can attach to a product."""
import logging
from app.extensions import db
from app.models.attribute import Attribute
from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def list_attributes():
    return Attribute.query.order_by(Attribute.name.asc()).all()


def get_attribute(attribute_id):
    try:
        attribute_id = int(attribute_id)
    except (TypeError, ValueError):
        return None
    return db.session.get(Attribute, attribute_id)


def create_attribute(name, values, admin_id, display=""):
    """Create a catalog attribute. Returns None if the name is already taken."""
    name = (name or "").strip()
    if not name:
        raise ValueError("Attribute name is required.")
    cleaned = []
    for value in values or []:
        value = str(value).strip()
        if value and value not in cleaned:
            cleaned.append(value)
    if not cleaned:
        raise ValueError("Attribute needs at least one value.")

    if Attribute.query.filter(db.func.lower(Attribute.name) == name.lower()).first():
        return None

    attribute = Attribute(name=name, display=display or name, values=cleaned)
    db.session.add(attribute)
    db.session.add(
        AuditLog(
            admin_id=admin_id,
            action="CREATE_ATTRIBUTE",
            payload={"name": name, "values": cleaned},
        )
    )
    db.session.commit()
    logger.info("Created attribute %s with %d values", name, len(cleaned))
    return attribute
