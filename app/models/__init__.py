from app.models.product import Product
from app.models.variant import ProductOption, ProductVariant
from app.models.attribute import Attribute
from app.models.audit_log import AuditLog

__all__ = ["Product", "ProductOption", "ProductVariant", "Attribute", "AuditLog"]
