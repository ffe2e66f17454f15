from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import BigInteger, Integer

# Use BigInteger in production but fall back to Integer for SQLite
BIGINT = BigInteger().with_variant(Integer, "sqlite")

db = SQLAlchemy()

# Re-export common models for convenience
from .account import Account  # noqa: F401,E402
from .vendor import Vendor, VendorMenuItem  # noqa: F401,E402
from .catalog import CatalogEntry  # noqa: F401,E402
from .order import Order, OrderLineItem, OrderStatusLog  # noqa: F401,E402
