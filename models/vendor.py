from models import db
from datetime import datetime


class Vendor(db.Model):
    __tablename__ = "vendor"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    region = db.Column(db.String(50), nullable=False, index=True)   # fixed at creation
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    menu_items = db.relationship(
        "VendorMenuItem",
        order_by="VendorMenuItem.position",
        cascade="all, delete-orphan",
        lazy=True,
    )

    @property
    def menu(self):
        return [m.catalog_entry_id for m in self.menu_items]

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "region": self.region,
            "menu": self.menu,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class VendorMenuItem(db.Model):
    __tablename__ = "vendor_menu_item"
    __table_args__ = (
        db.UniqueConstraint("vendor_id", "catalog_entry_id", name="uq_menu_vendor_entry"),
    )

    id = db.Column(db.Integer, primary_key=True)
    vendor_id = db.Column(db.Integer, db.ForeignKey("vendor.id"), nullable=False, index=True)
    catalog_entry_id = db.Column(db.Integer, nullable=False)
    position = db.Column(db.Integer, nullable=False)
