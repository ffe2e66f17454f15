from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey
from sqlalchemy.sql import func
from models import db, BIGINT


class Order(db.Model):
    __tablename__ = "order"
    __table_args__ = (
        db.Index("ix_order_region_status", "region", "status"),
    )
    id = Column(BIGINT, primary_key=True)
    owner_account_id = Column(String(64), nullable=False)
    status = Column(String(30), nullable=False, default="pending_payment")  # pending_payment, paid, cancelled, delivered
    payment_method = Column(String(50), nullable=False)
    region = Column(String(50), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    line_items = db.relationship(
        "OrderLineItem",
        backref="order",
        order_by="OrderLineItem.position",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "owner_account_id": self.owner_account_id,
            "status": self.status,
            "payment_method": self.payment_method,
            "region": self.region,
            "total_amount": float(self.total_amount),
            "version": self.version,
            "line_items": [li.to_dict() for li in self.line_items],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class OrderLineItem(db.Model):
    __tablename__ = "order_line_item"
    id = db.Column(BIGINT, primary_key=True)
    order_id = db.Column(BIGINT, db.ForeignKey("order.id"), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)

    # Not a foreign key: history survives catalog deletes
    catalog_entry_id = db.Column(db.Integer, nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    captured_region = db.Column(db.String(50), nullable=False)
    captured_unit_price = db.Column(db.Numeric(10, 2), nullable=False)

    def to_dict(self):
        return {
            "catalog_entry_id": self.catalog_entry_id,
            "quantity": self.quantity,
            "captured_region": self.captured_region,
            "captured_unit_price": float(self.captured_unit_price),
        }


class OrderStatusLog(db.Model):
    __tablename__ = "order_status_log"
    id = Column(BIGINT, primary_key=True)
    order_id = Column(BIGINT, ForeignKey("order.id"), nullable=False, index=True)
    status = Column(String(30), nullable=False)
    updated_by = Column(String(64), nullable=False)
    timestamp = Column(DateTime, default=func.now())

    def to_dict(self):
        return {
            "order_id": self.order_id,
            "status": self.status,
            "updated_by": self.updated_by,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }
