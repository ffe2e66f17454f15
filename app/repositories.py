"""
Storage gateway: one ``Repository`` per entity type.

Repositories flush but never commit; services decide where a transaction
ends (see ``app.utils.db.transactional``). Nothing here knows about roles.
"""
from typing import Any, Dict, List, Optional
from models import db, Account, Vendor, VendorMenuItem, CatalogEntry, Order, OrderStatusLog
from app.exceptions import NotFound


class RegionFilter:
    """Either no restriction or ``region == value``."""

    def __init__(self, region: Optional[str] = None):
        self.region = region

    @classmethod
    def equals(cls, region: str) -> "RegionFilter":
        return cls(region)

    @property
    def matches_all(self) -> bool:
        return self.region is None

    def apply(self, query, model):
        if self.matches_all:
            return query
        return query.filter(model.region == self.region)

    def __eq__(self, other):
        return isinstance(other, RegionFilter) and other.region == self.region

    def __repr__(self):
        return "<RegionFilter all>" if self.matches_all else f"<RegionFilter region={self.region}>"


ALL_REGIONS = RegionFilter()


class Repository:
    def __init__(self, model, kind: str, order_by=None):
        self.model = model
        self.kind = kind
        self.order_by = order_by if order_by is not None else model.id

    def find(self, region_filter: RegionFilter = ALL_REGIONS, **criteria) -> List[Any]:
        query = self.model.query.filter_by(**criteria)
        if region_filter is not None:
            query = region_filter.apply(query, self.model)
        return query.order_by(self.order_by).all()

    def find_by_id(self, record_id):
        record = db.session.get(self.model, record_id)
        if record is None:
            raise NotFound(self.kind, record_id)
        return record

    def insert(self, record):
        db.session.add(record)
        db.session.flush()
        return record

    def update(self, record):
        if record.id is None or db.session.get(self.model, record.id) is None:
            raise NotFound(self.kind, record.id)
        db.session.add(record)
        db.session.flush()
        return record

    def delete(self, record_id) -> None:
        record = self.find_by_id(record_id)
        db.session.delete(record)
        db.session.flush()

    def refresh(self, record):
        db.session.refresh(record)
        return record

    def compare_and_set(self, record_id, expected: Dict[str, Any], changes: Dict[str, Any]) -> bool:
        """Apply ``changes`` only if the stored row still matches ``expected``."""
        updated = (
            self.model.query
            .filter_by(id=record_id, **expected)
            .update(changes, synchronize_session="evaluate")
        )
        return updated == 1


accounts = Repository(Account, "Account")
vendors = Repository(Vendor, "Vendor")
menu_items = Repository(VendorMenuItem, "VendorMenuItem", order_by=VendorMenuItem.position)
catalog_entries = Repository(CatalogEntry, "CatalogEntry")
orders = Repository(Order, "Order", order_by=Order.id.desc())
status_logs = Repository(OrderStatusLog, "OrderStatusLog")
