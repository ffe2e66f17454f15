from typing import List, Optional
from flask import current_app
from app.exceptions import FieldError


def allowed_regions() -> List[str]:
    return list(current_app.config["REGIONS"])


def region_error(region: Optional[str], field: str = "region") -> Optional[FieldError]:
    """Return a FieldError if ``region`` is missing or not configured."""
    if not region:
        return FieldError(field, "Region is required")
    regions = allowed_regions()
    if region not in regions:
        return FieldError(field, f"Region must be one of: {', '.join(regions)}")
    return None


__all__ = ["allowed_regions", "region_error"]
