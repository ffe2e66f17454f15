from .auth import auth_bp
from .accounts import account_bp
from .vendors import vendor_bp
from .catalog import catalog_bp
from .orders import order_bp


__all__ = [
    'auth_bp',
    'account_bp',
    'vendor_bp',
    'catalog_bp',
    'order_bp',
]
