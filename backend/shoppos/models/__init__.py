from .locations import Location
from .auth import User, SessionToken
from .inventory import Item
from .sales import Sale
from .offers import Offer
from .settings import ShopSettings

__all__ = [
    'Location',
    'User', 'SessionToken',
    'Item',
    'Sale',
    'Offer',
    'ShopSettings',
]
