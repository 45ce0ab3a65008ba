from .inventory.inventory_items import InventoryItem, InventoryTag
from .inventory.inventory_sizes import InventorySize
from .inventory.tags import Tag

from .orders.customers import Customer
from .orders.orders import Order
from .orders.order_items import OrderItem
from .orders.order_warnings import OrderWarning
