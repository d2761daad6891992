#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from rfidcart.data.models.product import ProductModel
from rfidcart.data.models.cart import CartModel
from rfidcart.data.models.cart_line import CartLineModel
from rfidcart.data.models.transaction import TransactionModel

__all__ = ["ProductModel", "CartModel", "CartLineModel", "TransactionModel"]
