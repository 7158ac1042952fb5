"""Domain package for the grocery data core."""
from .types import Entity, Product, GroceryList, GroceryListItem, MAX_PRICE

__all__ = ['Entity', 'Product', 'GroceryList', 'GroceryListItem', 'MAX_PRICE']
