"""Repositories package for the grocery data core."""
from .product_repository import ProductRepository
from .grocery_list_repository import GroceryListRepository
from .grocery_list_item_repository import GroceryListItemRepository

__all__ = ['ProductRepository', 'GroceryListRepository', 'GroceryListItemRepository']
