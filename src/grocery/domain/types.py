"""Domain types for the grocery data core."""
from typing import NewType, Optional, Annotated
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_validator


# Strong types for IDs
ProductId = NewType('ProductId', int)
ListId = NewType('ListId', int)
ListItemId = NewType('ListItemId', int)

# Upper bound for a product price
MAX_PRICE = Decimal("999.99")


class Entity(BaseModel):
    """Base class for persisted entities.

    An id of 0 marks an entity that has not been stored yet; the store
    assigns a positive id on insert.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: int = 0

    @property
    def is_persisted(self) -> bool:
        return self.id > 0


class Product(Entity):
    """A product in the catalog."""
    name: Annotated[str, Field(min_length=1)]
    stock: Annotated[int, Field(ge=0)] = 0
    shelf_life: date
    price: Annotated[Decimal, Field(ge=0, le=MAX_PRICE)] = Decimal("0")

    @field_validator('name')
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Product name must not be blank')
        return v


class GroceryList(Entity):
    """A named grocery list."""
    name: Annotated[str, Field(min_length=1)]
    created_on: Optional[datetime] = None
    color: Optional[str] = None
    owner_user_id: Optional[int] = None


class GroceryListItem(Entity):
    """A product placed on a grocery list with an amount.

    References and amount are checked by the repository on write, so an
    invalid item can still be built and handed over for rejection.
    """
    grocery_list_id: int
    product_id: int
    amount: int
