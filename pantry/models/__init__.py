from pantry.models.base import Base
from pantry.models.food_item import FoodItem

__all__ = [
    "Base",
    "FoodItem",
]
