# Services package
from pantry.services.import_service import ImportService
from pantry.services.storage import FoodItemStore, SQLAlchemyFoodItemStore

__all__ = [
    "ImportService",
    "FoodItemStore",
    "SQLAlchemyFoodItemStore",
]
