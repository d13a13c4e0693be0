"""Static food table used to turn image labels into food items.

Nutrition values are per typical serving.
"""

from __future__ import annotations

from dataclasses import dataclass

from nutrisprout.tracking.models import FoodItem

MAX_PARTIAL_MATCHES = 5
GENERIC_FOODS = ("apple", "banana", "sandwich")


@dataclass(frozen=True)
class FoodInfo:
    """Nutrition for one food table entry."""

    name: str
    calories: float
    protein: float
    carbs: float
    fat: float

    def to_food_item(self) -> FoodItem:
        return FoodItem(
            name=self.name,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
            quantity=1,
            unit="serving",
            is_ai_generated=True,
        )


# Keyed by lowercase label
FOOD_DATABASE: dict[str, FoodInfo] = {
    "apple": FoodInfo("Apple", 95, 0.5, 25, 0.3),
    "banana": FoodInfo("Banana", 105, 1.3, 27, 0.4),
    "orange": FoodInfo("Orange", 62, 1.2, 15.4, 0.2),
    "bread": FoodInfo("Bread", 265, 9, 49, 3.2),
    "rice": FoodInfo("Rice", 130, 2.7, 28, 0.3),
    "pasta": FoodInfo("Pasta", 131, 5, 25, 1.1),
    "chicken": FoodInfo("Chicken Breast", 165, 31, 0, 3.6),
    "beef": FoodInfo("Beef", 250, 26, 0, 17),
    "salmon": FoodInfo("Salmon", 206, 22, 0, 13),
    "egg": FoodInfo("Egg", 78, 6, 0.6, 5),
    "milk": FoodInfo("Milk", 42, 3.4, 5, 1),
    "cheese": FoodInfo("Cheese", 113, 7, 0.4, 9),
    "yogurt": FoodInfo("Yogurt", 59, 3.5, 5, 3.3),
    "potato": FoodInfo("Potato", 77, 2, 17, 0.1),
    "broccoli": FoodInfo("Broccoli", 31, 2.5, 6, 0.4),
    "carrot": FoodInfo("Carrot", 41, 0.9, 10, 0.2),
    "spinach": FoodInfo("Spinach", 23, 2.9, 3.6, 0.4),
    "tomato": FoodInfo("Tomato", 18, 0.9, 3.9, 0.2),
    "avocado": FoodInfo("Avocado", 160, 2, 8.5, 14.7),
    "oatmeal": FoodInfo("Oatmeal", 68, 2.5, 12, 1.4),
    "cereal": FoodInfo("Cereal", 110, 2, 24, 1),
    "salad": FoodInfo("Salad", 20, 1.2, 3.7, 0.2),
    "sandwich": FoodInfo("Sandwich", 300, 15, 30, 12),
    "pizza": FoodInfo("Pizza Slice", 285, 12, 36, 10),
    "burger": FoodInfo("Burger", 354, 20, 40, 17),
    "fries": FoodInfo("French Fries", 312, 3.4, 41, 15),
    "cookie": FoodInfo("Cookie", 148, 1.5, 25, 7),
    "cake": FoodInfo("Cake Slice", 239, 2.2, 34, 11),
    "ice cream": FoodInfo("Ice Cream", 207, 3.5, 23, 11),
    "chocolate": FoodInfo("Chocolate", 155, 2.2, 17, 9),
    "nuts": FoodInfo("Mixed Nuts", 172, 5, 6, 15),
    "fruit": FoodInfo("Mixed Fruit", 70, 1, 18, 0.2),
    "vegetable": FoodInfo("Mixed Vegetables", 25, 1.5, 5, 0.2),
    "meat": FoodInfo("Meat", 200, 22, 0, 13),
    "fish": FoodInfo("Fish", 180, 20, 0, 10),
    "drink": FoodInfo("Beverage", 120, 0, 30, 0),
    "coffee": FoodInfo("Coffee", 2, 0.1, 0, 0),
    "tea": FoodInfo("Tea", 2, 0, 0.5, 0),
    "juice": FoodInfo("Fruit Juice", 110, 0.5, 26, 0.2),
    "water": FoodInfo("Water", 0, 0, 0, 0),
}


def match_labels(labels: list[str]) -> list[FoodItem]:
    """Map image labels to food items.

    Exact label matches win. Without any, labels are matched by substring in
    either direction (at most five items). Without those either, a generic
    apple, banana and sandwich are returned. Blank labels are ignored.
    """
    terms = [label.strip().lower() for label in labels if label and label.strip()]
    seen: set[str] = set()
    items: list[FoodItem] = []

    for term in terms:
        if term in seen:
            continue
        info = FOOD_DATABASE.get(term)
        if info is not None:
            seen.add(term)
            items.append(info.to_food_item())

    if not items:
        for term in terms:
            for key, info in FOOD_DATABASE.items():
                if key in seen or not (key in term or term in key):
                    continue
                seen.add(key)
                items.append(info.to_food_item())
                if len(items) >= MAX_PARTIAL_MATCHES:
                    return items

    if not items:
        items = [FOOD_DATABASE[key].to_food_item() for key in GENERIC_FOODS]

    return items
