from dataclasses import dataclass


@dataclass(frozen=True)
class MealRecord:
    """
    One meal served on a date, as published by the meal service.

    ``dishes``, ``nutrition`` and ``origin`` keep the raw upstream text,
    which separates entries with ``<br/>`` markup.
    """
    meal_name: str
    dishes: str = ""
    calories: str = ""
    nutrition: str = ""
    origin: str = ""
