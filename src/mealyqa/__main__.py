"""Allow running MealyQA as ``python -m mealyqa``."""

from mealyqa.cli import main

if __name__ == "__main__":
    main()
