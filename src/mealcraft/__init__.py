"""
MealCraft -- kitchen data persistence core.

Recipes, stock, planning and settings behind one save/load contract,
stored on this device or on a remote account, and portable as a
single export token.
"""

import os

__version__ = "0.1.0"
__author__ = "MealCraft"

MEALCRAFT_HOME = os.environ.get("MEALCRAFT_HOME", "~/.mealcraft")
