"""
                FoodieHub

Role-based food ordering backend: restaurant browsing, orders and
payment-method management scoped by user role and country.

Author: FoodieHub Team
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "FoodieHub Team"
