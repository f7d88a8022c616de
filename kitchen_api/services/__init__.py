"""
Command dispatchers. One per collection endpoint; all storage goes through the
kernel's UpdateEngine.
"""

from kitchen_api.services.menu_dispatcher import dispatch_menu_command
from kitchen_api.services.recipe_dispatcher import dispatch_recipe_command
from kitchen_api.services.shopping_list_dispatcher import dispatch_shopping_list_command

__all__ = [
    "dispatch_recipe_command",
    "dispatch_menu_command",
    "dispatch_shopping_list_command",
]
