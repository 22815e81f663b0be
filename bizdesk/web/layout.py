"""
Layout shell for the web pages.

Admins get the desktop sidebar and the mobile bottom navigation around the
page content; everybody else (staff, anonymous) gets the content only.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from bizdesk.auth.dependencies import AuthenticatedUser


@dataclass(frozen=True)
class NavItem:
    label: str
    path: str
    icon: str


NAV_ITEMS: List[NavItem] = [
    NavItem("Dashboard", "/dashboard", "layout-dashboard"),
    NavItem("Products", "/products", "package"),
    NavItem("Categories", "/categories", "tag"),
    NavItem("Inventory", "/inventory", "warehouse"),
    NavItem("Orders", "/orders", "shopping-cart"),
    NavItem("Rentals", "/rentals", "building-2"),
    NavItem("Analytics", "/analytics", "trending-up"),
]


def is_active(item_path: str, current_path: str) -> bool:
    """Dashboard only matches exactly; other items also match their sub-pages."""
    if item_path == "/dashboard":
        return current_path == item_path
    return current_path == item_path or current_path.startswith(item_path + "/")


def show_navigation(user: Optional[AuthenticatedUser]) -> bool:
    return bool(user and user.is_admin)


def build_layout_context(user: Optional[AuthenticatedUser], current_path: str = "/") -> Dict[str, Any]:
    """
    Template context for layout.html.

    Returns:
        Dict with show_navigation, nav_items (each with an 'active' flag)
        and the current user
    """
    return {
        "user": user,
        "show_navigation": show_navigation(user),
        "nav_items": [
            {"label": item.label, "path": item.path, "icon": item.icon, "active": is_active(item.path, current_path)}
            for item in NAV_ITEMS
        ],
    }
