# ufo_timeline/models/taxonomy.py
from typing import Dict, List

# Fixed category order drives row order, donut order and legend order.
CATEGORIES: List[str] = [
    "Major Events",
    "Tech",
    "Military Contact",
    "Abduction",
    "Beings",
    "Interaction",
    "Sighting",
    "Mass Sighting",
    "High Strangeness",
    "Community",
]

CRAFT_TYPES: List[str] = [
    "Orb", "Lights", "Saucer", "Sphere", "Triangle", "Cylinder", "V-Shaped",
    "Tic Tac", "Diamond", "Cube", "Cube in Sphere", "Egg", "Oval", "Bell",
    "Organic", "Other",
]

ENTITY_TYPES: List[str] = [
    "None Reported", "Grey", "Mantid", "Reptilian", "Tall Grey", "Tall White",
    "Nordic", "Robotic", "Humanoid", "Human", "Female Entity", "Other",
]

CATEGORY_COLORS: Dict[str, str] = {
    "High Strangeness": "#1BE3FF",
    "Mass Sighting": "#37C6FF",
    "Sighting": "#52AAFF",
    "Community": "#6D8FFF",
    "Interaction": "#8773FF",
    "Beings": "#A257FF",
    "Abduction": "#BD3BFF",
    "Military Contact": "#D81FFF",
    "Tech": "#F303FF",
    "Major Events": "#FF00E6",
}
UNKNOWN_CATEGORY_COLOR = "#999999"

FAVORITE_COLORS: Dict[str, str] = {
    "yellow": "#FFD700",
    "orange": "#FFA500",
    "red": "#FF4500",
}

DEEP_DIVE_KEYS: List[str] = ["Images", "Videos", "Reports", "News Coverage"]


def category_color(category: str) -> str:
    """Color for a category; unknown values get a neutral grey instead of nothing."""
    return CATEGORY_COLORS.get(category, UNKNOWN_CATEGORY_COLOR)


def split_multi(value) -> List[str]:
    """Split a comma-separated multi-value field ('Orb, Lights') into clean items."""
    if not value:
        return []
    return [p.strip() for p in str(value).split(",") if p.strip()]
