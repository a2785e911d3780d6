"""Program color themes and the display classes each one resolves to."""

from typing import Dict

DEFAULT_COLOR_THEME = "blue"

COLOR_THEMES: Dict[str, Dict[str, str]] = {
    "green": {
        "label": "Green",
        "bg": "from-green-500 to-emerald-600",
        "border": "border-green-500/30",
        "text": "text-green-400",
    },
    "blue": {
        "label": "Blue",
        "bg": "from-blue-500 to-cyan-600",
        "border": "border-cyan-500/30",
        "text": "text-cyan-400",
    },
    "purple": {
        "label": "Purple",
        "bg": "from-purple-500 to-violet-600",
        "border": "border-purple-500/30",
        "text": "text-purple-400",
    },
    "orange": {
        "label": "Orange",
        "bg": "from-orange-500 to-red-600",
        "border": "border-orange-500/30",
        "text": "text-orange-400",
    },
    "red": {
        "label": "Red",
        "bg": "from-red-500 to-pink-600",
        "border": "border-red-500/30",
        "text": "text-red-400",
    },
    "indigo": {
        "label": "Indigo",
        "bg": "from-indigo-500 to-blue-600",
        "border": "border-indigo-500/30",
        "text": "text-indigo-400",
    },
    "pink": {
        "label": "Pink",
        "bg": "from-pink-500 to-rose-600",
        "border": "border-pink-500/30",
        "text": "text-pink-400",
    },
    "yellow": {
        "label": "Yellow",
        "bg": "from-yellow-500 to-orange-600",
        "border": "border-yellow-500/30",
        "text": "text-yellow-400",
    },
}

COLOR_THEME_VALUES = tuple(COLOR_THEMES.keys())


def is_color_theme(value) -> bool:
    return isinstance(value, str) and value in COLOR_THEMES


def theme_for(value: str | None) -> Dict[str, str]:
    # Unknown or missing themes render with the default palette.
    key = (value or "").strip().lower()
    return COLOR_THEMES.get(key, COLOR_THEMES[DEFAULT_COLOR_THEME])
