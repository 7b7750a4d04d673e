"""
Contrast-safe style lookups.

Each function maps a semantic key to utility classes defined in
``utils.styles`` and falls back to a readable default for unknown keys.
"""

DEFAULT_TEXT_COLOR = "text-gray-900"
DEFAULT_BADGE_STYLE = "bg-gray-50 text-gray-900 border border-gray-300"

CONTRAST_COMPLIANT_COLORS = {
    # Text on light backgrounds (WCAG AA)
    "text": {
        "primary": "text-gray-900",
        "secondary": "text-gray-800",
        "tertiary": "text-gray-700",
        "muted": "text-gray-600",
        "light": "text-gray-500",
    },
    "dark_bg": {
        "primary": "text-white",
        "secondary": "text-gray-100",
        "tertiary": "text-gray-200",
    },
    "badges": {
        "success": "bg-green-50 text-green-900 border-green-200",
        "error": "bg-red-50 text-red-900 border-red-200",
        "warning": "bg-yellow-50 text-yellow-900 border-yellow-200",
        "info": "bg-blue-50 text-blue-900 border-blue-200",
        "default": "bg-gray-50 text-gray-900 border-gray-200",
        "purple": "bg-purple-50 text-purple-900 border-purple-200",
    },
    "buttons": {
        "primary": "bg-blue-700 hover:bg-blue-800 text-white",
        "secondary": "bg-gray-700 hover:bg-gray-800 text-white",
        "success": "bg-green-700 hover:bg-green-800 text-white",
        "danger": "bg-red-700 hover:bg-red-800 text-white",
        "warning": "bg-yellow-600 hover:bg-yellow-700 text-white",
        "outline": "border-gray-700 text-gray-900 hover:bg-gray-100",
    },
    "status": {
        "correct": {"bg": "bg-green-50", "text": "text-green-900", "border": "border-green-300"},
        "incorrect": {"bg": "bg-red-50", "text": "text-red-900", "border": "border-red-300"},
        "pending": {"bg": "bg-yellow-50", "text": "text-yellow-900", "border": "border-yellow-300"},
        "partial": {"bg": "bg-orange-50", "text": "text-orange-900", "border": "border-orange-300"},
    },
}

_LIGHT_BACKGROUNDS = ["gray", "blue", "green", "red", "yellow", "purple", "orange", "indigo"]

TEXT_COLOR_FOR_BACKGROUND = {
    "bg-white": "text-gray-900",
    **{f"bg-{color}-{shade}": ("text-gray-900" if color == "gray" else f"text-{color}-900")
       for color in _LIGHT_BACKGROUNDS
       for shade in (50, 100)},
    "bg-gray-800": "text-white",
    "bg-gray-900": "text-white",
    **{f"bg-{color}-{shade}": "text-white"
       for color in ("blue", "green", "red")
       for shade in (700, 800, 900)},
}

BADGE_STYLES = {
    "CORRECT": "bg-green-50 text-green-900 border border-green-300",
    "INCORRECT": "bg-red-50 text-red-900 border border-red-300",
    "PENDING": "bg-yellow-50 text-yellow-900 border border-yellow-300",
    "PARTIAL": "bg-orange-50 text-orange-900 border border-orange-300",
    "PARTIALLY_CORRECT": "bg-orange-50 text-orange-900 border border-orange-300",
    "default": DEFAULT_BADGE_STYLE,
}

# xs is bumped to 14px for readability
FONT_SIZES = {
    "xs": "text-sm",
    "sm": "text-sm",
    "base": "text-base",
    "lg": "text-lg",
    "xl": "text-xl",
    "2xl": "text-2xl",
}

LINK_STYLES = {
    "default": "text-blue-700 hover:text-blue-900 underline decoration-2 underline-offset-2",
    "nav": "text-gray-900 hover:text-blue-700 font-medium",
    "footer": "text-gray-700 hover:text-gray-900",
}

FOCUS_STYLES = "focus:outline-none focus:ring-2 focus:ring-blue-600 focus:ring-offset-2"


def get_contrast_compliant_colors() -> dict:
    return CONTRAST_COMPLIANT_COLORS


def get_text_color_for_background(bg_color: str) -> str:
    return TEXT_COLOR_FOR_BACKGROUND.get(bg_color, DEFAULT_TEXT_COLOR)


def get_accessible_badge_styles(status: str) -> str:
    return BADGE_STYLES.get(status, BADGE_STYLES["default"])


def get_accessible_font_size(size: str) -> str:
    return FONT_SIZES.get(size, FONT_SIZES["base"])


def get_focus_styles() -> str:
    return FOCUS_STYLES


def get_accessible_link_styles(variant: str = "default") -> str:
    return f"{LINK_STYLES.get(variant, LINK_STYLES['default'])} {get_focus_styles()}"
