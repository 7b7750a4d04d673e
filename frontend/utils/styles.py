"""
Global styles for the OpinionPointer UI.
Light theme; defines the utility classes returned by utils.accessibility.
"""

# Tailwind palette subset used by the accessibility lookups
PALETTE = {
    "gray": {50: "#f9fafb", 100: "#f3f4f6", 200: "#e5e7eb", 300: "#d1d5db", 500: "#6b7280",
             600: "#4b5563", 700: "#374151", 800: "#1f2937", 900: "#111827"},
    "blue": {50: "#eff6ff", 100: "#dbeafe", 200: "#bfdbfe", 300: "#93c5fd", 600: "#2563eb",
             700: "#1d4ed8", 800: "#1e40af", 900: "#1e3a8a"},
    "green": {50: "#f0fdf4", 100: "#dcfce7", 200: "#bbf7d0", 300: "#86efac", 700: "#15803d",
              800: "#166534", 900: "#14532d"},
    "red": {50: "#fef2f2", 100: "#fee2e2", 200: "#fecaca", 300: "#fca5a5", 700: "#b91c1c",
            800: "#991b1b", 900: "#7f1d1d"},
    "yellow": {50: "#fefce8", 100: "#fef9c3", 200: "#fef08a", 300: "#fde047", 600: "#ca8a04",
               700: "#a16207", 900: "#713f12"},
    "orange": {50: "#fff7ed", 100: "#ffedd5", 300: "#fdba74", 900: "#7c2d12"},
    "purple": {50: "#faf5ff", 100: "#f3e8ff", 200: "#e9d5ff", 900: "#581c87"},
    "indigo": {50: "#eef2ff", 100: "#e0e7ff", 900: "#312e81"},
}

THEMES = {
    "light": {
        "bg_primary": "#ffffff",
        "bg_card": PALETTE["gray"][50],
        "border": PALETTE["gray"][200],
        "text_primary": PALETTE["gray"][900],
        "text_secondary": PALETTE["gray"][700],
    },
    "dark": {
        "bg_primary": PALETTE["gray"][900],
        "bg_card": PALETTE["gray"][800],
        "border": PALETTE["gray"][700],
        "text_primary": "#ffffff",
        "text_secondary": PALETTE["gray"][200],
    },
}

FONT_SIZES_PX = {"sm": 14, "base": 16, "lg": 18, "xl": 20, "2xl": 24}


def _utility_classes() -> str:
    rules = [
        ".text-white { color: #ffffff; }",
        ".border { border-width: 1px; border-style: solid; }",
        ".font-medium { font-weight: 500; }",
        ".underline { text-decoration: underline; }",
        ".decoration-2 { text-decoration-thickness: 2px; }",
        ".underline-offset-2 { text-underline-offset: 2px; }",
        ".focus\\:outline-none:focus { outline: none; }",
        f".focus\\:ring-2:focus {{ box-shadow: 0 0 0 2px #ffffff, 0 0 0 4px {PALETTE['blue'][600]}; }}",
    ]
    for color, shades in PALETTE.items():
        for shade, value in shades.items():
            rules.append(f".text-{color}-{shade} {{ color: {value}; }}")
            rules.append(f".bg-{color}-{shade} {{ background-color: {value}; }}")
            rules.append(f".border-{color}-{shade} {{ border-color: {value}; }}")
            rules.append(f".hover\\:text-{color}-{shade}:hover {{ color: {value}; }}")
            rules.append(f".hover\\:bg-{color}-{shade}:hover {{ background-color: {value}; }}")
    for name, px in FONT_SIZES_PX.items():
        rules.append(f".text-{name} {{ font-size: {px}px; }}")
    return "\n        ".join(rules)


def get_global_css(theme: str = "light") -> str:
    """Return global CSS for the given theme."""
    colors = THEMES.get(theme, THEMES["light"])
    return f"""
    <style>
        .stApp {{
            background: {colors['bg_primary']};
            color: {colors['text_primary']};
        }}

        .op-card {{
            background: {colors['bg_card']};
            border: 1px solid {colors['border']};
            border-radius: 12px;
            padding: 16px;
            margin-bottom: 12px;
        }}

        .op-card-title {{
            color: {colors['text_secondary']};
            font-size: 14px;
            font-weight: 600;
            margin-bottom: 8px;
        }}

        .op-badge {{
            display: inline-block;
            padding: 4px 8px;
            border-radius: 4px;
            font-size: 12px;
            font-weight: 600;
        }}

        {_utility_classes()}
    </style>
    """


def inject_styles(theme: str = "light"):
    """Inject global styles into the Streamlit app."""
    import streamlit as st
    st.markdown(get_global_css(theme), unsafe_allow_html=True)
