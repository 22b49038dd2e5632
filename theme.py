"""Theme tokens rendered as CSS custom properties."""
from typing import Dict, Optional

# token name -> (section, key, fallback)
_SIMPLE_TOKENS = [
    ("--color-bg", "colors", "background", None),
    ("--color-text", "colors", "text", None),
    ("--color-accent", "colors", "accent", None),
    ("--color-secondary", "colors", "secondary", None),
    ("--color-surface", "colors", "surface", "#ffffff"),
    ("--color-testimonial-bg", "colors", "testimonial_background", "#ffffff"),
    ("--color-testimonial-role", "colors", "testimonial_role", "#a8a29e"),
    ("--font-serif", "fonts", "serif", None),
    ("--font-sans", "fonts", "sans", None),
    ("--font-size-base", "font_sizes", "base", None),
    ("--font-size-title", "font_sizes", "title", None),
    ("--font-size-subtitle", "font_sizes", "subtitle", None),
    ("--font-size-caption", "font_sizes", "caption", None),
]

ELEMENTS = ("title", "subtitle", "text", "caption")


def css_variables(theme: Optional[dict]) -> Dict[str, str]:
    if not theme:
        return {}
    out: Dict[str, str] = {}

    def put(name, value):
        if value:
            out[name] = str(value)

    for name, section, key, fallback in _SIMPLE_TOKENS:
        group = theme.get(section) or {}
        put(name, group.get(key) or fallback)

    styles = theme.get("element_styles") or {}
    for element in ELEMENTS:
        style = styles.get(element) or {}
        put(f"--elem-{element}-font", style.get("font"))
        put(f"--elem-{element}-color", style.get("color"))
    return out


def render_css(theme: Optional[dict]) -> str:
    lines = [f"  {name}: {value};" for name, value in css_variables(theme).items()]
    return ":root {\n" + "\n".join(lines) + "\n}\n"
