"""
Focal points carried inside image URLs.

An image URL may end with a ``pos=X,Y`` query parameter where X and Y are
percentages of the image width and height. The pair is stripped before the
URL is handed to the browser and becomes the CSS object/background position
used when the image is cropped:

    >>> parse_image("https://cdn/x.jpg?pos=30,70")
    ImageRef(src='https://cdn/x.jpg', position='30% 70%', x='30', y='70')
"""
import math
import re
from typing import NamedTuple, Optional

FOCAL_POINT_RE = re.compile(r"([?&])pos=([\d.]+),([\d.]+)")


class ImageRef(NamedTuple):
    src: str
    position: Optional[str] = None
    x: Optional[str] = None
    y: Optional[str] = None


def parse_image(url: Optional[str]) -> ImageRef:
    if not url:
        return ImageRef(src="")
    match = FOCAL_POINT_RE.search(url)
    if not match:
        return ImageRef(src=url)

    start, end = match.span()
    rest = url[end:]
    # the pair was the first parameter, promote the next one
    if match.group(1) == "?" and rest.startswith("&"):
        rest = "?" + rest[1:]
    x, y = match.group(2), match.group(3)
    return ImageRef(src=url[:start] + rest, position=f"{x}% {y}%", x=x, y=y)


def _percent(value: float) -> int:
    value = min(max(float(value), 0.0), 100.0)
    return int(math.floor(value + 0.5))


def with_focal_point(url: str, x: float, y: float) -> str:
    src = parse_image(url).src
    separator = "&" if "?" in src else "?"
    return f"{src}{separator}pos={_percent(x)},{_percent(y)}"


def focal_point_from_click(click_x: float, click_y: float, left: float, top: float,
                           width: float, height: float) -> tuple:
    """Turn a click inside a rendered image box into (x%, y%)."""
    if width <= 0 or height <= 0:
        raise ValueError("image box has no size")
    x = (click_x - left) / width * 100
    y = (click_y - top) / height * 100
    return x, y


def image_style(url: Optional[str]) -> dict:
    ref = parse_image(url)
    if not ref.position:
        return {}
    return {"objectPosition": ref.position, "backgroundPosition": ref.position}


def present(url: Optional[str]) -> dict:
    ref = parse_image(url)
    return {"src": ref.src, "position": ref.position}
