from dataclasses import dataclass


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    shortcode: str  # Unique short identifier (custom alias or generated code)
    target: str     # Normalized original URL
    short_url: str  # Public short URL, i.e. <base url>/<shortcode>
# fmt: on
