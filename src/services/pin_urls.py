# src/services/pin_urls.py
from typing import Optional

PIN_PATH = "pinterest.com/pin/"
PINIMG_HOST = "pinimg.com"


def is_pin_url(url: Optional[str]) -> bool:
    """True when the value points at a canonical pin page."""
    return bool(url) and PIN_PATH in url


def is_pinimg_url(url: Optional[str]) -> bool:
    return bool(url) and PINIMG_HOST in url


def is_http_url(url: Optional[str]) -> bool:
    return bool(url) and url.lower().startswith(("http://", "https://"))

