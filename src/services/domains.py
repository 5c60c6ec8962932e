# src/services/domains.py
import re

_TLD_RE = re.compile(r"\.(com|org|net|co|io)$")
_SCHEME_RE = re.compile(r"^[a-z]+://")


def normalize_domain(domain: str) -> str:
    """Lowercase a website domain and drop scheme, www. prefix and trailing path."""
    d = _SCHEME_RE.sub("", domain.strip().lower())
    d = d.split("/", 1)[0]
    if d.startswith("www."):
        d = d[4:]
    return d


def strip_tld(domain: str) -> str:
    """airfryerauthority.com -> airfryerauthority"""
    return _TLD_RE.sub("", normalize_domain(domain))
