# site_auditor/urls.py
from __future__ import annotations

import fnmatch
import logging
import os
from typing import Iterable
from urllib.parse import urljoin, urlparse

import tldextract

log = logging.getLogger(__name__)

# Bundled public suffix snapshot only: scope checks must not trigger network I/O.
_tld_extract = tldextract.TLDExtract(cache_dir=None, suffix_list_urls=())

# Paths with these extensions are assets, not pages; the crawler never GETs them.
EXTENSION_DENYLIST = {
    # images
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".bmp",
    ".ico",
    ".svg",
    ".avif",
    # video/audio
    ".mp4",
    ".m4v",
    ".mov",
    ".webm",
    ".ogg",
    ".ogv",
    ".mp3",
    ".wav",
    # docs/binaries/archives
    ".pdf",
    ".zip",
    ".tar",
    ".gz",
    ".tgz",
    ".7z",
    ".rar",
    ".exe",
    ".dmg",
    ".iso",
    ".woff",
    ".woff2",
    ".ttf",
    ".otf",
    ".doc",
    ".docx",
    ".xls",
    ".xlsx",
    # styles/scripts
    ".css",
    ".js",
    ".mjs",
    ".map",
    ".xml",
    ".json",
}

ALLOWED_SCHEMES = {"http", "https"}

# hrefs that never point at a page
_SKIP_PREFIXES = ("javascript:", "mailto:", "tel:", "data:", "#")


def _scheme(u: str) -> str:
    try:
        return urlparse(u).scheme.lower()
    except ValueError:
        return ""


def is_fetchable_url(u: str) -> bool:
    """Return True iff URL uses a scheme we can actually fetch (http/https)."""
    return _scheme(u) in ALLOWED_SCHEMES


def _path_ext(u: str) -> str:
    try:
        _, ext = os.path.splitext(urlparse(u).path.lower())
        return ext
    except ValueError:
        return ""


def is_probably_html_url(u: str) -> bool:
    """
    Heuristic: http/https AND path extension NOT in a denylist.
    Allows extensionless paths and 'clean URLs'.
    """
    if not is_fetchable_url(u):
        return False
    ext = _path_ext(u)
    return not (ext and ext in EXTENSION_DENYLIST)


def normalize_url(url: str) -> str:
    """
    Normalize scheme/netloc to lowercase, drop fragment, and trim trailing slash.
    - Trim trailing "/" for *any* path, including root ("/").
    - Robust to malformed URLs (returns input on failure).
    """
    try:
        p = urlparse(url)
        if p.path == "/":
            path = ""
        elif p.path.endswith("/") and len(p.path) > 1:
            path = p.path[:-1]
        else:
            path = p.path

        return p._replace(
            scheme=(p.scheme or "").lower(),
            netloc=(p.netloc or "").lower(),
            path=path,
            fragment="",
        ).geturl()
    except ValueError:
        return url


def resolve_href(base_url: str, href: str | None) -> str | None:
    """Resolve an href against the page URL; None for non-page hrefs."""
    if not href:
        return None
    href = href.strip()
    if not href or href.lower().startswith(_SKIP_PREFIXES):
        return None
    try:
        return urljoin(base_url, href)
    except ValueError:
        return None


def hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def registrable_domain(host: str) -> str:
    """
    Returns eTLD+1 for a host. Falls back to the host minus a leading 'www.'
    when tldextract cannot split it (IP addresses, localhost).
    """
    ext = _tld_extract(host)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}".lower()
    return host[4:] if host.startswith("www.") else host


def is_same_site(candidate: str, seed: str, use_registrable_domain: bool = False) -> bool:
    """
    Scope test for crawling.

    By default the candidate host must equal the seed host. With
    `use_registrable_domain`, any host under the same eTLD+1 is in scope
    (www.example.com and blog.example.com crawl together).
    """
    c_host = hostname(candidate)
    s_host = hostname(seed)
    if not c_host or not s_host:
        return False
    if c_host == s_host:
        return True
    if use_registrable_domain:
        return registrable_domain(c_host) == registrable_domain(s_host)
    return False


def _host_and_hostpath(u: str) -> tuple[str, str]:
    """
    Returns (host, host+path) both lowercased and normalized:
      "https://Example.com/Blog/?page=2" -> ("example.com", "example.com/blog")
    Query/fragment are ignored for matching.
    """
    p = urlparse(normalize_url(u))
    host = (p.netloc or "").lower()
    path = (p.path or "").lstrip("/").lower()
    return host, (f"{host}/{path}" if path else host)


def matches_any(u: str, patterns: Iterable[str]) -> bool:
    """
    fnmatch `u` against host and host+path forms, e.g. 'example.com/admin/*'.
    A leading '*.' pattern matches subdomains only, never the bare domain.
    """
    patterns = [p.lower().strip() for p in patterns if p and p.strip()]
    if not patterns:
        return False

    host, hostpath = _host_and_hostpath(u)
    if not host:
        return False

    candidates = {host, f"{host}/", hostpath, f"{hostpath}/", f"{hostpath}/*"}
    for p in patterns:
        if any(fnmatch.fnmatchcase(c, p) for c in candidates):
            return True
        if p.startswith("*."):
            suffix = p[2:].replace("/*", "").rstrip("/")
            if host.endswith("." + suffix):
                return True
    return False
