# site_auditor/suggestions.py
# One-line fix hints shown next to warn/fail results.

from __future__ import annotations

DEFAULT_SUGGESTION = "Review this result's details and fix the underlying issue"

FIX_SUGGESTIONS: dict[str, str] = {
    # core
    "core-title": "Add a unique <title> of 10-60 characters inside <head>",
    "core-meta-description": 'Add <meta name="description" content="..."> with 50-160 characters',
    "core-canonical": 'Add <link rel="canonical" href="..."> pointing at the preferred URL',
    "core-h1": "Use exactly one <h1> that describes the page's main topic",
    "core-indexable": "Remove noindex/nofollow unless the page is meant to stay out of search",
    # technical
    "technical-status-code": "Serve the page with a 200 status, or link to the final URL",
    "technical-content-type": "Send Content-Type: text/html; charset=utf-8",
    "technical-doctype": "Start the document with <!DOCTYPE html>",
    # perf
    "perf-response-time": "Lower TTFB: cache responses, use a CDN, speed up backend queries",
    "perf-lcp": "Optimize LCP: preload the hero image, inline critical CSS, cut server time",
    "perf-html-size": "Trim inline scripts, styles and data from the HTML document",
    # links
    "links-internal": "Link to related pages on your own site",
    "links-anchor-text": 'Use descriptive anchor text instead of "click here" or "read more"',
    "links-internal-nofollow": "Drop rel=nofollow from links to your own pages",
    # images
    "images-alt-text": "Add descriptive alt text to every image (alt=\"\" for decorative ones)",
    "images-dimensions": "Add width and height attributes to prevent layout shifts",
    # security
    "security-https": "Install a TLS certificate and redirect all HTTP traffic to HTTPS",
    "security-headers": "Add HSTS, CSP, X-Content-Type-Options, X-Frame-Options and Referrer-Policy",
    "security-mixed-content": "Load every subresource over HTTPS",
    # crawl
    "crawl-indexability-conflict": "Either remove noindex or point the canonical at this URL",
    "crawl-schema-noindex": "Remove structured data from noindex pages, or allow indexing",
    # schema
    "schema-present": "Add JSON-LD structured data for rich search results",
    "schema-valid": "Fix JSON-LD syntax errors; validate with a rich results tester",
    "schema-organization": "Add name, url, logo and sameAs to the Organization schema",
    # a11y
    "a11y-form-labels": "Associate every form field with a <label for=...> or aria-label",
    "a11y-button-names": "Give buttons visible text or an aria-label",
    # content
    "content-word-count": "Expand thin content to at least 300 words",
    "content-meta-in-body": "Move all <meta> tags from <body> into <head>",
    # social
    "social-open-graph": "Add og:title, og:type, og:image and og:url meta properties",
    "social-twitter-card": 'Add <meta name="twitter:card" content="summary_large_image">',
    # eeat
    "eeat-author-info": "Add an author byline linking to an author bio page",
    "eeat-contact-info": "Link to a contact or about page",
    # url
    "url-length": "Shorten the URL to under 100 characters",
    "url-hygiene": "Use lowercase, hyphen-separated paths without spaces or double slashes",
    # mobile
    "mobile-viewport": 'Add <meta name="viewport" content="width=device-width, initial-scale=1">',
    # i18n
    "i18n-lang-attribute": 'Add a valid lang attribute: <html lang="en">',
    "i18n-hreflang": 'Add <link rel="alternate" hreflang="x-default" href="...">',
    # legal
    "legal-privacy-policy": "Link to your privacy policy from every page, usually in the footer",
    "legal-terms-of-service": "Link to your terms of service from the footer",
    "legal-cookie-consent": "Add a cookie consent banner that gates tracking scripts",
}


def fix_suggestion(rule_id: str) -> str:
    return FIX_SUGGESTIONS.get(rule_id, DEFAULT_SUGGESTION)
