from __future__ import annotations

import pytest

from site_auditor.categories import DEFAULT_CATEGORIES
from site_auditor.fetcher import build_context
from site_auditor.models import CoreWebVitals
from site_auditor.rules import CATALOG_MODULES, build_default_registry
from site_auditor.rules import (
    a11y,
    content,
    core,
    crawl,
    eeat,
    i18n,
    images,
    legal,
    links,
    mobile,
    perf,
    schema,
    security,
    social,
    technical,
    url,
)
from site_auditor.suggestions import DEFAULT_SUGGESTION, FIX_SUGGESTIONS, fix_suggestion

BODY_TEXT = " ".join(["Each table is planed, jointed and oiled by hand in our workshop."] * 30)

GOOD_PAGE = """<!DOCTYPE html>
<html lang="en-US">
<head>
  <title>Handmade Oak Furniture | Example Co</title>
  <meta name="description" content="Solid oak tables, chairs and shelving, built to order in our workshop and delivered nationwide.">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <meta name="author" content="Jo Carpenter">
  <link rel="canonical" href="https://site.test/">
  <meta property="og:title" content="Oak">
  <meta property="og:type" content="website">
  <meta property="og:image" content="https://site.test/og.png">
  <meta property="og:url" content="https://site.test/">
  <meta name="twitter:card" content="summary">
  <script type="application/ld+json">
    {"@context": "https://schema.org", "@type": "Organization", "name": "Example Co",
     "url": "https://site.test/", "logo": "https://site.test/logo.png",
     "sameAs": ["https://social.test/exampleco"]}
  </script>
</head>
<body>
  <h1>Oak furniture</h1>
  <p>BODY_TEXT</p>
  <a href="/tables">Dining tables</a>
  <a href="/chairs">Chairs</a>
  <a href="/shelves">Shelving</a>
  <img src="/oak.jpg" alt="An oak table" width="640" height="480">
  <footer>
    <a href="/contact">Contact us</a>
    <a href="/privacy">Privacy policy</a>
    <a href="/terms">Terms of service</a>
  </footer>
</body>
</html>
""".replace("BODY_TEXT", BODY_TEXT)

GOOD_HEADERS = {
    "Content-Type": "text/html; charset=utf-8",
    "Strict-Transport-Security": "max-age=63072000",
    "Content-Security-Policy": "default-src 'self'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin",
}


def ctx(html="<html><head></head><body></body></html>", url="https://site.test/", **kw):
    return build_context(url, html, **kw)


def test_registry_is_built_in_catalog_order():
    registry = build_default_registry()
    expected = [rule.id for module in CATALOG_MODULES for rule in module.RULES]
    assert [r.id for r in registry.all_rules()] == expected
    assert len(set(expected)) == len(expected)


def test_every_rule_belongs_to_a_known_category():
    known = {c.id for c in DEFAULT_CATEGORIES}
    registry = build_default_registry()
    assert set(registry.categories()) <= known
    for rule in registry.all_rules():
        assert rule.weight > 0
        assert rule.id.startswith(rule.category + "-")


def test_each_build_is_a_fresh_registry():
    a = build_default_registry()
    b = build_default_registry()
    a.clear()
    assert len(b) > 0


def test_good_page_passes_everything():
    context = ctx(GOOD_PAGE, headers=GOOD_HEADERS, response_time=120)
    registry = build_default_registry()
    failures = [
        (rule.id, result.message)
        for rule in registry.all_rules()
        for result in [rule.run(context)]
        if result.status != "pass"
    ]
    assert failures == []


def test_empty_page_fails_core_rules():
    context = ctx()
    assert core.check_title(context).status == "fail"
    assert core.check_meta_description(context).status == "fail"
    assert core.check_canonical(context).status == "fail"
    assert core.check_h1(context).status == "fail"
    assert core.check_indexable(context).status == "pass"


def test_title_length_warns():
    result = core.check_title(ctx("<title>Hi</title>"))
    assert result.status == "warn"
    assert result.score == 50
    assert result.details["length"] == 2


def test_multiple_h1_warns():
    result = core.check_h1(ctx("<h1>a</h1><h1>b</h1>"))
    assert result.status == "warn"
    assert result.details["count"] == 2


@pytest.mark.parametrize(
    "html, headers, status",
    [
        ('<meta name="robots" content="noindex, follow">', {}, "fail"),
        ("", {"X-Robots-Tag": "none"}, "fail"),
        ('<meta name="robots" content="nofollow">', {}, "warn"),
        ('<meta name="robots" content="index, follow">', {}, "pass"),
    ],
)
def test_indexable(html, headers, status):
    assert core.check_indexable(ctx(html, headers=headers)).status == status


@pytest.mark.parametrize("code, status", [(200, "pass"), (301, "warn"), (404, "fail"), (500, "fail")])
def test_status_code(code, status):
    assert technical.check_status_code(ctx(status_code=code)).status == status


@pytest.mark.parametrize(
    "ctype, status",
    [
        (None, "warn"),
        ("application/json", "fail"),
        ("text/html", "warn"),
        ("text/html; charset=UTF-8", "pass"),
    ],
)
def test_content_type(ctype, status):
    headers = {"content-type": ctype} if ctype else {}
    assert technical.check_content_type(ctx(headers=headers)).status == status


def test_doctype():
    assert technical.check_doctype(ctx("  <!doctype HTML><html></html>")).status == "pass"
    assert technical.check_doctype(ctx("<html></html>")).status == "warn"


def test_response_time_prefers_measured_ttfb():
    slow = ctx(response_time=2500)
    assert perf.check_response_time(slow).status == "fail"
    measured = ctx(response_time=2500, cwv=CoreWebVitals(ttfb=300))
    assert perf.check_response_time(measured).status == "pass"
    assert perf.check_response_time(ctx(response_time=1000)).status == "warn"


def test_lcp_unmeasured_is_neutral():
    assert perf.check_lcp(ctx()).status == "pass"
    assert perf.check_lcp(ctx(cwv=CoreWebVitals(lcp=3000))).status == "warn"
    assert perf.check_lcp(ctx(cwv=CoreWebVitals(lcp=5000))).status == "fail"


def test_html_size():
    big = "<html><body>" + "x" * (150 * 1024) + "</body></html>"
    assert perf.check_html_size(ctx(big)).status == "warn"


def test_links_rules():
    html = (
        '<a href="/a">here</a>'
        '<a href="/b" rel="nofollow">Pricing</a>'
        '<a href="https://elsewhere.test/">Partner</a>'
    )
    context = ctx(html)
    internal = links.check_internal_links(context)
    assert internal.status == "warn"
    assert internal.details["internal"] == 2
    assert links.check_anchor_text(context).status == "warn"
    assert links.check_internal_nofollow(context).status == "warn"

    assert links.check_internal_links(ctx()).status == "fail"
    assert links.check_anchor_text(ctx('<a href="/x"></a>')).status == "fail"


def test_alt_text_scores_share_of_images_with_alt():
    html = '<img src="/1.png" alt="one"><img src="/2.png" alt=""><img src="/3.png">'
    result = images.check_alt_text(ctx(html))
    assert result.status == "warn"
    # 2 of 3 carry alt; round(66.67) == 67
    assert result.score == 67
    assert result.details["missing"] == ["https://site.test/3.png"]

    assert images.check_alt_text(ctx('<img src="/1.png">')).status == "fail"
    assert images.check_alt_text(ctx()).status == "pass"


def test_image_dimensions():
    html = '<img src="/1.png" width="1" height="1"><img src="/2.png" width="1">'
    result = images.check_dimensions(ctx(html))
    assert result.status == "warn"
    assert result.score == 50


def test_https_and_mixed_content():
    assert security.check_https(ctx(url="http://site.test/")).status == "fail"
    mixed = ctx('<script src="http://cdn.test/a.js"></script>')
    assert security.check_mixed_content(mixed).status == "fail"
    plain_http = ctx('<script src="http://cdn.test/a.js"></script>', url="http://site.test/")
    assert security.check_mixed_content(plain_http).details["applicable"] is False


def test_security_headers_partial_score():
    headers = {"Strict-Transport-Security": "max-age=1", "X-Frame-Options": "DENY"}
    result = security.check_security_headers(ctx(headers=headers))
    assert result.status == "warn"
    assert result.score == 40
    assert security.check_security_headers(ctx()).status == "fail"


def test_open_graph_and_twitter():
    partial = ctx('<meta property="og:title" content="T">')
    result = social.check_open_graph(partial)
    assert result.status == "warn"
    assert result.details["missing"] == ["og:type", "og:image", "og:url"]
    assert social.check_open_graph(ctx()).status == "fail"
    assert social.check_twitter_card(ctx()).status == "warn"


@pytest.mark.parametrize(
    "page_url, status",
    [
        ("https://site.test/oak-tables", "pass"),
        ("https://site.test/Oak_Tables", "warn"),
        ("https://site.test/a//b", "warn"),
        ("https://site.test/" + "a" * 120, "warn"),
    ],
)
def test_url_rules(page_url, status):
    context = ctx(url=page_url)
    statuses = {url.check_url_length(context).status, url.check_url_hygiene(context).status}
    assert ("warn" in statuses) == (status == "warn")


@pytest.mark.parametrize(
    "content, status",
    [
        (None, "fail"),
        ("", "fail"),
        ("initial-scale=1", "warn"),
        ("width=device-width, user-scalable=no", "warn"),
        ("width=device-width, initial-scale=1", "pass"),
    ],
)
def test_viewport(content, status):
    html = "" if content is None else f'<meta name="viewport" content="{content}">'
    assert mobile.check_viewport(ctx(html)).status == status


@pytest.mark.parametrize(
    "html, status",
    [
        ("<p>no html element</p>", "fail"),
        ("<html></html>", "fail"),
        ('<html lang="english"></html>', "warn"),
        ('<html lang="zh-Hant-TW"></html>', "pass"),
    ],
)
def test_lang_attribute(html, status):
    assert i18n.check_lang_attribute(ctx(html)).status == status


def test_hreflang():
    one = '<link rel="alternate" hreflang="de" href="/de">'
    assert i18n.check_hreflang(ctx(one)).status == "warn"
    both = one + '<link rel="alternate" hreflang="x-default" href="/">'
    assert i18n.check_hreflang(ctx(both)).details["count"] == 2
    assert i18n.check_hreflang(ctx(both)).status == "pass"


def test_every_category_has_rules():
    registry = build_default_registry()
    assert [c.id for c in DEFAULT_CATEGORIES] == registry.categories()


def test_every_rule_has_a_fix_suggestion():
    registry = build_default_registry()
    missing = [rule.id for rule in registry.all_rules() if rule.id not in FIX_SUGGESTIONS]
    assert missing == []
    assert set(FIX_SUGGESTIONS) == {rule.id for rule in registry.all_rules()}
    assert fix_suggestion("no-such-rule") == DEFAULT_SUGGESTION


LD = '<script type="application/ld+json">%s</script>'


def test_schema_present_and_valid():
    assert schema.check_present(ctx()).status == "warn"
    assert schema.check_valid(ctx()).status == "warn"

    ok = ctx(LD % '{"@type": "WebSite", "name": "x"}')
    assert schema.check_present(ok).status == "pass"
    assert schema.check_valid(ok).status == "pass"

    broken = ctx(LD % '{"@type": "WebSite",')
    result = schema.check_valid(broken)
    assert result.status == "fail"
    assert result.details["invalid"][0]["script_index"] == 0

    mixed = ctx(LD % '{"@type": "WebSite"}' + LD % "")
    result = schema.check_valid(mixed)
    assert result.status == "warn"
    assert result.details["invalid"] == [{"script_index": 1, "error": "Empty JSON-LD script"}]


def test_schema_organization():
    assert schema.check_organization(ctx()).details == {"found": False}
    nameless = ctx(LD % '{"@type": "Organization", "url": "https://site.test"}')
    assert schema.check_organization(nameless).status == "warn"

    in_graph = ctx(LD % '{"@graph": [{"@type": ["Organization"], "name": "Co"}]}')
    result = schema.check_organization(in_graph)
    assert result.status == "warn"
    assert result.score == 75
    assert result.details["missing"] == ["logo", "sameAs", "url"]


@pytest.mark.parametrize(
    "head, status",
    [
        ('<link rel="canonical" href="https://site.test/">', "pass"),
        ('<meta name="robots" content="noindex">', "pass"),
        ('<meta name="robots" content="noindex"><link rel="canonical" href="/">', "warn"),
        ('<meta name="robots" content="noindex"><link rel="canonical" href="/other">', "fail"),
    ],
)
def test_noindex_canonical_conflict(head, status):
    assert crawl.check_noindex_canonical_conflict(ctx(head)).status == status


def test_noindex_canonical_conflict_from_header():
    context = ctx('<link rel="canonical" href="https://site.test/other">', headers={"X-Robots-Tag": "noindex"})
    assert crawl.check_noindex_canonical_conflict(context).status == "fail"


def test_schema_on_noindex_page():
    noindex = '<meta name="robots" content="noindex">'
    assert crawl.check_schema_noindex_conflict(ctx(noindex + LD % "{}")).status == "warn"
    assert crawl.check_schema_noindex_conflict(ctx(LD % "{}")).status == "pass"


def test_word_count_ignores_scripts_styles_and_comments():
    html = (
        "<html><head><title>one two</title></head><body>"
        "<p>three four five</p><script>var six = seven;</script>"
        "<style>.eight { nine: ten }</style><!-- eleven twelve -->"
        "<p>don't stop</p></body></html>"
    )
    assert content.word_count(build_context("https://site.test/", html).soup) == 5


@pytest.mark.parametrize("words, status", [(50, "fail"), (150, "warn"), (400, "pass")])
def test_word_count_thresholds(words, status):
    html = "<html><body><p>" + " ".join(["word"] * words) + "</p></body></html>"
    result = content.check_word_count(ctx(html))
    assert result.status == status
    assert result.details["words"] == words


def test_meta_in_body():
    html = (
        "<html><head></head><body>"
        '<meta name="description" content="late">'
        '<div itemscope><meta itemprop="price" content="10"></div>'
        "</body></html>"
    )
    result = content.check_meta_in_body(ctx(html))
    assert result.status == "fail"
    assert result.details["tags"] == ["description"]
    assert content.check_meta_in_body(ctx()).status == "pass"


def test_form_labels():
    html = (
        '<label for="email">Email</label><input id="email" type="email">'
        '<label>Name <input name="name"></label>'
        '<input name="q" aria-label="Search">'
        '<input name="phone">'
        '<input type="hidden" name="csrf">'
        '<input type="submit" value="Go">'
    )
    result = a11y.check_form_labels(ctx(html))
    assert result.status == "warn"
    assert result.details == {"fields": 4, "unlabelled": ["phone"]}
    assert result.score == 75

    assert a11y.check_form_labels(ctx("<textarea></textarea>")).status == "fail"
    assert a11y.check_form_labels(ctx()).status == "pass"


def test_button_names():
    html = '<button>Buy</button><button aria-label="Close">x</button><button><img src="/i.png" alt="Menu"></button>'
    assert a11y.check_button_names(ctx(html)).status == "pass"
    assert a11y.check_button_names(ctx('<button class="icon"></button>')).status == "warn"


@pytest.mark.parametrize(
    "html, status",
    [
        ("", "warn"),
        ('<meta name="author" content="Jo">', "pass"),
        ('<a rel="author" href="/jo">Jo</a>', "pass"),
        ('<span class="post-byline">By Jo</span>', "pass"),
        ('<span itemprop="author">Jo</span>', "pass"),
    ],
)
def test_author_info(html, status):
    assert eeat.check_author_info(ctx(html)).status == status


def test_contact_info():
    assert eeat.check_contact_info(ctx('<a href="/about-us">About</a>')).status == "pass"
    assert eeat.check_contact_info(ctx('<a href="mailto:hi@site.test">Mail</a>')).status == "pass"
    # a contact page on another site does not count
    assert eeat.check_contact_info(ctx('<a href="https://other.test/contact">c</a>')).status == "warn"


def test_privacy_and_terms_links():
    html = '<a href="/legal/privacy">Privacy</a><a href="/t">Terms &amp; conditions</a>'
    assert legal.check_privacy_policy(ctx(html)).status == "pass"
    assert legal.check_terms_of_service(ctx(html)).status == "pass"
    assert legal.check_privacy_policy(ctx()).status == "warn"
    assert legal.check_terms_of_service(ctx()).status == "warn"


def test_cookie_consent_only_needed_when_tracking():
    tracker = '<script src="https://www.googletagmanager.com/gtag/js?id=G-1"></script>'
    assert legal.check_cookie_consent(ctx()).details == {"needed": False}

    result = legal.check_cookie_consent(ctx(tracker))
    assert result.status == "warn"
    assert result.details["trackers"] == ["googletagmanager.com"]

    gated = tracker + '<script src="https://consent.cookiebot.com/uc.js"></script>'
    assert legal.check_cookie_consent(ctx(gated)).status == "pass"

    cookie_only = ctx(headers={"Set-Cookie": "sid=1"})
    assert legal.check_cookie_consent(cookie_only).status == "warn"
