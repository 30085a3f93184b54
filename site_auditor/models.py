# Defines the data structures used throughout the application.

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Literal, Mapping, Optional, Union

from bs4 import BeautifulSoup

RuleStatus = Literal["pass", "warn", "fail"]

# Default scores used by the result helpers below.
STATUS_SCORES: dict[str, int] = {"pass": 100, "warn": 50, "fail": 0}


@dataclass(frozen=True)
class CategoryDefinition:
    """A named, weighted grouping of rules. Weight is a percentage."""

    id: str
    name: str
    description: str
    weight: int


@dataclass(frozen=True)
class CoreWebVitals:
    """Optional browser metrics. Only carried, never measured, by this package."""

    lcp: Optional[float] = None  # ms
    fid: Optional[float] = None  # ms
    cls: Optional[float] = None
    ttfb: Optional[float] = None  # ms
    fcp: Optional[float] = None  # ms
    inp: Optional[float] = None  # ms


@dataclass(frozen=True)
class LinkInfo:
    href: str
    text: str
    is_internal: bool
    is_nofollow: bool


@dataclass(frozen=True)
class ImageInfo:
    src: str
    alt: str
    has_alt: bool
    width: Optional[str] = None
    height: Optional[str] = None
    is_lazy_loaded: bool = False


@dataclass(frozen=True)
class AuditContext:
    """
    Immutable snapshot of one fetched page.

    Rules read this; they never mutate it and never do their own network I/O.
    `soup` is a parsed view of `html` and must be treated as read-only.
    """

    url: str
    html: str
    soup: BeautifulSoup = field(repr=False, compare=False)
    headers: Mapping[str, str] = field(default_factory=dict)
    status_code: int = 200
    response_time: int = 0  # ms
    cwv: CoreWebVitals = field(default_factory=CoreWebVitals)
    links: tuple[LinkInfo, ...] = ()
    images: tuple[ImageInfo, ...] = ()

    def __post_init__(self) -> None:
        # Freeze the header mapping and the sequences a caller may have passed as lists.
        object.__setattr__(
            self,
            "headers",
            MappingProxyType({k.lower(): v for k, v in dict(self.headers).items()}),
        )
        object.__setattr__(self, "links", tuple(self.links))
        object.__setattr__(self, "images", tuple(self.images))

    @property
    def internal_links(self) -> list[LinkInfo]:
        return [link for link in self.links if link.is_internal]

    @property
    def external_links(self) -> list[LinkInfo]:
        return [link for link in self.links if not link.is_internal]


@dataclass(frozen=True)
class RuleResult:
    """The outcome of one rule on one page."""

    rule_id: str
    status: RuleStatus
    message: str
    score: int
    details: Mapping[str, Any] = field(default_factory=dict)
    # Stamped by the pipeline so pooled results can be traced back to a page.
    page_url: Optional[str] = None


RuleFunction = Callable[[AuditContext], Union[RuleResult, Awaitable[RuleResult]]]


@dataclass(frozen=True)
class AuditRule:
    """A single independent check. Registered once, never mutated."""

    id: str
    name: str
    category: str
    run: RuleFunction = field(compare=False, repr=False)
    description: str = ""
    weight: int = 1


@dataclass
class CategoryResult:
    """Aggregated results for a category."""

    category_id: str
    score: int
    pass_count: int = 0
    warn_count: int = 0
    fail_count: int = 0
    results: list[RuleResult] = field(default_factory=list)


@dataclass
class AuditResult:
    """The final result of a single-page or crawl audit."""

    url: str
    overall_score: int
    category_results: list[CategoryResult] = field(default_factory=list)
    timestamp: str = ""  # ISO 8601 format
    crawled_pages: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CrawledPage:
    """One crawl outcome: a context on success, an error message on failure."""

    url: str
    context: Optional[AuditContext] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.context is not None and self.error is None


def passed(
    rule_id: str,
    message: str,
    details: Mapping[str, Any] | None = None,
    score: int = STATUS_SCORES["pass"],
) -> RuleResult:
    return RuleResult(rule_id, "pass", message, score, dict(details or {}))


def warned(
    rule_id: str,
    message: str,
    details: Mapping[str, Any] | None = None,
    score: int = STATUS_SCORES["warn"],
) -> RuleResult:
    return RuleResult(rule_id, "warn", message, score, dict(details or {}))


def failed(
    rule_id: str,
    message: str,
    details: Mapping[str, Any] | None = None,
    score: int = STATUS_SCORES["fail"],
) -> RuleResult:
    return RuleResult(rule_id, "fail", message, score, dict(details or {}))
