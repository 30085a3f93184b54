"""Metadata for site_auditor."""

__all__ = [
    "__title__",
    "__version__",
    "__description__",
    "__credits__",
    "__requires_python__",
]

__title__ = "site_auditor"
__version__ = "0.1.0"
__description__ = (
    "Rule-based website auditor: weighted category scores for a page or a whole site."
)
__credits__ = [
    {"name": "Matthew D. Martin", "email": "matthewdeanmartin@users.noreply.github.com"}
]
__requires_python__ = ">=3.9"
