# =============================================================================
# core/csp.py - Content-Security-Policy Assembly
# =============================================================================
# Builds the Content-Security-Policy header from a shared list of trusted
# origins. Every directive starts from the same trusted base list; some
# directives get extra, directive-specific sources placed in front of it.
#
# Sources are only ever appended. Duplicates in the trusted list are kept
# as-is so the header matches the configured list exactly.
#
# Usage:
#   from core.csp import build_policy
#   policy = build_policy()
#   response.headers[policy.header_name] = policy.header_value()
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping


TRUSTED_ORIGINS: tuple[str, ...] = (
    "'self'",
    "blob:",
    "*.freecodecamp.com",
    "http://www.freecodecamp.com",
    "ws://freecodecamp.com/",
    "ws://www.freecodecamp.com/",
    "*.gstatic.com",
    "*.google-analytics.com",
    "*.googleapis.com",
    "*.google.com",
    "*.gstatic.com",
    "*.doubleclick.net",
    "*.twitter.com",
    "*.twitch.tv",
    "*.twimg.com",
    "'unsafe-eval'",
    "'unsafe-inline'",
    "*.bootstrapcdn.com",
    "*.cloudflare.com",
    "https://*.cloudflare.com",
    "localhost:3001",
    "ws://localhost:3001/",
    "http://localhost:3001",
    "localhost:3000",
    "ws://localhost:3000/",
    "http://localhost:3000",
    "*.ionicframework.com",
    "https://syndication.twitter.com",
    "*.youtube.com",
    "*.jsdelivr.net",
    "https://*.jsdelivr.net",
    "*.ytimg.com",
    "*.bitly.com",
    "http://cdn.inspectlet.com/",
    "wss://inspectletws.herokuapp.com/",
    "http://hn.inspectlet.com/",
)

# Directive-specific sources, emitted before the trusted base list.
DIRECTIVE_EXTRAS: dict[str, tuple[str, ...]] = {
    "default-src": (),
    "script-src": (
        "*.optimizely.com",
        "*.aspnetcdn.com",
        "*.d3js.org",
    ),
    "connect-src": (),
    "style-src": (),
    # user submitted images on public profiles can come from anywhere
    "img-src": ("*",),
    "font-src": ("*.googleapis.com",),
    "media-src": (
        "*.amazonaws.com",
        "*.twitter.com",
    ),
    "frame-src": (
        "*.gitter.im",
        "*.gitter.im https:",
        "*.vimeo.com",
        "*.twitter.com",
        "*.ghbtns.com",
    ),
}


@dataclass
class ContentSecurityPolicy:
    """
    Ordered mapping of CSP directives to their source lists.

    Attributes:
        directives: directive name -> list of sources, in header order
        report_only: Emit Content-Security-Policy-Report-Only instead
    """
    directives: dict[str, list[str]] = field(default_factory=dict)
    report_only: bool = False

    @property
    def header_name(self) -> str:
        if self.report_only:
            return "Content-Security-Policy-Report-Only"
        return "Content-Security-Policy"

    def extend(self, directive: str, sources: Iterable[str]) -> None:
        """Append sources to a directive, creating it if needed."""
        self.directives.setdefault(directive, []).extend(sources)

    def sources(self, directive: str) -> list[str]:
        return list(self.directives.get(directive, []))

    def header_value(self) -> str:
        """
        Render the policy as a header value.

        Example:
            "default-src 'self' blob:; img-src * 'self' blob:"
        """
        return "; ".join(
            f"{name} {' '.join(sources)}".rstrip()
            for name, sources in self.directives.items()
        )


def build_policy(
    trusted: Iterable[str] = TRUSTED_ORIGINS,
    extras: Mapping[str, Iterable[str]] | None = None,
    report_only: bool = False,
) -> ContentSecurityPolicy:
    """
    Seed every directive from the trusted list and add its extras.

    Args:
        trusted: Base origins shared by all directives
        extras: Directive-specific sources, placed before the base list
        report_only: Build a report-only policy

    Returns:
        ContentSecurityPolicy ready to be rendered into a header
    """
    base = list(trusted)
    policy = ContentSecurityPolicy(report_only=report_only)
    for directive, directive_extras in (extras or DIRECTIVE_EXTRAS).items():
        policy.extend(directive, directive_extras)
        policy.extend(directive, base)
    return policy
