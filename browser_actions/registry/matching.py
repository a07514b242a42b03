"""Domain and page-filter applicability of actions.

Two visibility rules are used:

- is_visible (prompt descriptions): global actions are listed only when no
  page is given; scoped actions only when a page is given and matches.
  The agent prompt lists global actions once and page-specific actions per
  step, so the two sets never overlap.
- is_available (dispatch and tool catalogue): global actions are always
  available; scoped actions need a matching page.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from functools import lru_cache
from urllib.parse import urlparse

from .errors import ApplicabilityCheckFailed
from .views import ActionDescriptor, PageFilter, PageState


logger = logging.getLogger(__name__)


def extract_host(url: str) -> str | None:
    """Lower-cased host of url, or None if it has none or cannot be parsed."""
    if not url or not isinstance(url, str):
        return None
    try:
        host = urlparse(url.strip()).hostname
    except ValueError:
        return None
    return host or None


@lru_cache(maxsize=256)
def compile_domain_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a glob-style host pattern to an anchored regex.

    '*' matches any run of characters. A leading '*.' also matches the bare
    parent domain, so '*.example.com' covers 'example.com' and any subdomain.
    A scheme prefix such as 'https://' is ignored.
    """
    host_pattern = pattern.strip().lower()
    if "://" in host_pattern:
        host_pattern = host_pattern.split("://", 1)[1]
    host_pattern = host_pattern.split("/", 1)[0]

    prefix = ""
    if host_pattern.startswith("*."):
        prefix = r"(?:.*\.)?"
        host_pattern = host_pattern[2:]
    body = ".*".join(re.escape(part) for part in host_pattern.split("*"))
    return re.compile(f"{prefix}{body}")


class ApplicabilityMatcher:
    """Decides whether an action can be offered on a page."""

    def match_domains(self, patterns: Iterable[str] | None, url: str | None) -> bool:
        if not patterns:
            return True
        host = extract_host(url or "")
        if host is None:
            return False
        return any(compile_domain_pattern(p).fullmatch(host) for p in patterns)

    def match_page_filter(
        self,
        page_filter: PageFilter | None,
        page: PageState,
        *,
        action: str | None = None,
    ) -> bool:
        if page_filter is None:
            return True
        try:
            return bool(page_filter(page))
        except Exception as e:
            raise ApplicabilityCheckFailed(action, e) from e

    def matches(self, descriptor: ActionDescriptor, page: PageState) -> bool:
        """Domain match and page-filter match for a concrete page."""
        if not self.match_domains(descriptor.domains, page.url):
            return False
        return self.match_page_filter(descriptor.page_filter, page, action=descriptor.name)

    def is_visible(self, descriptor: ActionDescriptor, page: PageState | None) -> bool:
        if descriptor.is_global:
            return page is None
        if page is None:
            return False
        return self.matches(descriptor, page)

    def is_available(self, descriptor: ActionDescriptor, page: PageState | None) -> bool:
        if descriptor.is_global:
            return True
        if page is None:
            return False
        return self.matches(descriptor, page)
