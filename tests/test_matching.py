"""Tests for domain patterns and page-filter applicability."""

import pytest

from browser_actions.registry.errors import ApplicabilityCheckFailed
from browser_actions.registry.matching import ApplicabilityMatcher, compile_domain_pattern, extract_host
from browser_actions.registry.views import ActionDescriptor, PageState


def _noop() -> None:
    return None


def _descriptor(**kwargs) -> ActionDescriptor:
    return ActionDescriptor(name=kwargs.pop("name", "act"), description="d", handler=_noop, **kwargs)


SHEETS = PageState(url="https://docs.google.com/spreadsheets/d/1")
OTHER = PageState(url="https://example.com/")


class TestDomainPatterns:
    """Test host pattern matching."""

    @pytest.mark.parametrize(
        "pattern, url, expected",
        [
            ("example.com", "https://example.com/path", True),
            ("example.com", "https://www.example.com/", False),
            ("*.example.com", "https://www.example.com/", True),
            ("*.example.com", "https://example.com/", True),
            ("*.example.com", "https://badexample.com/", False),
            ("docs.*.com", "https://docs.google.com/", True),
            ("https://example.com", "http://example.com/", True),
            ("EXAMPLE.com", "https://example.COM/", True),
            ("example.com", "https://example.com.evil.io/", False),
        ],
    )
    def test_pattern(self, pattern: str, url: str, expected: bool) -> None:
        matcher = ApplicabilityMatcher()
        assert matcher.match_domains([pattern], url) is expected

    def test_no_patterns_matches_everything(self) -> None:
        assert ApplicabilityMatcher().match_domains(None, "about:blank") is True

    def test_url_without_host_does_not_match(self) -> None:
        assert ApplicabilityMatcher().match_domains(["*"], "about:blank") is False

    def test_compiled_patterns_are_cached(self) -> None:
        assert compile_domain_pattern("a.com") is compile_domain_pattern("a.com")

    def test_extract_host(self) -> None:
        assert extract_host("https://User@Example.com:8080/x") == "example.com"
        assert extract_host("") is None


class TestPageFilter:
    """Test page predicates."""

    def test_filter_result_used(self) -> None:
        matcher = ApplicabilityMatcher()
        wants_title = lambda page: page.title == "Inbox"
        assert matcher.match_page_filter(wants_title, PageState(url="https://x.io", title="Inbox"))
        assert not matcher.match_page_filter(wants_title, PageState(url="https://x.io"))

    def test_raising_filter_wrapped(self) -> None:
        def broken(page: PageState) -> bool:
            raise KeyError("title")

        with pytest.raises(ApplicabilityCheckFailed) as exc_info:
            ApplicabilityMatcher().match_page_filter(broken, OTHER, action="compose")
        assert isinstance(exc_info.value.cause, KeyError)
        assert "compose" in str(exc_info.value)


class TestVisibility:
    """Test the describe and dispatch visibility rules."""

    def test_global_visible_only_without_page(self) -> None:
        matcher = ApplicabilityMatcher()
        action = _descriptor()
        assert matcher.is_visible(action, None)
        assert not matcher.is_visible(action, OTHER)

    def test_scoped_visible_only_on_matching_page(self) -> None:
        matcher = ApplicabilityMatcher()
        action = _descriptor(domains=["docs.google.com"])
        assert not matcher.is_visible(action, None)
        assert matcher.is_visible(action, SHEETS)
        assert not matcher.is_visible(action, OTHER)

    def test_domains_and_filter_both_required(self) -> None:
        matcher = ApplicabilityMatcher()
        action = _descriptor(domains=["docs.google.com"], page_filter=lambda p: "spreadsheets" in p.url)
        assert matcher.is_available(action, SHEETS)
        assert not matcher.is_available(action, PageState(url="https://docs.google.com/document/d/1"))

    def test_global_always_available(self) -> None:
        matcher = ApplicabilityMatcher()
        action = _descriptor()
        assert matcher.is_available(action, None)
        assert matcher.is_available(action, OTHER)

    def test_scoped_unavailable_without_page(self) -> None:
        assert not ApplicabilityMatcher().is_available(_descriptor(page_filter=lambda p: True), None)
