"""Tests for the shared locator helpers and the line-classification tables."""

import pytest

from vidyapith_content.locators import (
    decode_protected_email,
    email_from_anchor,
    find_all_by_keyword,
    find_by_keyword,
    find_heading,
    is_content_image,
    looks_like_email,
    nearest_ancestor,
    resolve_image_src,
    resolve_url,
    strip_tracking_params,
)
from vidyapith_content.normalizer import parse_document
from vidyapith_content.rules import LineRule, classify, contains_all, contains_any, starts_with_any

BASE = "https://www.vidyapith.org/events.html"


def _protect(email: str, key: int = 0x1c) -> str:
    """Encode an address the way the CDN email protection does."""
    return f"{key:02x}" + "".join(f"{ord(c) ^ key:02x}" for c in email)


def _first(html: str, tag: str):
    return parse_document(html).find(tag)


class TestAnchors:

    def test_find_heading_prefers_higher_level(self):
        doc = parse_document("<h2>Upcoming Events</h2><h1>Our Upcoming Events</h1>")
        assert find_heading(doc, "upcoming events").name == "h1"

    def test_find_heading_is_case_insensitive(self):
        doc = parse_document("<h3>THOUGHT OF THE DAY</h3>")
        assert find_heading(doc, "Thought of the Day") is not None

    def test_find_heading_missing(self):
        assert find_heading(parse_document("<p>nothing</p>"), "admissions") is None

    def test_find_by_keyword_in_document_order(self):
        doc = parse_document(
            "<table><tr><td>Zelle details</td><td>More Zelle</td></tr></table>"
        )
        cell = find_by_keyword(doc, lambda text: "zelle" in text)
        assert cell.get_text() == "Zelle details"

    def test_find_all_by_keyword(self):
        doc = parse_document("<p>one camp</p><p>two</p><p>camp three</p>")
        found = find_all_by_keyword(doc, lambda text: "camp" in text, "p")
        assert [p.get_text() for p in found] == ["one camp", "camp three"]

    def test_nearest_ancestor(self):
        doc = parse_document("<table><tr><td><strong>Adults</strong></td></tr></table>")
        strong = doc.find("strong")
        assert nearest_ancestor(strong, "td").name == "td"
        assert nearest_ancestor(strong, "section") is None
        assert nearest_ancestor(None, "td") is None


class TestUrls:

    def test_relative_href_resolved(self):
        assert resolve_url("donate.html", BASE) == "https://www.vidyapith.org/donate.html"
        assert resolve_url("//cdn.example.org/a.jpg", BASE) == "https://cdn.example.org/a.jpg"

    def test_absolute_href_unchanged(self):
        assert resolve_url("https://docs.google.com/forms/x", BASE) == "https://docs.google.com/forms/x"

    @pytest.mark.parametrize("href", [None, "", "   ", "javascript:void(0)", "http://[::1"])
    def test_unusable_hrefs(self, href):
        assert resolve_url(href, BASE) is None

    def test_strip_tracking_params(self):
        assert strip_tracking_params("https://x.org/a.jpg?1722619683") == "https://x.org/a.jpg"
        assert strip_tracking_params("https://x.org/a.jpg") == "https://x.org/a.jpg"

    def test_lazy_src_preferred(self):
        image = _first('<img src="placeholder.gif" data-src="/uploads/real.jpg">', "img")
        assert resolve_image_src(image, BASE) == "https://www.vidyapith.org/uploads/real.jpg"

    def test_first_srcset_candidate(self):
        image = _first('<img srcset="img-800.jpg 800w, img-400.jpg 400w">', "img")
        assert resolve_image_src(image, BASE) == "https://www.vidyapith.org/img-800.jpg"

    def test_data_uri_rejected(self):
        image = _first('<img src="data:image/png;base64,AAAA">', "img")
        assert resolve_image_src(image, BASE) is None


class TestContentImage:

    def test_plain_photo_accepted(self):
        image = _first('<img src="/uploads/photo.jpg" width="121">', "img")
        assert is_content_image(image, "https://www.vidyapith.org/uploads/photo.jpg")

    def test_logo_rejected_even_when_large(self):
        image = _first('<img src="/uploads/logo.png" width="800" height="600">', "img")
        assert not is_content_image(image, "https://www.vidyapith.org/uploads/logo.png")

    def test_small_declared_size_rejected(self):
        image = _first('<img src="/uploads/photo.jpg" height="120">', "img")
        assert not is_content_image(image, "https://www.vidyapith.org/uploads/photo.jpg")

    def test_percentage_size_ignored(self):
        image = _first('<img src="/uploads/photo.jpg" width="100%">', "img")
        assert is_content_image(image, "https://www.vidyapith.org/uploads/photo.jpg")

    def test_chrome_parent_class_rejected(self):
        image = _first('<div class="site-header"><img src="/uploads/photo.jpg"></div>', "img")
        assert not is_content_image(image, "https://www.vidyapith.org/uploads/photo.jpg")

    def test_unlisted_extension_rejected(self):
        image = _first('<img src="/uploads/spinner.gif">', "img")
        assert not is_content_image(image, "https://www.vidyapith.org/uploads/spinner.gif")


class TestEmails:

    def test_looks_like_email(self):
        assert looks_like_email("info@vidyapith.org")
        assert not looks_like_email("[email protected]")
        assert not looks_like_email(None)

    def test_decode_protected_email(self):
        assert decode_protected_email(_protect("foo@bar.com")) == "foo@bar.com"

    @pytest.mark.parametrize("payload", [None, "", "1c", "1c0", "zz1234"])
    def test_decode_rejects_malformed_payload(self, payload):
        assert decode_protected_email(payload) is None

    def test_decode_rejects_non_email_result(self):
        assert decode_protected_email(_protect("not an address")) is None

    def test_anchor_text(self):
        anchor = _first('<a href="#">info@vidyapith.org</a>', "a")
        assert email_from_anchor(anchor) == "info@vidyapith.org"

    def test_mailto_with_query(self):
        anchor = _first('<a href="mailto:pay@org.org?subject=Donation">Pay</a>', "a")
        assert email_from_anchor(anchor) == "pay@org.org"

    def test_protected_href_fragment(self):
        anchor = _first(
            f'<a href="/cdn-cgi/l/email-protection#{_protect("office@vidyapith.org")}">[email protected]</a>',
            "a",
        )
        assert email_from_anchor(anchor) == "office@vidyapith.org"

    def test_protected_descendant(self):
        anchor = _first(
            '<a href="/cdn-cgi/l/email-protection">'
            f'<span class="__cf_email__" data-cfemail="{_protect("alumni@vidyapith.org")}">[email protected]</span>'
            '</a>',
            "a",
        )
        assert email_from_anchor(anchor) == "alumni@vidyapith.org"

    def test_no_email(self):
        assert email_from_anchor(_first('<a href="/contact.html">Contact</a>', "a")) is None


class TestRules:

    RULES = [
        LineRule(starts_with_any("please note"), "note"),
        LineRule(contains_all("paypal", "giving"), "paypal"),
        LineRule(contains_any("check", "cheque"), "check"),
    ]

    def test_first_match_wins(self):
        assert classify("Please note: PayPal Giving Fund charges no fees", self.RULES) == "note"
        assert classify("Donate through the PayPal Giving Fund", self.RULES) == "paypal"

    def test_case_insensitive(self):
        assert classify("MAIL A CHECK", self.RULES) == "check"

    def test_unclassified(self):
        assert classify("Thank you", self.RULES) is None
