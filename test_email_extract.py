import pytest

from lead_enrich.email_extract import extract_emails, is_asset_filename, pick_best_email


def test_finds_addresses_in_first_seen_order():
    text = "write bob@shop.test, or alice@shop.test; again bob@shop.test"
    assert extract_emails(text) == ["bob@shop.test", "alice@shop.test"]


def test_dedupe_is_case_sensitive():
    text = "a@x.com A@x.com a@x.com"
    assert extract_emails(text) == ["a@x.com", "A@x.com"]


def test_mailto_links_in_source():
    html = '<a href="mailto:owner@plumbing.test?subject=Hi">Email</a>'
    assert extract_emails(html) == ["owner@plumbing.test"]


def test_uppercase_addresses_match():
    assert extract_emails("INFO@ROOFING.TEST") == ["INFO@ROOFING.TEST"]


@pytest.mark.parametrize("asset", [
    "logo@2x.png",
    "hero@3x.JPG",
    "banner@2x.jpeg",
    "spinner@1x.gif",
    "icon@2x.svg",
    "photo@2x.webp",
])
def test_asset_filenames_are_not_emails(asset):
    assert is_asset_filename(asset)
    assert extract_emails(f'<img src="/static/{asset}"> contact: hi@shop.test') == ["hi@shop.test"]


def test_extraction_is_stable():
    text = "x@a.test y@b.test info@c.test"
    assert extract_emails(text) == extract_emails(text)


def test_no_addresses():
    assert extract_emails("") == []
    assert extract_emails("nothing @ here") == []


def test_pick_prefers_role_account_over_position():
    assert pick_best_email(["jane@x.com", "info@x.com"]) == "info@x.com"


def test_pick_falls_back_to_first_seen():
    assert pick_best_email(["jane@x.com", "bob@x.com"]) == "jane@x.com"


@pytest.mark.parametrize("role", ["info", "contact", "hello", "support", "admin", "INFO", "Hello"])
def test_pick_role_prefixes(role):
    assert pick_best_email(["jane@x.com", f"{role}@x.com"]) == f"{role}@x.com"


def test_pick_first_role_account_wins():
    assert pick_best_email(["jane@x.com", "support@x.com", "info@x.com"]) == "support@x.com"


def test_pick_nothing():
    assert pick_best_email([]) == ""
