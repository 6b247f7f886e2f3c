"""
Tests for log sanitizers
"""
from storefront.logging import sanitize_id_for_logging, sanitize_string_for_logging


def test_id_prefix_only():
    """Test ids are cut to a short prefix."""
    assert sanitize_id_for_logging("session-abc123-def456") == "session-"
    assert sanitize_id_for_logging("tok") == "tok"
    assert sanitize_id_for_logging(None) == "N/A"


def test_string_escapes_newlines_and_truncates():
    """Test control characters are escaped and long text cut."""
    assert sanitize_string_for_logging("ok\nFAKE LINE") == "ok\\nFAKE LINE"
    assert sanitize_string_for_logging("x" * 60, max_length=10) == "x" * 10 + "..."
    assert sanitize_string_for_logging("") == "N/A"
