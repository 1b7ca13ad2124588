"""Tests for redirect loop detection."""

from streamget.core import RedirectTracker


class TestRedirectTracker:
    def test_first_visit_is_not_a_loop(self):
        """A new location is never a loop."""
        tracker = RedirectTracker()
        assert tracker.visit("http://a/") is False
        assert tracker.visits("http://a/") == 1

    def test_second_visit_with_zero_budget(self):
        """With budget 0 the second visit is a loop."""
        tracker = RedirectTracker(max_redirects=0)
        tracker.visit("http://a/")
        assert tracker.visit("http://a/") is True

    def test_loop_does_not_increment(self):
        """Detected loops leave the count unchanged."""
        tracker = RedirectTracker(max_redirects=0)
        tracker.visit("http://a/")
        tracker.visit("http://a/")
        tracker.visit("http://a/")
        assert tracker.visits("http://a/") == 1

    def test_budget_of_one(self):
        """Budget 1 allows two visits."""
        tracker = RedirectTracker(max_redirects=1)
        assert tracker.visit("k") is False
        assert tracker.visit("k") is False
        assert tracker.visit("k") is True

    def test_keys_are_independent(self):
        """Each location has its own count."""
        tracker = RedirectTracker()
        assert tracker.visit(("http", "a", "/")) is False
        assert tracker.visit(("http", "b", "/")) is False
        assert tracker.visit(("https", "a", "/")) is False
