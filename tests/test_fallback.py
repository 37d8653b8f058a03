"""主方式/备用方式测试"""

from relay_core.session.fallback import attempt_with_fallback, copy_text, open_external


class TestAttemptWithFallback:
    def test_primary_success_skips_fallback(self):
        calls = []

        ok = attempt_with_fallback(
            "demo",
            lambda: calls.append("primary") or True,
            lambda: calls.append("fallback") or True,
        )

        assert ok is True
        assert calls == ["primary"]

    def test_primary_exception_uses_fallback(self):
        def broken():
            raise RuntimeError("no display")

        assert attempt_with_fallback("demo", broken, lambda: True) is True

    def test_both_fail(self):
        def broken():
            raise RuntimeError("no display")

        assert attempt_with_fallback("demo", broken, lambda: False) is False

    def test_no_fallback(self):
        assert attempt_with_fallback("demo", lambda: False) is False


class TestHelpers:
    def test_open_external_passes_url(self):
        urls = []

        assert open_external("https://relay.example.com", lambda url: urls.append(url) or True) is True
        assert urls == ["https://relay.example.com"]

    def test_copy_text_fallback(self):
        copied = []

        def broken(text):
            raise OSError("clipboard unavailable")

        assert copy_text("sk-123", broken, lambda text: copied.append(text) or True) is True
        assert copied == ["sk-123"]
