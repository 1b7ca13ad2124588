"""Tests for cookie agents."""

from http.cookiejar import CookieJar

import httpx

from streamget.core import JarCookieAgent, RequestSpec, make_cookie_agent


def _spec(url: str) -> RequestSpec:
    return RequestSpec().set_url(url)


class TestJarCookieAgent:
    def test_nothing_to_attach(self):
        """An empty jar attaches no header."""
        agent = JarCookieAgent()
        assert agent.attach(_spec("http://example.com/")) is None

    def test_store_then_attach(self):
        """Stored cookies are attached to matching requests."""
        agent = JarCookieAgent()
        agent.store(_spec("http://example.com/login"), ["session=abc; Path=/"])
        assert agent.attach(_spec("http://example.com/account")) == "session=abc"

    def test_multiple_cookies_joined(self):
        """Several cookies are joined with semicolons."""
        agent = JarCookieAgent()
        agent.store(_spec("http://example.com/"), ["a=1; Path=/", "b=2; Path=/"])
        value = agent.attach(_spec("http://example.com/"))
        assert sorted(value.split("; ")) == ["a=1", "b=2"]

    def test_other_host_gets_nothing(self):
        """Cookies stay with the host that set them."""
        agent = JarCookieAgent()
        agent.store(_spec("http://example.com/"), ["session=abc; Path=/"])
        assert agent.attach(_spec("http://another.com/")) is None

    def test_path_is_respected(self):
        """Cookies scoped to a path are not sent elsewhere."""
        agent = JarCookieAgent()
        agent.store(_spec("http://example.com/admin/login"), ["admin=1; Path=/admin"])
        assert agent.attach(_spec("http://example.com/admin/panel")) == "admin=1"
        assert agent.attach(_spec("http://example.com/public")) is None

    def test_secure_cookie_needs_https(self):
        """Secure cookies are only attached over https."""
        agent = JarCookieAgent()
        agent.store(_spec("https://example.com/"), ["token=s; Path=/; Secure"])
        assert agent.attach(_spec("http://example.com/")) is None
        assert agent.attach(_spec("https://example.com/")) == "token=s"

    def test_store_without_values_is_noop(self):
        """No Set-Cookie values leaves the jar untouched."""
        jar = httpx.Cookies()
        JarCookieAgent(jar).store(_spec("http://example.com/"), [])
        assert len(jar) == 0


class TestMakeCookieAgent:
    def test_default_jar(self):
        """None gives a fresh in-memory jar."""
        agent = make_cookie_agent()
        assert isinstance(agent, JarCookieAgent)
        assert len(agent.jar) == 0

    def test_wraps_cookiejar(self):
        """A stdlib CookieJar is shared, not copied."""
        jar = CookieJar()
        agent = make_cookie_agent(jar)
        agent.store(_spec("http://example.com/"), ["a=1; Path=/"])
        assert [cookie.name for cookie in jar] == ["a"]

    def test_custom_agent_used_directly(self):
        """Objects with attach and store are used as-is."""

        class StaticAgent:
            def attach(self, spec):
                return "fixed=1"

            def store(self, spec, values):
                pass

        agent = StaticAgent()
        assert make_cookie_agent(agent) is agent
