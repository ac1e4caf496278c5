"""Session cookie attributes per deployment topology.

Invariants:
    - production: Secure and SameSite=none on both the session and the cleared cookie
    - development: SameSite=strict, never Secure
    - always HttpOnly and Path=/
"""

from fastapi import Response

from app.api.session_cookie import (
    CookiePolicy, clear_session_cookie, set_session_cookie,
)

WEEK = 7 * 24 * 3600


def _set_cookie_header(response: Response) -> str:
    return response.headers["set-cookie"]


def test_production_session_cookie_is_secure_and_cross_site():
    response = Response()
    set_session_cookie(response, "tok", CookiePolicy(production=True, max_age_seconds=WEEK))
    header = _set_cookie_header(response)
    assert header.startswith("token=tok")
    assert "Secure" in header
    assert "SameSite=none" in header
    assert "HttpOnly" in header
    assert "Path=/" in header
    assert f"Max-Age={WEEK}" in header


def test_production_logout_cookie_keeps_attributes():
    response = Response()
    clear_session_cookie(response, CookiePolicy(production=True, max_age_seconds=WEEK))
    header = _set_cookie_header(response)
    assert "Secure" in header
    assert "SameSite=none" in header
    assert "HttpOnly" in header
    assert "Max-Age=0" in header
    assert "1970" in header


def test_development_cookie_is_strict_and_not_secure():
    response = Response()
    set_session_cookie(response, "tok", CookiePolicy(production=False, max_age_seconds=WEEK))
    header = _set_cookie_header(response)
    assert "SameSite=strict" in header
    assert "Secure" not in header
