import pytest
import requests

from vaultguard.breach import BreachChecker
from vaultguard.errors import BreachCheckFailure

# SHA-1("password") = 5BAA61E4C9B93F3F0682250B6CF8331B7EE68FD8
PREFIX = "5BAA6"
SUFFIX = "1E4C9B93F3F0682250B6CF8331B7EE68FD8"


class FakeResponse:
    def __init__(self, text="", status_code=200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.headers = {}
        self.response = response
        self.exc = exc
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


def test_only_prefix_is_sent():
    session = FakeSession(FakeResponse(f"{SUFFIX}:3861493\r\n"))
    BreachChecker(session=session).check("password")
    url, timeout = session.requested[0]
    assert url == f"https://api.pwnedpasswords.com/range/{PREFIX}"
    assert SUFFIX not in url
    assert timeout == (5, 5)
    assert "User-Agent" in session.headers


def test_count_of_matching_suffix_is_returned():
    body = f"0018A45C4D1DEF81644B54AB7F969B88D65:1\r\n{SUFFIX}:3861493\r\n011053FD0102E94D6AE2F8B83D76FAF94F6:1"
    assert BreachChecker(session=FakeSession(FakeResponse(body))).check("password") == 3861493


def test_unknown_suffix_counts_zero():
    body = "0018A45C4D1DEF81644B54AB7F969B88D65:1\n"
    assert BreachChecker(session=FakeSession(FakeResponse(body))).check("password") == 0


def test_suffix_match_is_case_sensitive():
    assert BreachChecker.parse_response(SUFFIX, f"{SUFFIX.lower()}:12") == 0


@pytest.mark.parametrize("exc", [requests.ConnectionError("offline"), requests.ConnectTimeout("slow")])
def test_unreachable_api_fails_open(exc):
    assert BreachChecker(session=FakeSession(exc=exc)).check("password") == 0


def test_http_error_is_breach_check_failure():
    checker = BreachChecker(session=FakeSession(FakeResponse("", status_code=500)))
    with pytest.raises(BreachCheckFailure):
        checker.check("password")


def test_malformed_count_is_breach_check_failure():
    with pytest.raises(BreachCheckFailure):
        BreachChecker.parse_response(SUFFIX, f"{SUFFIX}:lots")
