from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

from tubechat.auth import build_flow, authorization_url, exchange_code
from tubechat.youtube_client import SCOPES


def test_authorization_url_requests_offline_consent():
    flow = build_flow("cid.apps.googleusercontent.com", "secret")

    url = urlparse(authorization_url(flow))
    params = parse_qs(url.query)

    assert url.netloc == "accounts.google.com"
    assert params["client_id"] == ["cid.apps.googleusercontent.com"]
    assert params["access_type"] == ["offline"]
    assert params["prompt"] == ["consent"]
    assert params["scope"] == [" ".join(SCOPES)]
    assert params["redirect_uri"] == ["http://localhost"]


def test_exchange_code_strips_pasted_code():
    flow = MagicMock()

    creds = exchange_code(flow, " 4/abc \n")

    flow.fetch_token.assert_called_once_with(code="4/abc")
    assert creds is flow.credentials
