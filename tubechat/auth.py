"""
One-off helper that mints the YouTube refresh token used for liked videos,
watch history and ratings.

    python -m tubechat.auth

Needs YOUTUBE_CLIENT_ID and YOUTUBE_CLIENT_SECRET of a Google "Desktop app"
OAuth client. Save the printed refresh token as YOUTUBE_REFRESH_TOKEN.
"""

import logging
import os
import sys

from dotenv import load_dotenv
from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from tubechat.youtube_client import SCOPES, TOKEN_URL

logger = logging.getLogger(__name__)

AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
# Desktop clients must use a loopback redirect.
REDIRECT_URI = "http://localhost"


def build_flow(client_id: str, client_secret: str) -> Flow:
    client_config = {
        "installed": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": AUTH_URL,
            "token_uri": TOKEN_URL,
            "redirect_uris": [REDIRECT_URI],
        }
    }
    return Flow.from_client_config(client_config, scopes=list(SCOPES), redirect_uri=REDIRECT_URI)


def authorization_url(flow: Flow) -> str:
    # prompt=consent is what makes Google return a refresh token every time.
    url, _state = flow.authorization_url(access_type="offline", prompt="consent")
    return url


def exchange_code(flow: Flow, code: str) -> Credentials:
    flow.fetch_token(code=code.strip())
    return flow.credentials


def main() -> int:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s — %(message)s")
    client_id = os.getenv("YOUTUBE_CLIENT_ID") or os.getenv("GOOGLE_CLIENT_ID")
    client_secret = os.getenv("YOUTUBE_CLIENT_SECRET") or os.getenv("GOOGLE_CLIENT_SECRET")
    if not client_id or not client_secret:
        logger.error("Set YOUTUBE_CLIENT_ID and YOUTUBE_CLIENT_SECRET first.")
        return 1

    flow = build_flow(client_id, client_secret)
    print("\nAuthorize this app by visiting this URL:\n")
    print(authorization_url(flow))
    code = input("\nPaste the code you received here: ")

    try:
        creds = exchange_code(flow, code)
    except (OAuth2Error, GoogleAuthError) as e:
        logger.error("Error retrieving OAuth token: %s", e)
        return 1

    print("\n===== TOKEN RESULTS =====")
    print("ACCESS TOKEN:\n", creds.token)
    print("\nREFRESH TOKEN (save this as YOUTUBE_REFRESH_TOKEN):\n", creds.refresh_token)
    print("\n=========================\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
