import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    openai_model: str
    openai_base_url: str
    youtube_api_key: str
    youtube_client_id: str
    youtube_client_secret: str
    youtube_refresh_token: str
    host: str
    port: int
    request_timeout: float
    allowed_origins: frozenset[str]  # empty = allow all

    @property
    def has_account_credentials(self) -> bool:
        return bool(
            self.youtube_client_id
            and self.youtube_client_secret
            and self.youtube_refresh_token
        )

    @classmethod
    def from_env(cls) -> "Settings":
        raw_origins = os.getenv("ALLOWED_ORIGIN", "")
        origins = frozenset(
            o.strip() for o in raw_origins.split(",") if o.strip() and o.strip() != "*"
        )
        return cls(
            openai_api_key=os.environ["OPENAI_API_KEY"],
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            openai_base_url=os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            youtube_api_key=os.environ["YOUTUBE_API_KEY"],
            youtube_client_id=os.getenv("YOUTUBE_CLIENT_ID", ""),
            youtube_client_secret=os.getenv("YOUTUBE_CLIENT_SECRET", ""),
            youtube_refresh_token=os.getenv("YOUTUBE_REFRESH_TOKEN", ""),
            host=os.getenv("HOST", "localhost"),
            port=int(os.getenv("PORT", "3001")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            allowed_origins=origins,
        )
