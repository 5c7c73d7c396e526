"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DEFAULT_SEARCH_URL = "https://www.google.com/search"
DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/133.0.0.0 Safari/537.36"
)
MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.4 Mobile/15E148 Safari/604.1"
)


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GoogleSearchConfig(Base):
    """Google results page fetch settings."""

    base_url: str = DEFAULT_SEARCH_URL
    desktop_user_agent: str = DESKTOP_USER_AGENT  # web results
    mobile_user_agent: str = MOBILE_USER_AGENT  # image results
    timeout: float = Field(default=10.0, gt=0)


class Config(Base):
    """Root configuration for heatsearch."""

    search: GoogleSearchConfig = Field(default_factory=GoogleSearchConfig)
