"""Environment configuration for the Productive.io MCP server."""

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

from productive_mcp.errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.productive.io/api/v2/"
DEFAULT_TIMEOUT = 30.0
APP_URL = "https://app.productive.io"


@dataclass(frozen=True)
class InboxContext:
    """Caller identity for per-user views (inbox, my tasks)."""

    user_id: str
    org_id: str

    def task_url(self, task_id: str) -> str:
        return f"{APP_URL}/{self.org_id}/tasks/{task_id}"


@dataclass(frozen=True)
class ProductiveConfig:
    api_token: str
    org_id: str
    user_id: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "ProductiveConfig":
        """Build config from PRODUCTIVE_* environment variables.

        Raises ConfigurationError when the token or organization id is missing.
        """
        if load_dotenv_file:
            load_dotenv()

        token = os.getenv("PRODUCTIVE_API_TOKEN", "")
        org_id = os.getenv("PRODUCTIVE_ORG_ID", "")
        missing = [
            name
            for name, value in (("PRODUCTIVE_API_TOKEN", token), ("PRODUCTIVE_ORG_ID", org_id))
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        base_url = os.getenv("PRODUCTIVE_API_BASE_URL", DEFAULT_BASE_URL)
        if not base_url.endswith("/"):
            base_url += "/"

        try:
            timeout = float(os.getenv("PRODUCTIVE_TIMEOUT", DEFAULT_TIMEOUT))
        except ValueError as e:
            raise ConfigurationError(f"PRODUCTIVE_TIMEOUT must be a number: {e}") from e

        return cls(
            api_token=token,
            org_id=org_id,
            user_id=os.getenv("PRODUCTIVE_USER_ID", ""),
            base_url=base_url,
            timeout=timeout,
            log_level=os.getenv("PRODUCTIVE_LOG_LEVEL", "WARNING").upper(),
        )

    @property
    def has_user(self) -> bool:
        return bool(self.user_id)

    def inbox_context(self) -> InboxContext | None:
        """Return the caller context, or None when no user id is configured."""
        if not self.user_id:
            return None
        return InboxContext(user_id=self.user_id, org_id=self.org_id)

    def configure_logging(self) -> None:
        # stdout carries the stdio transport, so logs go to stderr
        logging.basicConfig(
            level=getattr(logging, self.log_level, logging.WARNING),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
