from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import Field, PrivateAttr, ValidationError  # type: ignore[import]
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore[import]

from pash.errors import ConfigIncompleteError, ConfigMissingError, IOFailureError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "pash"
CONFIG_FILE = CONFIG_DIR / "config"
DEFAULT_MAX_FILES_TO_REVIEW = 20
REVIEW_DIR_NAME = ".pash_reviews"

PLACEHOLDERS = {
    "LITELLM_API_URL": "your-litellm-api-url",
    "LITELLM_API_KEY": "your-litellm-api-key",
    "LITELLM_MODEL": "your-model-name",
}

CONFIG_TEMPLATE = f"""# PASH Code Review Framework configuration
# Run 'pash init' to fill in these values.

# Base URL of the LiteLLM (or any OpenAI-compatible) proxy.
LITELLM_API_URL="{PLACEHOLDERS['LITELLM_API_URL']}"
LITELLM_API_KEY="{PLACEHOLDERS['LITELLM_API_KEY']}"
LITELLM_MODEL="{PLACEHOLDERS['LITELLM_MODEL']}"

# Refuse to review diffs touching more files than this.
MAX_FILES_TO_REVIEW={DEFAULT_MAX_FILES_TO_REVIEW}
"""


@dataclass(frozen=True)
class ReviewCredentials:
    api_url: str
    api_key: str
    model: str


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    litellm_api_url: Optional[str] = Field(default=None, alias="LITELLM_API_URL")
    litellm_api_key: Optional[str] = Field(default=None, alias="LITELLM_API_KEY")
    litellm_model: Optional[str] = Field(default=None, alias="LITELLM_MODEL")
    max_files_to_review: int = Field(
        default=DEFAULT_MAX_FILES_TO_REVIEW,
        alias="MAX_FILES_TO_REVIEW",
        ge=0,
        description="Maximum number of changed files a single review may contain",
    )

    _config_file: Optional[Path] = PrivateAttr(default=None)
    _config_found: bool = PrivateAttr(default=False)

    @classmethod
    def load(cls, config_file: str | Path = CONFIG_FILE) -> "Settings":
        """Read settings from a shell-style ``KEY="value"`` file.

        A missing file is not an error here; it only becomes one once a review
        needs credentials (see :meth:`require_review_credentials`).
        """
        path = Path(config_file).expanduser()
        found = path.is_file()
        try:
            loaded = cls(_env_file=path if found else None)  # type: ignore[call-arg]
        except ValidationError as exc:
            fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
            raise ConfigIncompleteError(f"Invalid configuration in {path}: {fields}") from exc

        loaded._config_file = path
        loaded._config_found = found
        logger.debug("Loaded settings from %s (found=%s)", path, found)
        return loaded

    @property
    def config_file(self) -> Optional[Path]:
        return self._config_file

    def missing_values(self) -> list[str]:
        values = {
            "LITELLM_API_URL": self.litellm_api_url,
            "LITELLM_API_KEY": self.litellm_api_key,
            "LITELLM_MODEL": self.litellm_model,
        }
        missing = []
        for name, value in values.items():
            cleaned = (value or "").strip()
            if not cleaned or cleaned == PLACEHOLDERS[name]:
                missing.append(name)
        return missing

    def require_review_credentials(self) -> ReviewCredentials:
        """Ensure the LiteLLM endpoint is configured and return its credentials."""

        missing = self.missing_values()
        if missing:
            if self._config_file is not None and not self._config_found:
                raise ConfigMissingError(
                    f"Configuration file not found: {self._config_file}. Please run 'pash init' to create it."
                )
            raise ConfigIncompleteError(
                "LiteLLM is not configured (missing: " + ", ".join(missing) + "). Please run 'pash init' to set it up."
            )

        return ReviewCredentials(
            api_url=self.litellm_api_url.strip(),  # type: ignore[union-attr]
            api_key=self.litellm_api_key.strip(),  # type: ignore[union-attr]
            model=self.litellm_model.strip(),  # type: ignore[union-attr]
        )


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def write_config(config_file: str | Path, *, api_url: str, api_key: str, model: str) -> Path:
    """Create the config file from the template if needed and set the LiteLLM keys.

    Lines other than the three LiteLLM assignments are preserved.
    """
    path = Path(config_file).expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        text = path.read_text(encoding="utf-8") if path.exists() else CONFIG_TEMPLATE

        for key, value in (
            ("LITELLM_API_URL", api_url),
            ("LITELLM_API_KEY", api_key),
            ("LITELLM_MODEL", model),
        ):
            line = f"{key}={_quote(value.strip())}"
            pattern = re.compile(rf"^{key}=.*$", re.MULTILINE)
            if pattern.search(text):
                text = pattern.sub(lambda _match: line, text)
            else:
                text = text.rstrip("\n") + f"\n{line}\n"

        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise IOFailureError(f"Failed to write configuration file {path}: {exc}") from exc

    return path
