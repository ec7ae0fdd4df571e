"""Configuration: frozen endpoints, fan-out bound and schema variant."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from storyfeed.errors import ConfigurationError
from storyfeed.schema import SCHEMA_VARIANTS, SchemaVariant

load_dotenv()

DEFAULT_INDEX_URL = "https://hacker-news.firebaseio.com/v0/topstories.json"
DEFAULT_ITEM_URL_TEMPLATE = "https://hacker-news.firebaseio.com/v0/item/{id}.json"
DEFAULT_MAX_ITEMS = 10
DEFAULT_USER_AGENT = "storyfeed/0.1"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for one load.

    Example:
        config = Config(max_items=5, schema="text")
        state = await load_stories(config)
    """

    index_url: str = DEFAULT_INDEX_URL
    #: Must contain an ``{id}`` placeholder.
    item_url_template: str = DEFAULT_ITEM_URL_TEMPLATE
    max_items: int = DEFAULT_MAX_ITEMS
    schema: SchemaVariant = "scored"
    #: ``None`` waits for every response indefinitely.
    timeout_s: float | None = None
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.max_items < 1:
            raise ConfigurationError(
                f"max_items must be ≥ 1, got {self.max_items}",
                hint="This bounds how many records are fetched in parallel.",
            )
        if "{id}" not in self.item_url_template:
            raise ConfigurationError(
                f"item_url_template has no {{id}} placeholder: {self.item_url_template!r}",
                hint="Use a template such as 'https://host/item/{id}.json'.",
            )
        try:
            self.item_url_template.format(id=0)
        except (KeyError, IndexError, ValueError, AttributeError, TypeError) as exc:
            raise ConfigurationError(
                f"item_url_template is not a valid template: {self.item_url_template!r}",
                hint="Only the {id} placeholder is supported; escape other braces as '{{' and '}}'.",
            ) from exc
        if self.schema not in SCHEMA_VARIANTS:
            raise ConfigurationError(
                f"Unknown schema: {self.schema!r}",
                hint="Supported schemas: 'scored', 'text'",
            )
        if self.timeout_s is not None and self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0 or None, got {self.timeout_s}",
                hint="Leave unset to wait for responses without a deadline.",
            )

    def item_url(self, item_id: int) -> str:
        """Return the record endpoint for ``item_id``."""
        return self.item_url_template.format(id=item_id)

    @classmethod
    def from_env(cls) -> Config:
        """Build a Config from ``STORYFEED_*`` environment variables.

        Unset variables keep their defaults.
        """
        kwargs: dict[str, object] = {}
        if index_url := os.environ.get("STORYFEED_INDEX_URL"):
            kwargs["index_url"] = index_url
        if item_url := os.environ.get("STORYFEED_ITEM_URL"):
            kwargs["item_url_template"] = item_url
        if schema := os.environ.get("STORYFEED_SCHEMA"):
            kwargs["schema"] = schema.strip().lower()
        if user_agent := os.environ.get("STORYFEED_USER_AGENT"):
            kwargs["user_agent"] = user_agent
        if max_items := os.environ.get("STORYFEED_MAX_ITEMS"):
            kwargs["max_items"] = _parse_number(int, "STORYFEED_MAX_ITEMS", max_items)
        if timeout := os.environ.get("STORYFEED_TIMEOUT_S"):
            kwargs["timeout_s"] = _parse_number(float, "STORYFEED_TIMEOUT_S", timeout)
        return cls(**kwargs)  # type: ignore[arg-type]


def _parse_number(kind: type[int] | type[float], name: str, value: str) -> int | float:
    try:
        return kind(value)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number, got {value!r}",
            hint=f"Unset {name} to use the default.",
        ) from None
