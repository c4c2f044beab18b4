from typing import Optional

from pydantic import BaseModel

DEFAULT_ENDPOINT = "https://kagi.com/api/v0/fastgpt"
DEFAULT_TIMEOUT = 60.0

# Number of most recent conversation entries replayed into each query
HISTORY_WINDOW = 5


class Settings(BaseModel):
    """Persisted user settings (config.yaml)."""

    api_key: Optional[str] = None
    show_references: bool = True


class ClientConfig(BaseModel):
    """Resolved configuration consumed by a session."""

    api_key: str
    cache: bool = True
    json_mode: bool = False
    show_references: bool = True
    history_window: int = HISTORY_WINDOW
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = DEFAULT_TIMEOUT
