# breezyhr/response.py
from dataclasses import dataclass
from typing import Any, Optional

@dataclass(frozen=True)
class ApiResponse:
    """Result of a single API call"""
    status_code: int
    data: Any
    raw: Optional[str]
    url: str = ""

    @property
    def error(self):
        """Value of the "error" field when the body is a JSON object"""
        if isinstance(self.data, dict):
            return self.data.get("error")
        return None

    @property
    def failed(self) -> bool:
        # "0" counts as empty, like the falsy values
        return self.status_code >= 400 or not _is_empty(self.error)


def _is_empty(value) -> bool:
    return not value or value == "0"
