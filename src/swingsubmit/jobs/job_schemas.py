"""Wire schema for ``GET /status/{job_id}``."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class JobStatusResponse(BaseModel):
    """Only ``status`` is strict; ``result`` and ``error`` are read once it is known."""

    status: str
    result: Any = None
    error: Any = None

    def result_payload(self) -> dict[str, Any] | None:
        if isinstance(self.result, dict) and self.result:
            return self.result
        return None

    def error_message(self) -> str | None:
        if self.error is None or isinstance(self.error, str):
            return self.error
        if isinstance(self.error, dict) and isinstance(self.error.get("message"), str):
            return self.error["message"]
        return str(self.error)
