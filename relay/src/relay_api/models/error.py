from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class Error(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
