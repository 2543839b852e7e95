from __future__ import annotations

import os
import pickle
from typing import Optional


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    return int(value)


class Settings:
    # JSON encoding
    JSON_ENSURE_ASCII: bool = os.getenv("COLLECTION_JSON_ENSURE_ASCII", "false").lower() == "true"
    JSON_INDENT: Optional[int] = _optional_int(os.getenv("COLLECTION_JSON_INDENT"))
    
    # Byte serialization
    SERIALIZE_PROTOCOL: int = int(os.getenv("COLLECTION_SERIALIZE_PROTOCOL", str(pickle.DEFAULT_PROTOCOL)))
    
    # Logging
    LOG_LEVEL: str = os.getenv("COLLECTION_LOG_LEVEL", "WARNING").upper()


settings = Settings()
