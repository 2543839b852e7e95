from __future__ import annotations

from .Collectable import Collectable

__all__: list[str] = [
    'Collectable',
]
