from .cascade_service import CascadeService


__all__ = [
    "CascadeService",
]
