from core.settings import settings

__all__ = ["settings"]
