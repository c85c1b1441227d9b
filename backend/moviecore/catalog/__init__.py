from .demo import BUNDLED_THUMBNAILS, DEMO_MOVIES

__all__ = ["BUNDLED_THUMBNAILS", "DEMO_MOVIES"]
