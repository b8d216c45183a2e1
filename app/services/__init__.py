from app.services.post import PostService, derive_slug

__all__ = ["PostService", "derive_slug"]
