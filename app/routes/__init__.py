from app.routes.post import router as post_router

__all__ = ["post_router"]
