from .routes import router, game_router

__all__ = ["router", "game_router"]
