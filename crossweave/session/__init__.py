from .session import DrawingSession, SessionUpdate

__all__ = ["DrawingSession", "SessionUpdate"]
