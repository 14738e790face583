from .visit import VisitMiddleware

__all__ = ["VisitMiddleware"]
