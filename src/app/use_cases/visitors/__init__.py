from .rate_visitor_use_case import RateVisitorUseCase

__all__ = ["RateVisitorUseCase"]
