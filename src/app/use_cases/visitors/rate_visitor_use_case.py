from datetime import datetime
from typing import Callable
from uuid import UUID

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.clock import utcnow
from src.domain.errors import ErrorCode
from src.domain.principal import Principal


class RateVisitorResponse(BaseModel):
    visitor_id: str
    rating: float
    total_ratings: int


class RateVisitorUseCase:
    """
    Use case for rating a visitor (1 to 5).

    The exact sum of ratings is kept; the exposed rating is the average
    over all ratings, rounded to one decimal.
    """

    def __init__(self, uow: UnitOfWork, clock: Callable[[], datetime] = utcnow):
        self.uow = uow
        self.clock = clock

    async def execute(
        self, principal: Principal, visitor_id: UUID, rating: int
    ) -> Result[RateVisitorResponse]:
        if rating < 1 or rating > 5:
            return Return.err(
                Error(ErrorCode.VALIDATION_ERROR, "Rating must be between 1 and 5", {"rating": rating})
            )

        async with self.uow:
            visitor = await self.uow.visitors.get_by_id(visitor_id)
            if visitor is None:
                return Return.err(Error(ErrorCode.VISITOR_NOT_FOUND, "Visitor not found"))

            if not principal.belongs_to(visitor.building_id):
                return Return.err(Error(ErrorCode.FORBIDDEN, "You cannot rate this visitor"))

            visitor.rating_total += rating
            visitor.total_ratings += 1
            visitor.rating = round(visitor.rating_total / visitor.total_ratings, 1)
            visitor.updated_at = self.clock()
            await self.uow.visitors.update(visitor)
            await self.uow.commit()

            return Return.ok(
                RateVisitorResponse(
                    visitor_id=str(visitor.id),
                    rating=visitor.rating,
                    total_ratings=visitor.total_ratings,
                )
            )
