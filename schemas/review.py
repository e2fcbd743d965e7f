from pydantic import BaseModel, Field, field_validator

from models.review import MIN_RATING, MAX_RATING


class ReviewInput(BaseModel):
    """
    A product review submission.

    Example:
    {
        "rating": 4,
        "comment": "Solid build, battery could be better"
    }
    """
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING, description="Star rating from 1 to 5")
    comment: str = Field(default='', max_length=2000, description="Free text comment")

    @field_validator('rating', mode='before')
    @classmethod
    def reject_boolean_rating(cls, value):
        # bool is an int subclass and would otherwise pass as 0 or 1
        if isinstance(value, bool):
            raise ValueError('rating must be a number, not a boolean')
        return value
