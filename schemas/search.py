from pydantic import BaseModel, Field

MAX_TERM_LENGTH = 200


class SearchInput(BaseModel):
    """A single search term submitted by a user. Surrounding whitespace is stripped."""
    term: str = Field(
        min_length=1,
        max_length=MAX_TERM_LENGTH,
        description="The search term as typed by the user"
    )

    model_config = {'str_strip_whitespace': True}
