from datetime import date
from typing import Annotated, Literal

from pydantic import BeforeValidator, EmailStr


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Form inputs send "" for a cleared date
OptionalDate = Annotated[date | None, BeforeValidator(_blank_to_none)]

# "" clears the stored email
OptionalEmail = EmailStr | Literal[""] | None
