from typing import Annotated

from fastapi import Depends, Path, status
from pydantic import BaseModel

from taskboard.errors import ApiError


def parse_id(id: str = Path(description="Positive integer identifier")) -> int:
    try:
        value = int(id)
    except ValueError:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid ID parameter") from None
    if value <= 0:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid ID parameter")
    return value


ValidId = Annotated[int, Depends(parse_id)]


def require_fields(payload: BaseModel, fields: list[str]) -> None:
    """Reject the request if any required field is absent, null or empty."""
    missing = [name for name in fields if not getattr(payload, name, None)]
    if missing:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST,
            f"Missing required fields: {', '.join(missing)}",
        )
