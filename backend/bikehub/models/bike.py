from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from typing import Any, Mapping
from bikehub.errors import ValidationError

REQUIRED_FIELDS = ("name", "price", "desc", "image")


class BikeCreate(BaseModel):
    name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    desc: str
    image: str

    @field_validator("name", "desc", "image")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class Bike(BaseModel):
    id: str
    name: str
    price: float
    desc: str
    image: str


def validate_bike(data: Mapping[str, Any]) -> BikeCreate:
    """
    Check a listing submission before anything is stored.
    Every one of name, price, desc and image must be present.
    """
    missing = [f for f in REQUIRED_FIELDS if data.get(f) is None or data.get(f) == ""]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing=missing)
    try:
        return BikeCreate.model_validate({f: data[f] for f in REQUIRED_FIELDS})
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid {field}: {first['msg']}")
