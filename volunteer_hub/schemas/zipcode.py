from pydantic import BaseModel


class ZipcodeResponse(BaseModel):
    model_config = {"from_attributes": True}

    zipcode: str
    city: str | None = None
    state: str | None = None
    latitude: float
    longitude: float
