from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PhotoUrlResponse(BaseModel):
    url: str
    expires_in: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
