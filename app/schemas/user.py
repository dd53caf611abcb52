from pydantic import BaseModel, ConfigDict
from datetime import datetime

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    auth_subject: str
    display_name: str | None = None
    created_at: datetime

class GetOrCreateUserIn(BaseModel):
    auth_subject: str
    display_name: str | None = None
