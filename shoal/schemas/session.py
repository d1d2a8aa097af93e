from datetime import datetime

from pydantic import BaseModel


class LoginResponse(BaseModel):
    id: str
    expires_at: datetime
