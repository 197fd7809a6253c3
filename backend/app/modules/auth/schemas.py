from pydantic import BaseModel


class CurrentUserOut(BaseModel):
    Id: str
    Email: str | None = None
