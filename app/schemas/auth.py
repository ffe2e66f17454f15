from pydantic import BaseModel, constr


class LoginRequest(BaseModel):
    username: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str
