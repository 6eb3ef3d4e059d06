from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class AdminLogin(BaseModel):
    username: str
    password: str

class AdminRegister(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    masterKey: str

class AdminResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    username: str
    created_at: Optional[datetime] = None

class AdminLoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    username: str
