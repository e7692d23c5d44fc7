from datetime import datetime

from pydantic import BaseModel, Field


class SendCodeRequest(BaseModel):
    contact: str = Field(min_length=3, max_length=255, description='Phone number or email')
    name: str = Field(min_length=1, max_length=255)
    email: str = ''
    phone: str = ''

    model_config = {
        'json_schema_extra': {
            'example': {
                'contact': '+2348012345678',
                'name': 'Ada Obi',
                'email': 'ada@example.com',
                'phone': '+2348012345678',
            }
        }
    }


class SendCodeResponse(BaseModel):
    contact: str
    expires_at: datetime


class VerifyCodeRequest(BaseModel):
    contact: str = Field(min_length=3, max_length=255)
    code: str = Field(min_length=1, max_length=12)


class VerifyCodeResponse(BaseModel):
    verification_token: str
    identity_id: str
    name: str
    expires_at: datetime
