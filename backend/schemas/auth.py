from pydantic import BaseModel, EmailStr, field_validator


class OtpRequest(BaseModel):
    email: EmailStr


class OtpVerify(BaseModel):
    email: EmailStr
    code: str

    @field_validator("code")
    @classmethod
    def _code(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("Please enter the verification code")
        return v


class OtpRequestResult(BaseModel):
    message: str
    email: str
