"""관리자 인증 API 라우터"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_authenticator
from app.schemas.content import VerifyRequest
from app.services.auth import Authenticator

router = APIRouter(prefix="/admin", tags=["Admin"])

INVALID_PASSWORD = "비밀번호가 올바르지 않습니다."


@router.post("/verify")
async def verify_admin(data: VerifyRequest, authenticator: Authenticator = Depends(get_authenticator)):
    if authenticator.verify(data.password):
        return {"success": True}
    return JSONResponse(status_code=401, content={"success": False, "error": INVALID_PASSWORD})
