import logging

from fastapi import APIRouter, Depends

from app.modules.auth.deps import RequireAuthenticated, UserContext
from app.modules.auth.schemas import CurrentUserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger("app.auth")


@router.get("/me", response_model=CurrentUserOut)
def GetMe(user: UserContext = Depends(RequireAuthenticated)) -> CurrentUserOut:
    logger.debug("resolved caller %s", user.Id)
    return CurrentUserOut(Id=user.Id, Email=user.Email)
