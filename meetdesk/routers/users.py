"""
Users router - profile of the signed-in user.
"""

from fastapi import APIRouter, Depends

from meetdesk.deps import get_current_user
from meetdesk.models.user import User
from meetdesk.schemas.user import UserOut


router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserOut)
def read_current_user(current_user: User = Depends(get_current_user)):
    """
    Profile fields of the session user's credential record.

    UserOut has no token fields, so access and refresh tokens never leave
    the server.
    """
    return current_user
