from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from revistete.core.database import get_db
from revistete.core.errors import SessionError
from revistete.models.user import User
from revistete.utils.auth import decode_token
from typing import Optional
from uuid import UUID

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token", auto_error=False)

async def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme)
) -> Optional[User]:
    """Resolve the bearer token to a user, or None when anything about it is off."""
    if not token:
        return None
    
    payload = decode_token(token)
    if not payload:
        return None
    
    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        return None
    
    return db.query(User).filter(User.id == user_id).first()

async def get_current_active_user(
    current_user: Optional[User] = Depends(get_current_user)
) -> User:
    # Missing, malformed, expired, unknown user and deactivated all look the same.
    if not current_user or not current_user.is_active:
        raise SessionError()
    return current_user
