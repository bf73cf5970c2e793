import logging
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from revistete.core.database import get_db
from revistete.core.errors import AuthError, ConflictError
from revistete.models.user import User
from revistete.schemas.user import UserCreate, UserLogin, TokenResponse, UserResponse, UserEnvelope
from revistete.utils.auth import get_password_hash, verify_password, create_access_token
from revistete.api.deps import get_current_active_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(user: User) -> str:
    return create_access_token(data={"sub": str(user.id)})


def _authenticate(db: Session, email: str, password: str) -> User:
    """Unknown email, deactivated account and wrong password share one error."""
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        raise AuthError("Invalid credentials")
    return user


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == user_data.email).first():
        raise ConflictError("A user with this email already exists")
    
    user = User(
        name=user_data.name,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        phone=user_data.phone,
        address=user_data.address,
    )
    
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent registration with the same email
        db.rollback()
        raise ConflictError("A user with this email already exists")
    db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id})
    
    return TokenResponse(token=_issue_token(user), user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
async def login(user_data: UserLogin, db: Session = Depends(get_db)):
    user = _authenticate(db, user_data.email, user_data.password)
    return TokenResponse(token=_issue_token(user), user=UserResponse.model_validate(user))


@router.post("/token", response_model=dict)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """OAuth2 compatible token endpoint for Swagger UI"""
    user = _authenticate(db, form_data.username, form_data.password)
    return {
        "access_token": _issue_token(user),
        "token_type": "bearer"
    }


@router.get("/me", response_model=UserEnvelope)
@router.get("/profile", response_model=UserEnvelope, include_in_schema=False)
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
):
    return UserEnvelope(user=UserResponse.model_validate(current_user))
