import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from config import get_db
from models.authModel.authModel import AuthUser, ROLES
from schemas.authSchema.authSchema import AuthResponse, RegisterUser, SignInUser, UserOut, UserSummary
from store.noticeStore import DuplicateEmailError, create_user, get_user_by_email
from utils.utils import create_user_token, get_current_user, hash_password, verify_password

router = APIRouter(prefix="/api/auth", tags=["Auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: RegisterUser, db: Session = Depends(get_db)):
    role = user.role.strip().lower()
    if role not in ROLES:
        raise HTTPException(status_code=400, detail="Role must be admin or student")

    try:
        if get_user_by_email(db, user.email):
            raise HTTPException(status_code=409, detail="Email already registered")

        new_user = create_user(
            db,
            name=user.name,
            email=user.email,
            password_hash=hash_password(user.password),
            role=role,
        )
    except DuplicateEmailError:
        # lost a race with a concurrent registration
        raise HTTPException(status_code=409, detail="Email already registered")
    except HTTPException as http_exc:
        raise http_exc
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Registration failed: {e}")

    logger.info(f"Registered {new_user.role} account {new_user.id}")
    return {"token": create_user_token(new_user), "user": UserSummary.model_validate(new_user)}


@router.post("/login", response_model=AuthResponse)
def login(user: SignInUser, db: Session = Depends(get_db)):
    try:
        db_user = get_user_by_email(db, user.email)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Login failed: {e}")

    if not db_user:
        raise HTTPException(status_code=404, detail="User not found")

    if not verify_password(user.password, db_user.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return {"token": create_user_token(db_user), "user": UserSummary.model_validate(db_user)}


@router.get("/me", response_model=UserOut)
def me(current_user: AuthUser = Depends(get_current_user)):
    return current_user
