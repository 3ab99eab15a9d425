from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from campusnet.auth import (
    authenticate,
    create_access_token,
    create_account,
    get_current_user,
    get_db,
    get_user_role,
)
from campusnet.db.models import User
from campusnet.schemas.schemas import LoginJSON, MeResponse, SignupRequest, TokenResponse

router = APIRouter(tags=["Auth"])


@router.post("/signup", status_code=201)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == payload.email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    create_account(
        db,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        department=payload.department,
    )
    return {"message": "User created successfully"}


@router.post("/login", response_model=TokenResponse)
def login_json(payload: LoginJSON, db: Session = Depends(get_db)):
    user = authenticate(db, payload.email, payload.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"access_token": create_access_token({"sub": user.email}), "token_type": "bearer"}


@router.post("/login/form", response_model=TokenResponse)
def login_form(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = authenticate(db, form_data.username, form_data.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return {"access_token": create_access_token({"sub": user.email}), "token_type": "bearer"}


@router.get("/me", response_model=MeResponse)
def me(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {
        "email":     current_user.email,
        "full_name": current_user.profile.full_name if current_user.profile else None,
        "role":      get_user_role(db, current_user),
    }
