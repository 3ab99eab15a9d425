import logging
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from campusnet.config import (
    SECRET_KEY,
    ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_PASSWORD,
    DEFAULT_ADMIN_NAME,
)
from campusnet.database import SessionLocal
from campusnet.db.models import User, Profile, UserRole

logger = logging.getLogger(__name__)


# ==============================
# Password Hashing
# ==============================

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto"
)


# ==============================
# OAuth2 Scheme
# ==============================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/login/form")


# ==============================
# Database Dependency
# ==============================

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ==============================
# Password Utilities
# ==============================

def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


# ==============================
# JWT Token Creation
# ==============================

def create_access_token(data: dict, expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


# ==============================
# Accounts and Roles
# ==============================

def create_account(
    db: Session,
    email: str,
    password: str,
    full_name: str,
    department: str | None = None,
    role: str = "user",
) -> User:
    user = User(email=email, password_hash=hash_password(password))
    user.profile = Profile(full_name=full_name, email=email, department=department)
    user.roles.append(UserRole(role=role))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(password, str(user.password_hash)):
        return None
    return user


def has_role(db: Session, user_id: str, role: str) -> bool:
    return db.query(UserRole).filter(
        UserRole.user_id == user_id,
        UserRole.role == role,
    ).first() is not None


def get_user_role(db: Session, user: User) -> str | None:
    # admin outranks moderator outranks user
    for role in ("admin", "moderator", "user"):
        if has_role(db, user.id, role):
            return role
    return None


def create_default_admin(db: Session):
    existing = db.query(User).filter(User.email == DEFAULT_ADMIN_EMAIL).first()
    if existing:
        logger.info("[AUTH] Default admin exists.")
        return existing
    admin = create_account(
        db,
        email=DEFAULT_ADMIN_EMAIL,
        password=DEFAULT_ADMIN_PASSWORD,
        full_name=DEFAULT_ADMIN_NAME,
        role="admin",
    )
    logger.info("[AUTH] Default admin created: %s", DEFAULT_ADMIN_EMAIL)
    return admin


# ==============================
# Get Current User
# ==============================

def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str | None = payload.get("sub")

        if email is None:
            raise credentials_exception

    except JWTError:
        raise credentials_exception

    user = db.query(User).filter(User.email == email).first()

    if user is None:
        raise credentials_exception

    return user


def require_role(*roles: str):
    def checker(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        if not any(has_role(db, current_user.id, role) for role in roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user
    return checker


require_admin = require_role("admin")
