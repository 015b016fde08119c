from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional
from datetime import datetime
import bcrypt

from bajeti.db.core import UserDB
from bajeti.errors import NotFoundError
from bajeti.models.user import UserCreate, UserUpdate
from bajeti.logging_config import get_logger

logger = get_logger(__name__)


# ===== PASSWORD HASHING UTILITIES =====

def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


# ===== DATABASE OPERATIONS =====

def create_db_user(db: Session, user_data: UserCreate) -> UserDB:
    """Sign up a new user"""

    existing_user = db.query(UserDB).filter(UserDB.email == user_data.email).first()
    if existing_user:
        raise ValueError("Email already registered")

    db_user = UserDB(
        email=user_data.email,
        password_hash=hash_password(user_data.password),
        full_name=user_data.full_name.strip() if user_data.full_name else None,
        currency=user_data.currency,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )

    try:
        db.add(db_user)
        db.commit()
        db.refresh(db_user)
    except IntegrityError:
        db.rollback()
        raise ValueError("User creation failed due to database constraint")

    logger.info(f"Created user {db_user.id}")
    return db_user


def read_db_user(db: Session, user_id: Optional[int] = None, email: Optional[str] = None) -> Optional[UserDB]:
    """Read a user by id or email"""

    query = db.query(UserDB)

    if user_id is not None:
        return query.filter(UserDB.id == user_id).first()
    elif email:
        return query.filter(UserDB.email == email.lower()).first()
    else:
        raise ValueError("Must provide at least one identifier (user_id or email)")


def authenticate_user(db: Session, email: str, password: str) -> Optional[UserDB]:
    """Return the user when the credentials match"""

    user = read_db_user(db, email=email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed sign-in attempt")
        return None
    return user


def update_db_user(db: Session, user_id: int, user_updates: UserUpdate) -> UserDB:
    """Update profile fields and preferences"""

    db_user = read_db_user(db, user_id=user_id)
    if not db_user:
        raise NotFoundError(f"User with id {user_id} not found")

    update_data = user_updates.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None:
            continue
        setattr(db_user, field, value)

    db_user.updated_at = datetime.utcnow()

    try:
        db.commit()
        db.refresh(db_user)
        return db_user
    except IntegrityError:
        db.rollback()
        raise ValueError("User update failed due to database constraint")
