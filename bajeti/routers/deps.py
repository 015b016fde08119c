from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional

from bajeti.crud import crud_user
from bajeti.db.core import get_db


def get_current_user_id(x_user_id: Optional[str] = Header(None), db: Session = Depends(get_db)) -> int:
    """
    The acting user, as asserted by the identity provider in front of the API.
    A missing, malformed or unknown id is a 401.
    """
    user_id = int(x_user_id) if x_user_id and x_user_id.strip().isdigit() else None
    if user_id is None or crud_user.read_db_user(db, user_id=user_id) is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown or missing user",
        )
    return user_id
