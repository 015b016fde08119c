from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from bajeti.crud import crud_user
from bajeti.models import user as user_models
from bajeti.db.core import get_db
from bajeti.errors import NotFoundError
from bajeti.routers.deps import get_current_user_id

router = APIRouter(
    prefix="/users",
    tags=["users"],
)

@router.post("/", response_model=user_models.UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(user: user_models.UserCreate, db: Session = Depends(get_db)):
    """
    Sign up a new user.
    """
    try:
        db_user = crud_user.create_db_user(db=db, user_data=user)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return db_user

@router.post("/login", response_model=user_models.UserResponse)
def login(user_login: user_models.UserLogin, db: Session = Depends(get_db)):
    """
    Check a user's credentials.
    """
    user = crud_user.authenticate_user(db, email=user_login.email, password=user_login.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )
    return user

@router.get("/me", response_model=user_models.UserResponse)
def read_me(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return crud_user.read_db_user(db, user_id=user_id)

@router.put("/me", response_model=user_models.UserResponse)
def update_me(
    user: user_models.UserUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Update the profile and preferences (currency, language, theme, notifications).
    """
    try:
        return crud_user.update_db_user(db=db, user_id=user_id, user_updates=user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
