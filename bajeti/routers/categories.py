from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from bajeti.crud import crud_category
from bajeti.models import category as category_models
from bajeti.db.core import get_db
from bajeti.routers.deps import get_current_user_id

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
)

@router.post("/", response_model=category_models.CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: category_models.CategoryCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_category.create_db_category(db=db, user_id=user_id, category_data=category)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/", response_model=List[category_models.CategoryResponse])
def read_categories(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    System categories plus the user's own.
    """
    return crud_category.read_db_categories(db=db, user_id=user_id)
