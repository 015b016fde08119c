from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from typing import List, Optional

from bajeti.db.core import CategoryDB
from bajeti.errors import NotFoundError
from bajeti.models.category import CategoryCreate


def visible_to(user_id: int):
    """Filter for system categories plus the user's own"""
    return or_(CategoryDB.user_id.is_(None), CategoryDB.user_id == user_id)


def create_db_category(db: Session, user_id: int, category_data: CategoryCreate) -> CategoryDB:
    """Create a user-defined category"""

    existing_category = db.query(CategoryDB).filter(
        visible_to(user_id),
        CategoryDB.name.ilike(category_data.name)
    ).first()
    if existing_category:
        raise ValueError(f"Category with name '{category_data.name}' already exists")

    db_category = CategoryDB(
        name=category_data.name,
        is_system=False,
        user_id=user_id
    )

    try:
        db.add(db_category)
        db.commit()
        db.refresh(db_category)
        return db_category
    except IntegrityError:
        db.rollback()
        raise ValueError("Category creation failed due to a database constraint.")

def read_db_categories(db: Session, user_id: int) -> List[CategoryDB]:
    """System categories and the user's own, by name"""
    return db.query(CategoryDB).filter(visible_to(user_id)).order_by(CategoryDB.name).all()

def read_db_category(db: Session, category_id: int, user_id: int) -> Optional[CategoryDB]:
    return db.query(CategoryDB).filter(CategoryDB.id == category_id, visible_to(user_id)).first()

def require_category(db: Session, category_id: int, user_id: int) -> CategoryDB:
    category = read_db_category(db, category_id, user_id)
    if not category:
        raise NotFoundError(f"Category with id {category_id} not found")
    return category
