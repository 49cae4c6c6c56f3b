"""Category helpers: default set for new users and ordering."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from receipt_tracker.models.category import Category

# (name, color, icon) in display order; names match the vision prompt
DEFAULT_CATEGORIES = [
    ("Kjøtt", "#dc2626", "beef"),
    ("Fisk", "#0284c7", "fish"),
    ("Grønnsaker", "#16a34a", "carrot"),
    ("Frukt", "#65a30d", "apple"),
    ("Brød", "#b45309", "croissant"),
    ("Melk", "#e2e8f0", "milk"),
    ("Ost", "#facc15", "cheese"),
    ("Melkeprodukter", "#fde68a", "egg-fried"),
    ("Egg", "#fbbf24", "egg"),
    ("Godteri", "#db2777", "candy"),
    ("Snacks", "#f97316", "popcorn"),
    ("Drikke", "#06b6d4", "cup-soda"),
    ("Krydder", "#a16207", "flame"),
    ("Kaffe", "#78350f", "coffee"),
    ("Pålegg", "#c2410c", "sandwich"),
    ("Mat", "#7c3aed", "utensils"),
    ("Husholdning", "#475569", "spray-can"),
    ("Personlig pleie", "#ec4899", "sparkles"),
    ("Annet", "#64748b", "tag"),
]


def seed_default_categories(db: Session, user_id: int) -> list[Category]:
    """Add the default categories for a new user. Does not commit."""
    categories = [
        Category(user_id=user_id, name=name, color=color, icon=icon, sort_order=index)
        for index, (name, color, icon) in enumerate(DEFAULT_CATEGORIES)
    ]
    db.add_all(categories)
    return categories


def get_active_categories(db: Session, user_id: int) -> list[Category]:
    """Non-deleted categories for a user in display order."""
    return (
        db.query(Category)
        .filter(Category.user_id == user_id, Category.deleted_at.is_(None))
        .order_by(Category.sort_order, Category.id)
        .all()
    )


def next_sort_order(db: Session, user_id: int) -> int:
    """Sort order placing a new category after the existing ones."""
    current = (
        db.query(func.max(Category.sort_order))
        .filter(Category.user_id == user_id, Category.deleted_at.is_(None))
        .scalar()
    )
    return 0 if current is None else current + 1
