"""Tests for the learned pattern store."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker

from receipt_tracker.exceptions import DataAccessError
from receipt_tracker.models.category import Category
from receipt_tracker.models.learned_category import LearnedCategory
from receipt_tracker.models.user import User
from receipt_tracker.services.learned_patterns import LearnedPatternStore


@pytest.fixture
def owner(db):
    """A user with two categories."""
    user = User(email="store@example.com", name="Store Test", password_hash="fake")
    db.add(user)
    db.flush()

    dairy = Category(user_id=user.id, name="Melk", sort_order=0)
    coffee = Category(user_id=user.id, name="Kaffe", sort_order=1)
    db.add_all([dairy, coffee])
    db.commit()

    return {"user": user, "dairy": dairy, "coffee": coffee}


def test_upsert_inserts_new_pattern(db, owner):
    store = LearnedPatternStore(db)

    learned = store.upsert(owner["user"].id, "melk", owner["dairy"].id)
    db.commit()

    assert learned.item_pattern == "melk"
    assert learned.category_id == owner["dairy"].id
    assert learned.use_count == 1


def test_upsert_updates_in_place(db, owner):
    """Reconfirming a pattern moves it to the latest category and counts the use."""
    store = LearnedPatternStore(db)
    user_id = owner["user"].id

    store.upsert(user_id, "melk", owner["dairy"].id)
    store.upsert(user_id, "melk", owner["dairy"].id)
    learned = store.upsert(user_id, "melk", owner["coffee"].id)
    db.commit()

    assert learned.category_id == owner["coffee"].id
    assert learned.use_count == 3
    assert db.query(LearnedCategory).filter(LearnedCategory.user_id == user_id).count() == 1


def test_patterns_are_scoped_per_user(db, owner):
    other = User(email="other@example.com", name="Other", password_hash="fake")
    db.add(other)
    db.flush()
    other_category = Category(user_id=other.id, name="Annet")
    db.add(other_category)
    db.commit()

    store = LearnedPatternStore(db)
    store.upsert(owner["user"].id, "melk", owner["dairy"].id)
    store.upsert(other.id, "melk", other_category.id)
    db.commit()

    assert store.lookup_exact(owner["user"].id, "melk").category_id == owner["dairy"].id
    assert store.lookup_exact(other.id, "melk").category_id == other_category.id
    assert store.lookup_exact(other.id, "melk").use_count == 1


def test_lookup_exact_missing(db, owner):
    store = LearnedPatternStore(db)
    assert store.lookup_exact(owner["user"].id, "brunost") is None


def test_list_by_user_orders_by_use_then_length_then_name(db, owner):
    store = LearnedPatternStore(db)
    user_id = owner["user"].id
    dairy_id = owner["dairy"].id

    store.upsert(user_id, "kaffe", dairy_id)
    store.upsert(user_id, "melk", dairy_id)
    store.upsert(user_id, "melk", dairy_id)
    store.upsert(user_id, "brunost", dairy_id)
    store.upsert(user_id, "appelsin", dairy_id)
    store.upsert(user_id, "yoghurt", dairy_id)
    db.commit()

    patterns = [lc.item_pattern for lc in store.list_by_user(user_id)]

    assert patterns == ["melk", "appelsin", "brunost", "yoghurt", "kaffe"]


def test_delete_for_category(db, owner):
    store = LearnedPatternStore(db)
    user_id = owner["user"].id
    store.upsert(user_id, "melk", owner["dairy"].id)
    store.upsert(user_id, "lettmelk", owner["dairy"].id)
    store.upsert(user_id, "kaffe", owner["coffee"].id)
    db.commit()

    removed = store.delete_for_category(owner["dairy"].id)
    db.commit()

    assert removed == 2
    assert [lc.item_pattern for lc in store.list_by_user(user_id)] == ["kaffe"]


def test_upsert_from_separate_sessions_keeps_every_increment(db, owner):
    """A stale session that saw no row still counts on top of the committed one."""
    user_id = owner["user"].id
    dairy_id = owner["dairy"].id
    make_session = sessionmaker(autocommit=False, autoflush=False, bind=db.get_bind())
    first, second = make_session(), make_session()
    try:
        late_store = LearnedPatternStore(second)
        assert late_store.lookup_exact(user_id, "melk") is None

        early_store = LearnedPatternStore(first)
        early_store.upsert(user_id, "melk", dairy_id)
        early_store.commit()

        learned = late_store.upsert(user_id, "melk", dairy_id)
        late_store.commit()
    finally:
        first.close()
        second.close()

    assert learned.use_count == 2
    rows = db.query(LearnedCategory).filter(LearnedCategory.user_id == user_id).all()
    assert [(lc.item_pattern, lc.use_count) for lc in rows] == [("melk", 2)]

def test_database_errors_become_data_access_errors():
    session = MagicMock()
    session.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    store = LearnedPatternStore(session)

    with pytest.raises(DataAccessError):
        store.lookup_exact(1, "melk")
    with pytest.raises(DataAccessError):
        store.list_by_user(1)


def test_upsert_requires_native_upsert_support():
    session = MagicMock()
    session.get_bind.return_value.dialect.name = "mysql"
    store = LearnedPatternStore(session)

    with pytest.raises(DataAccessError, match="not supported"):
        store.upsert(1, "melk", 1)
    session.execute.assert_not_called()
