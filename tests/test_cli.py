from sqlalchemy import func, select

from recipeshare.extensions import db
from recipeshare.models import Recipe, User


def test_init_db_creates_tables(app):
    with app.app_context():
        db.drop_all()

    result = app.test_cli_runner().invoke(args=["init-db"])

    assert "Initialized the database." in result.output
    with app.app_context():
        assert db.session.scalar(select(func.count()).select_from(Recipe)) == 0


def test_seed_creates_users_and_recipes_once(app):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed"])
    second = runner.invoke(args=["seed"])

    assert "Seeded 5 recipe(s)." in first.output
    assert "Seeded 0 recipe(s)." in second.output
    with app.app_context():
        admin = db.session.scalar(select(User).filter_by(email="admin@example.com"))
        assert admin.is_admin()
        cuisines = set(db.session.scalars(select(Recipe.cuisine_type)))
        assert cuisines == {"Italian", "Indian", "Mexican", "Thai", "French"}
        assert db.session.scalar(select(func.count()).select_from(User)) == 2
