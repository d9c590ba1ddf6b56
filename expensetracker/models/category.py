from ..extensions import db

DEFAULT_COLOR = "#00b8d4"


class Category(db.Model):
    """Global category shared by all users.

    Expenses and budgets reference a category by ``name``; renaming a
    category leaves existing expense and budget rows untouched.
    """
    __tablename__ = "categories"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    color = db.Column(db.String(20), nullable=False, default=DEFAULT_COLOR)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "color": self.color}
