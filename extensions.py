# extensions.py — shared Flask extensions
# Single SQLAlchemy instance imported by models and by create_app.
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

__all__ = ["db"]
