"""Shared Flask extension instances.

Bound to the application inside `create_app()`; import `db` from here so
models and services share one SQLAlchemy registry.
"""

from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
migrate = Migrate()
