"""Routes package.

Defines the site blueprint (`bp`) and imports the route modules so their
@bp.route decorators are registered.

NOTE: The app factory lives in `tsmwa_admin/__init__.py`, not here.
"""

from flask import Blueprint

bp = Blueprint("main", __name__)

# These imports must come AFTER `bp` is defined.
from . import changes  # noqa: F401,E402
from . import invoices  # noqa: F401,E402
from . import pages  # noqa: F401,E402
