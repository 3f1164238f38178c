"""WSGI entrypoint for the recipeshare application.

The Flask development server is not started from this module so that
deployments go through a WSGI server such as Gunicorn. Local development can
use ``flask --app main run`` which imports the ``app`` object defined below;
``flask --app main init-db`` and ``flask --app main seed`` prepare a database.
"""

from recipeshare import create_app

app = create_app()


__all__ = ["app"]
