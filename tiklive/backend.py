# tiklive/backend.py
"""The data handle every service talks through.

One ``Backend`` is built by the application factory and stored on
``app.extensions``. Services receive it as an argument so tests can hand in
their own session, storage or configured flag.
"""
from flask import current_app
from sqlalchemy import text

from .extensions import db
from .services.storage_service import ObjectStorage


class Backend:
    def __init__(self, session, storage: ObjectStorage, configured: bool = True):
        self.session = session
        self.storage = storage
        # False means no real database was configured: public reads answer with demo payloads.
        self.configured = configured

    # --- query builder passthroughs ---
    def query(self, *entities):
        return self.session.query(*entities)

    def get(self, model, pk):
        if pk is None:
            return None
        return self.session.get(model, pk)

    def add(self, obj):
        self.session.add(obj)
        return obj

    def delete(self, obj):
        self.session.delete(obj)

    def flush(self):
        self.session.flush()

    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()

    def ping(self) -> bool:
        self.session.execute(text("SELECT 1"))
        return True


def init_backend(app) -> Backend:
    storage = ObjectStorage.from_config(app.config, app.instance_path)
    backend = Backend(db.session, storage, configured=app.config.get("DATABASE_CONFIGURED", False))
    app.extensions["backend"] = backend
    return backend


def get_backend() -> Backend:
    return current_app.extensions["backend"]
