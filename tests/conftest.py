import os
import tempfile

# Must be set before db.py is imported by any test module
_DB_PATH = os.path.join(tempfile.gettempdir(), "data_quiz_test.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"

import pytest  # noqa: E402

from db import Base, engine  # noqa: E402
import models  # noqa: E402,F401


@pytest.fixture(scope="session", autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
