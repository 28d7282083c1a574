import os
import tempfile

# must run before app.config is imported anywhere
_tmp = tempfile.mkdtemp(prefix="inventory-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmp, "test.db")
os.environ["LOCK_DIR"] = os.path.join(_tmp, "locks")
os.environ["LOW_STOCK_THRESHOLD"] = "5"

import pytest  # noqa: E402

from app.db import init_db  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    # drop & recreate so every test starts at id=1
    init_db(reset=True)
    yield


@pytest.fixture
def ball():
    return {
        "name": "Ball",
        "category": "Sports",
        "stock": 3,
        "costprice": 10,
        "sellingprice": 15,
        "barcode": "123",
    }
