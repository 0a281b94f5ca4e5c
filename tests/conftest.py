import pytest

from csvulture.config import Settings
from csvulture.host.document import Document


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        database_url="sqlite://",
        http_timeout_seconds=5.0,
        max_solution_passes=10,
    )


@pytest.fixture
def document(settings) -> Document:
    return Document(settings)
