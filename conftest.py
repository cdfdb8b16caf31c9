"""Root pytest configuration and shared fixtures."""

import logging

import pytest
from PIL import Image

from feedback_text_parser.config.config_manager import ConfigManager


CONFIG_VARS = [
    "OPENAI_API_KEY",
    "OPENAI_API_URL",
    "OCR_MODEL",
    "REQUEST_TIMEOUT",
    "OCR_ATTEMPTS",
    "MAX_IMAGE_SIZE_MB",
    "SUPPORTED_IMAGE_FORMATS",
    "CONTRAST_FACTOR",
    "LOG_LEVEL",
]

TEST_API_KEY = "sk-test-1234567890abcdef"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Make every test start from default configuration."""
    for var in CONFIG_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config_manager(monkeypatch):
    """Configuration with an OCR API key set."""
    monkeypatch.setenv("OPENAI_API_KEY", TEST_API_KEY)
    return ConfigManager()


@pytest.fixture
def sample_image(tmp_path):
    """Small PNG image on disk."""
    path = tmp_path / "feedback.png"
    Image.new("RGB", (40, 20), (200, 200, 200)).save(path)
    return path


@pytest.fixture
def restore_root_logger():
    """Undo handler and level changes made by LoggingConfig."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code=200, content=None, payload=None, text=""):
        self.status_code = status_code
        if payload is None and content is not None:
            payload = {"choices": [{"message": {"content": content}}]}
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def fake_response():
    return FakeResponse
