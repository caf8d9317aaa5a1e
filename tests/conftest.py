import pytest
import structlog

from voicemark.models import ParseContext


@pytest.fixture
def ctx():
    """Default en-GB context with both trigger phrases."""
    return ParseContext(locale="en-GB", prefixes=["voicemark", "voice mark"])


@pytest.fixture
def us_ctx():
    """en-US context: "period" means "full stop"."""
    return ParseContext(locale="en-US", prefixes=["voicemark", "voice mark"])


@pytest.fixture
def asr_ctx():
    """Context that tolerates recognizer noise."""
    return ParseContext(asr_cleanup=True)


@pytest.fixture(autouse=True)
def reset_structlog():
    # The CLI and server entry points configure structlog globally
    yield
    structlog.reset_defaults()
