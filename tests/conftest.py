import pytest

from tests.mocks import GOOGLE_KEY, PERPLEXITY_KEY, FakeContext


@pytest.fixture
def env():
    return {"GOOGLE_API_KEY": GOOGLE_KEY, "PERPLEXITY_API_KEY": PERPLEXITY_KEY}


@pytest.fixture
def ctx():
    return FakeContext()
