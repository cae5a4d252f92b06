import random

import pytest

from fakes import FakeResolver

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_resolver():
    """Resolver that succeeds for every query."""
    return FakeResolver()


@pytest.fixture
def seeded_rng():
    return random.Random(1234)
