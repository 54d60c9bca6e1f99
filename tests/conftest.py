import sys, os

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

import pytest

from tests.helpers import EventRecorder, FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def recorder():
    return EventRecorder()
