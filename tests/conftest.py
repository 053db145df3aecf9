import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)

from promptcraftr.agent.wizard import PromptWizard  # noqa: E402
from promptcraftr.utils.storage import MemoryStore  # noqa: E402


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def wizard(store):
    return PromptWizard(store).load()


@pytest.fixture
def answers():
    return [f"answer {i}" for i in range(10)]
