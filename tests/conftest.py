import sys
from pathlib import Path

# Force a headless backend for matplotlib before any pyplot imports.
import matplotlib

matplotlib.use("Agg")

import pytest

# Ensure project root is on sys.path for tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gantt_models import Task  # noqa: E402


@pytest.fixture
def six_tasks():
    """Six tasks, five distinct statuses; tasks 0 and 1 share a date."""
    return [
        Task(label="Plan", date="03/01/2022", status="Not Started", type="Workshop", meeting="Kickoff"),
        Task(label="Design", date="03/01/2022", status="In Progress", type="Review", meeting="Weekly"),
        Task(label="Build", date="03/02/2022", status="Blocked", type="Sync", meeting="Standup"),
        Task(label="Test", date="03/03/2022", status="Review", type="Demo", meeting="Weekly"),
        Task(label="Ship", date="03/04/2022", status="Done", type="Demo", meeting="Steering"),
        Task(label="Retro", date="03/04/2022", status="In Progress", type="Workshop", meeting="Weekly"),
    ]
