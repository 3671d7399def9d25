"""Shared fixtures: sample forests, a recording host and an in-memory service."""

import pytest

from helpers import FakeCommentService, RecordingHost, make_client, node


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    """Keep session log files out of the working tree."""
    monkeypatch.setenv("THREADVIEW_LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture
def search_forest():
    """Root Al/x with one reply Zo/needle."""
    return [node(1, "Al", "x", [node(2, "Zo", "needle", parent_id=1)])]


@pytest.fixture
def wide_forest():
    """Two threads with matches at different depths, plus one with none."""
    return [
        node(
            1,
            "Al",
            "root one",
            [
                node(2, "Bo", "nothing here", [node(3, "Cy", "deep Needle", parent_id=2)], 1),
                node(4, "Di", "unrelated", [node(5, "Ed", "still unrelated", parent_id=4)], 1),
            ],
        ),
        node(6, "needleman", "author matches", [node(7, "Fa", "leaf", parent_id=6)]),
        node(8, "Gi", "no match at all"),
    ]


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def service():
    return FakeCommentService()


@pytest.fixture
def service_client(service):
    client = make_client(service.handle)
    yield client
    client._http.close()
