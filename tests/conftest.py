import pytest

from zenned import state


@pytest.fixture(autouse=True)
def isolated_store(tmp_path, monkeypatch):
    monkeypatch.setattr(state, "EVENTS_DATA_FILE", tmp_path / "events.json")
    state.reset_events()
    yield tmp_path / "events.json"
    state.reset_events()
