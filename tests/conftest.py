import pytest

from app.core.config import settings
from app.services.storage.temp_store import TempFileStore


@pytest.fixture
def temp_store(tmp_path, monkeypatch):
    scratch = tmp_path / "temp"
    monkeypatch.setattr(settings, "temp_dir", scratch, raising=False)
    return TempFileStore(scratch)


# Fixture factory turning a list of events into a single-pass async stream
@pytest.fixture
def make_event_stream():
    def _make_event_stream(events, error: Exception | None = None, consumed: list | None = None):
        async def _stream():
            for event in events:
                if consumed is not None:
                    consumed.append(event)
                yield event
            if error is not None:
                raise error

        return _stream()

    return _make_event_stream
