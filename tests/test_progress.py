import pytest

from auto_site_drafter.progress import MAX_INFLIGHT_PROGRESS, ProgressEmitter


def test_progress_never_decreases():
    emitter = ProgressEmitter()

    emitter.emit("generating", 40, "halfway")
    event = emitter.emit("generating", 30, "late sub-event")

    assert event.progress == 40


def test_only_terminal_completion_reaches_one_hundred():
    emitter = ProgressEmitter()

    capped = emitter.emit("scoring", 100, "almost")
    done = emitter.complete({"pages": 1})

    assert capped.progress == MAX_INFLIGHT_PROGRESS
    assert done.progress == 100
    assert done.stage == "complete"
    assert done.data == {"pages": 1}


def test_nothing_is_published_after_terminal_event():
    published = []
    emitter = ProgressEmitter(sink=published.append)

    emitter.emit("validating", 2, "Validating requirements")
    emitter.fail("businessName must not be empty", "validating", code="INVALID_REQUIREMENTS")
    assert emitter.emit("resolving", 8, "too late") is None
    assert emitter.complete({}) is None

    assert [event.stage for event in published] == ["validating", "error"]
    assert emitter.closed
    wire = published[-1].to_wire()
    assert wire["error"] == {
        "message": "businessName must not be empty",
        "stage": "validating",
        "code": "INVALID_REQUIREMENTS",
    }
    assert "data" not in wire


def test_cancel_keeps_last_progress():
    emitter = ProgressEmitter()
    emitter.emit("generating", 55, "working")

    event = emitter.cancel("generating")

    assert event.stage == "cancelled"
    assert event.progress == 55


def test_labels_are_carried_on_sub_events():
    emitter = ProgressEmitter()

    event = emitter.emit("generating", 30, "Section 1/4 generated", page="index", section="hero")

    assert event.to_wire()["page"] == "index"
    assert event.to_wire()["section"] == "hero"


@pytest.mark.asyncio
async def test_stream_ends_after_terminal_event():
    emitter = ProgressEmitter()
    emitter.emit("validating", 2, "Validating requirements")
    emitter.emit("resolving", 8, "Matching industry profile")
    emitter.cancel("resolving")

    stages = [event.stage async for event in emitter.stream()]

    assert stages == ["validating", "resolving", "cancelled"]
