from auto_site_drafter.models.run import RunStatus
from auto_site_drafter.run_store import RunStore


def test_run_ids_are_url_safe():
    store = RunStore()

    run = store.create_run(business_name="Café & Co: Kitchen/Bar")
    unnamed = store.create_run(business_name="  ")

    assert run.id.startswith("run_caf-co-kitchen-bar_")
    assert unnamed.id.startswith("run_")
    assert store.get_run(run.id) is run
    assert run.status is RunStatus.queued


def test_cancel_sets_event_only_for_live_runs():
    store = RunStore()
    live = store.create_run(business_name="Harbor Bistro")
    finished = store.create_run(business_name="Aurora Design Studio")
    store.update_run(finished.id, status=RunStatus.completed, stage="complete", progress=100.0)

    assert store.request_cancel(live.id) is True
    assert store.cancel_event(live.id).is_set()
    assert store.request_cancel(finished.id) is False
    assert not store.cancel_event(finished.id).is_set()
    assert store.request_cancel("run_unknown") is False


def test_update_run_keeps_unset_fields():
    store = RunStore()
    run = store.create_run(business_name="Harbor Bistro")

    store.update_run(run.id, status=RunStatus.in_progress, stage="planning", progress=14.0)
    updated = store.update_run(run.id, errors=["boom"])

    assert updated.stage == "planning"
    assert updated.progress == 14.0
    assert list(updated.errors) == ["boom"]
