from batchgen.batch.models import BatchItem, BatchItemStatus, BatchRun, BatchSummary, Segment


def _run(count=3):
    return BatchRun.from_segments([Segment(index=idx, text="x" * (idx + 1)) for idx in range(count)])


def test_segment_caches_char_count():
    segment = Segment(index=4, text="hello")
    assert segment.char_count == 5


def test_run_starts_pending():
    run = _run()
    assert run.total == 3
    assert run.completed == 0
    assert not run.cancel_requested
    assert all(item.status is BatchItemStatus.PENDING for item in run.items)
    assert [item.index for item in run.items] == [0, 1, 2]


def test_snapshot_returns_independent_copies():
    run = _run()
    snapshot = run.snapshot()
    snapshot[0].status = BatchItemStatus.FAILED
    assert run.items[0].status is BatchItemStatus.PENDING


def test_item_reset():
    item = BatchItem(
        segment=Segment(index=0, text="a"),
        status=BatchItemStatus.FAILED,
        retries=3,
        error="broken",
    )
    item.reset()
    assert (item.status, item.result, item.retries, item.error) == (
        BatchItemStatus.PENDING,
        None,
        0,
        None,
    )


def test_terminal_states():
    assert {status for status in BatchItemStatus if status.is_terminal} == {
        BatchItemStatus.SUCCESS,
        BatchItemStatus.FAILED,
        BatchItemStatus.SKIPPED,
    }


def test_summary_describes_partial_success_with_skips():
    run = _run(4)
    run.items[0].status = BatchItemStatus.SUCCESS
    run.items[1].status = BatchItemStatus.FAILED
    run.items[2].status = BatchItemStatus.SKIPPED
    run.items[3].status = BatchItemStatus.SUCCESS

    summary = BatchSummary.from_run(run, cancelled=False)

    assert summary.total == 4
    assert not summary.all_succeeded
    assert summary.describe() == "Partial success: 2 of 4 succeeded, 1 failed, 1 skipped."


def test_summary_single_item_wording():
    run = _run(1)
    run.items[0].status = BatchItemStatus.SUCCESS
    run.items[0].result = "only"
    summary = BatchSummary.from_run(run, cancelled=False)
    assert summary.describe() == "All 1 item succeeded."
    assert summary.results() == ["only"]
