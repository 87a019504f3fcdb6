"""Tests for per-field observation and batched notification."""

import asyncio

import pytest

from opstate import ANY
from opstate import FieldChange
from opstate import Operation
from opstate import OperationStates
from opstate.observable import Observable


class Counter(Observable):
    observable_fields = ("value", "label")

    def __init__(self):
        super().__init__()
        self._value = 0
        self._label = None


async def _noop():
    return None


class TestObservable:
    def test_write_outside_transaction_notifies_immediately(self, recorder):
        counter = Counter()
        counter.observe("value", recorder)

        counter._set("value", 1)

        assert recorder.calls == [FieldChange("value", 0, 1)]

    def test_identical_write_is_not_a_change(self, recorder):
        counter = Counter()
        counter.observe("label", recorder)

        counter._set("label", None)

        assert recorder.calls == []

    def test_transaction_coalesces_writes(self, recorder):
        counter = Counter()
        counter.observe("value", recorder)

        with counter.transaction():
            counter._set("value", 1)
            counter._set("value", 2)
            assert recorder.calls == []

        assert recorder.calls == [FieldChange("value", 0, 2)]

    def test_write_back_to_original_is_dropped(self, recorder):
        counter = Counter()
        counter.observe(ANY, recorder)
        original = counter._value

        with counter.transaction():
            counter._set("value", 5)
            counter._set("value", original)

        assert recorder.calls == []

    def test_nested_transactions_flush_once(self, recorder):
        counter = Counter()
        counter.observe(ANY, recorder)

        with counter.transaction():
            counter._set("value", 1)
            with counter.transaction():
                counter._set("label", "x")
            assert recorder.calls == []

        assert recorder.calls == [[FieldChange("value", 0, 1), FieldChange("label", None, "x")]]

    def test_unknown_field_rejected(self, recorder):
        with pytest.raises(ValueError):
            Counter().observe("missing", recorder)

    def test_unsubscribe(self, recorder):
        counter = Counter()
        unsubscribe = counter.observe("value", recorder)

        unsubscribe()
        counter._set("value", 1)

        assert recorder.calls == []

    def test_unobserve_unknown_callback_is_noop(self, recorder):
        Counter().unobserve("value", recorder)

    def test_observer_errors_are_logged_not_raised(self, recorder, caplog):
        counter = Counter()

        def broken(_):
            raise ValueError("observer failed")

        counter.observe("value", broken)
        counter.observe("value", recorder)

        counter._set("value", 1)

        assert recorder.calls == [FieldChange("value", 0, 1)]
        assert "observer failed" in caplog.text

    def test_transaction_flushes_when_body_raises(self, recorder):
        counter = Counter()
        counter.observe("value", recorder)

        with pytest.raises(RuntimeError):
            with counter.transaction():
                counter._set("value", 1)
                raise RuntimeError("boom")

        assert recorder.calls == [FieldChange("value", 0, 1)]


class TestOperationObservation:
    @pytest.mark.asyncio
    async def test_start_emits_two_batches(self, recorder):
        release = asyncio.Event()

        async def work():
            await release.wait()
            return "done"

        op = Operation("fetch", work)
        op.end("old", False, False)
        op.observe(ANY, recorder)

        task = asyncio.create_task(op.start(False))

        assert recorder.calls == [
            [
                FieldChange("operation_state", OperationStates.NOT_STARTED, OperationStates.PENDING),
                FieldChange("data", "old", None),
            ]
        ]

        release.set()
        await task

        assert recorder.calls[1] == [FieldChange("data", None, "done")]
        assert len(recorder.calls) == 2

    def test_end_error_notifies_error_observers_only(self):
        op = Operation("fetch", _noop)
        data_calls, error_calls, state_calls = [], [], []
        op.observe("data", data_calls.append)
        op.observe("error", error_calls.append)
        op.observe("operation_state", state_calls.append)

        op.end("boom", True, False)

        assert error_calls == [FieldChange("error", None, "boom")]
        assert data_calls == []
        assert state_calls == []

    def test_reset_is_one_batch(self, recorder):
        op = Operation("fetch", _noop)
        op.end("value", False, False)
        op.end("boom", True, False)
        op.observe(ANY, recorder)

        op.reset()

        assert recorder.calls == [[FieldChange("data", "value", None), FieldChange("error", "boom", None)]]

    def test_second_reset_emits_nothing(self, recorder):
        op = Operation("fetch", _noop)
        op.end("value", False, False)
        op.reset()
        op.observe(ANY, recorder)

        op.reset()

        assert recorder.calls == []

    def test_observers_see_consistent_state(self):
        op = Operation("fetch", _noop)
        op.end("value", False, False)
        seen = []

        def check(_):
            seen.append((op.data, op.error, op.operation_state))

        op.observe("data", check)
        op.reset()

        assert seen == [(None, None, OperationStates.NOT_STARTED)]
