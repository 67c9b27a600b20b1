"""
Tests for view fan-out to sinks
"""

from conn_reconciler import PublishedViews
from conn_reconciler.pipeline.emitter import ViewEmitter


class RecordingSink:
    def __init__(self):
        self.sequences = []

    def on_views(self, views):
        self.sequences.append(views.sequence)


class FailingSink:
    def on_views(self, views):
        raise RuntimeError("display gone")


class TestViewEmitter:

    def test_attach_is_idempotent(self):
        sink = RecordingSink()
        emitter = ViewEmitter(sink=sink)
        emitter.attach(sink)
        assert emitter.sink_count == 1
        emitter.publish(PublishedViews(sequence=1))
        assert sink.sequences == [1]

    def test_detached_sink_stops_receiving(self):
        first, second = RecordingSink(), RecordingSink()
        emitter = ViewEmitter(sink=first)
        emitter.attach(second)
        emitter.publish(PublishedViews(sequence=1))

        emitter.detach(first)
        emitter.detach(first)
        assert emitter.sink_count == 1
        emitter.publish(PublishedViews(sequence=2))

        assert first.sequences == [1]
        assert second.sequences == [1, 2]

    def test_failing_sink_does_not_starve_others(self):
        sink = RecordingSink()
        emitter = ViewEmitter(sink=FailingSink())
        emitter.attach(sink)
        emitter.publish(PublishedViews(sequence=7))
        assert sink.sequences == [7]
