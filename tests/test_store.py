"""
Tests for ConnectionStore: the full update step, the pause gate and bounds
"""

import pytest

from conn_reconciler import ConnectionStore, EngineConfig, SnapshotMessage
from factories import raw


def snap(*records, upload_total=0, download_total=0):
    return SnapshotMessage(
        connections=tuple(records),
        upload_total=upload_total,
        download_total=download_total,
    )


def speeds(conns):
    return {c.id: (c.upload_speed, c.download_speed) for c in conns}


class TestEndToEnd:
    """Open, transfer, close for a single proxied connection"""

    def test_three_snapshot_scenario(self, store):
        store.ingest(snap(raw("a", chains=["Proxy"], upload=0, download=0)))
        assert speeds(store.active_connections) == {"a": (0, 0)}
        assert store.closed_connections == ()
        proxy = store.virtual_connections["Proxy"]
        assert (proxy.upload, proxy.download, proxy.upload_speed, proxy.download_speed) == (0, 0, 0, 0)

        store.ingest(snap(raw("a", chains=["Proxy"], upload=10, download=20)))
        assert speeds(store.active_connections) == {"a": (10, 20)}
        proxy = store.virtual_connections["Proxy"]
        assert (proxy.upload, proxy.download, proxy.upload_speed, proxy.download_speed) == (10, 20, 10, 20)

        store.ingest(snap())
        assert store.active_connections == ()
        assert [c.id for c in store.closed_connections] == ["a"]
        assert store.virtual_connections["Proxy"] == proxy

    def test_active_connections_tagged_with_bucket(self, store):
        store.ingest(snap(raw("p", chains=["Proxy", "hk"]), raw("d", chains=["DIRECT"])))
        tags = {c.id: c.preserve for c in store.active_connections}
        assert tags == {"p": "Proxy", "d": "Direct"}
        assert set(store.virtual_connections) == {"Proxy", "Direct"}


class TestNoOps:

    def test_absent_message(self, store):
        assert store.ingest(None) is False
        assert store.processed_count == 0

    def test_message_without_connection_list(self, store):
        store.ingest(snap(raw("a")))
        before = store.views
        assert store.ingest(SnapshotMessage(connections=None, upload_total=5)) is False
        assert store.views is before
        assert store.processed_count == 1
        assert store.totals() == (5, 0)

    def test_malformed_payload(self, store):
        assert store.ingest_payload("not a message") is False
        assert store.ingest_payload({"connections": "nope"}) is False
        assert store.views.sequence == 0


class TestPauseGate:

    def test_views_frozen_while_paused(self, store):
        store.ingest(snap(raw("a", chains=["Proxy"], upload=0, download=0)))
        published = store.views

        store.set_paused(True)
        for i in range(1, 6):
            store.ingest(snap(raw("a", chains=["Proxy"], upload=i * 10, download=i * 10),
                              raw(f"n{i}")))
            assert store.views is published
        assert store.processed_count == 6

        store.set_paused(False)
        assert store.views is published

        store.ingest(snap(raw("a", chains=["Proxy"], upload=55, download=57)))
        # delta against the last processed snapshot (50, 50), not the published one (0, 0)
        assert speeds(store.active_connections) == {"a": (5, 7)}

    def test_virtual_rows_keep_advancing_internally(self, store):
        store.ingest(snap(raw("a", chains=["Proxy"], upload=0, download=0)))
        store.set_paused(True)
        store.ingest(snap(raw("a", chains=["Proxy"], upload=30, download=40)))
        assert store.virtual_connections["Proxy"].upload == 0
        store.set_paused(False)
        store.ingest(snap(raw("a", chains=["Proxy"], upload=31, download=41)))
        proxy = store.virtual_connections["Proxy"]
        assert (proxy.upload, proxy.download) == (31, 41)
        assert (proxy.upload_speed, proxy.download_speed) == (1, 1)

    def test_closures_during_pause_surface_after_resume(self, store):
        store.ingest(snap(raw("a"), raw("b")))
        store.set_paused(True)
        store.ingest(snap(raw("b")))
        assert store.closed_connections == ()
        store.set_paused(False)
        store.ingest(snap(raw("b")))
        assert [c.id for c in store.closed_connections] == ["a"]

    def test_history_still_truncated_while_paused(self):
        store = ConnectionStore(EngineConfig(max_closed_rows=2))
        store.set_paused(True)
        for i in range(10):
            store.ingest(snap(raw(f"c{i}")))
        assert len(store.all_connections) <= 1 + 2


class TestBoundsAndInvariants:

    def test_closed_and_history_bounds_under_churn(self, engine_config):
        store = ConnectionStore(engine_config)
        limit = engine_config.max_closed_rows
        for i in range(20):
            store.ingest(snap(raw(f"c{i}"), raw(f"c{i}-b"), raw("steady")))
            assert len(store.closed_connections) <= limit
            assert len(store.all_connections) <= len(store.active_connections) + limit

    def test_active_ids_unique(self, store):
        store.ingest_payload({"connections": [
            {"id": "a", "chains": [], "upload": 1, "download": 1},
            {"id": "a", "chains": [], "upload": 9, "download": 9},
            {"id": "b", "chains": [], "upload": 1, "download": 1},
        ]})
        ids = [c.id for c in store.active_connections]
        assert len(ids) == len(set(ids)) == 2

    def test_closed_is_most_recent_last(self):
        store = ConnectionStore(EngineConfig(max_closed_rows=2))
        store.ingest(snap(raw("a"), raw("b"), raw("c")))
        store.ingest(snap(raw("c")))
        assert [c.id for c in store.closed_connections] == ["a", "b"]
        store.ingest(snap(raw("d")))
        assert [c.id for c in store.closed_connections] == ["b", "c"]

    def test_reopened_id_leaves_closed_view(self, store):
        store.ingest(snap(raw("a")))
        store.ingest(snap())
        assert [c.id for c in store.closed_connections] == ["a"]
        store.ingest(snap(raw("a")))
        assert store.closed_connections == ()

    def test_published_views_are_immutable(self, store):
        store.ingest(snap(raw("a")))
        with pytest.raises(TypeError):
            store.virtual_connections["Proxy"] = None
        assert isinstance(store.active_connections, tuple)


class TestSupplements:

    def test_connection_ids_via_hop(self, store):
        store.ingest(snap(raw("a", chains=["Proxy", "hk-01"]),
                          raw("b", chains=["Proxy", "jp-02"]),
                          raw("c", chains=["DIRECT"])))
        assert store.connection_ids_via("hk-01") == ["a"]
        assert store.connection_ids_via("Proxy") == ["a", "b"]
        assert store.connection_ids_via("nowhere") == []

    def test_connection_ids_via_reads_latest_even_when_paused(self, store):
        store.set_paused(True)
        store.ingest(snap(raw("a", chains=["node"])))
        assert store.active_connections == ()
        assert store.connection_ids_via("node") == ["a"]

    def test_totals_passthrough(self, store):
        assert store.totals() == (0, 0)
        store.ingest(snap(upload_total=123, download_total=456))
        assert store.totals() == (123, 456)

    def test_sink_notified_on_publication_only(self, store):
        seen = []

        class Sink:
            def on_views(self, views):
                seen.append(views.sequence)

        store.emitter.attach(Sink())
        store.ingest(snap(raw("a")))
        store.set_paused(True)
        store.ingest(snap(raw("a")))
        store.set_paused(False)
        store.ingest(snap(raw("a")))
        assert seen == [1, 3]


class TestEngineConfigWiring:

    def test_clamp_policy_applied_by_ingest(self):
        store = ConnectionStore(EngineConfig(negative_speed_policy="clamp"))
        store.ingest(snap(raw("a", upload=100, download=100)))
        store.ingest(snap(raw("a", upload=40, download=130)))
        assert speeds(store.active_connections) == {"a": (0, 30)}

    def test_passthrough_policy_keeps_negative_delta(self, store):
        store.ingest(snap(raw("a", upload=100, download=100)))
        store.ingest(snap(raw("a", upload=40, download=130)))
        assert speeds(store.active_connections) == {"a": (-60, 30)}
