"""
test_propagation.py
-------------------
Unit tests for PropagationCoordinator.

Covers the field map per entity kind, token safety, idempotence, the
no-op guard and continue-on-error behaviour.
"""
import pytest
from unittest.mock import MagicMock, patch

from catalog.core.exceptions import DatabaseError, ValidationError
from catalog.database.codec import encode_record
from catalog.sync.propagation import (
    PropagationCoordinator,
    SyncReport,
    token_field_rewriter,
)


class TestCastRename:
    """Test propagate_cast_rename field selection."""

    def test_actress_rename(self, coordinator, put_movie, put_scmovie, read_record):
        put_movie("m1", actress="Maria Ozawa, Yui Hatano")
        put_movie("m2", actress="Maria Ozawa")
        put_movie("m3", actress="Yui Hatano")
        put_scmovie("s1", cast="Maria Ozawa")

        report = coordinator.propagate_cast_rename("actress", "Maria Ozawa", "Maria O.")

        assert report == SyncReport(2, 1)
        assert read_record("movie:m1")["actress"] == "Maria O., Yui Hatano"
        assert read_record("movie:m2")["actress"] == "Maria O."
        assert read_record("movie:m3")["actress"] == "Yui Hatano"
        assert read_record("scmovie:s1")["cast"] == "Maria O."

    def test_actor_rewrites_actors_field_only(
        self, coordinator, put_movie, read_record
    ):
        put_movie("m1", actors="Ken", actress="Ken")

        report = coordinator.propagate_cast_rename("actor", "Ken", "Kenji")

        record = read_record("movie:m1")
        assert report.records_updated == 1
        assert record["actors"] == "Kenji"
        assert record["actress"] == "Ken"

    def test_director_is_scalar(self, coordinator, put_movie, put_scmovie, read_record):
        put_movie("m1", director="Kaoru Toda")
        put_movie("m2", director="Kaoru Toda, Other")
        put_scmovie("s1", cast="Other, Kaoru Toda")

        report = coordinator.propagate_cast_rename("director", "Kaoru Toda", "K. Toda")

        assert report == SyncReport(1, 1)
        assert read_record("movie:m1")["director"] == "K. Toda"
        assert read_record("movie:m2")["director"] == "Kaoru Toda, Other"
        assert read_record("scmovie:s1")["cast"] == "Other, K. Toda"

    def test_token_safety(self, coordinator, put_movie, read_record):
        put_movie("m1", actress="Ai, Aiko")
        put_movie("m2", actress="Aiko")

        report = coordinator.propagate_cast_rename("actress", "Ai", "Ai Uehara")

        assert report.records_updated == 1
        assert read_record("movie:m1")["actress"] == "Ai Uehara, Aiko"
        assert read_record("movie:m2")["actress"] == "Aiko"

    def test_other_fields_preserved_and_timestamp_set(
        self, coordinator, put_movie, read_record
    ):
        put_movie("m1", actress="Yui", title="Sample", code="ABP-123")

        coordinator.propagate_cast_rename("actress", "Yui", "Yui H.")

        record = read_record("movie:m1")
        assert record["title"] == "Sample"
        assert record["code"] == "ABP-123"
        assert record["updatedAt"].endswith("Z")

    def test_unchanged_records_are_not_written(self, coordinator, store, put_movie):
        put_movie("m1", actress="Someone Else")

        with patch.object(store, "set", wraps=store.set) as spy:
            coordinator.propagate_cast_rename("actress", "Yui", "Yui H.")

        spy.assert_not_called()

    def test_idempotent(self, coordinator, put_movie, put_scmovie, read_record):
        put_movie("m1", actress="Yui, Ai")
        put_scmovie("s1", cast="Yui")

        coordinator.propagate_cast_rename("actress", "Yui", "Yui H.")
        snapshot = read_record("movie:m1")
        second = coordinator.propagate_cast_rename("actress", "Yui", "Yui H.")

        assert second == SyncReport(0, 0)
        assert read_record("movie:m1") == snapshot

    def test_rejects_non_cast_kind(self, coordinator):
        with pytest.raises(ValidationError):
            coordinator.propagate_cast_rename("studio", "A", "B")


class TestNoOpGuard:
    """Test that unchanged or empty names never scan."""

    @pytest.mark.parametrize(
        "old_name,new_name", [("Yui", "Yui"), ("", "Yui"), ("Yui", ""), (None, "Yui")]
    )
    def test_no_scan(self, old_name, new_name):
        store = MagicMock()
        coordinator = PropagationCoordinator(store)

        report = coordinator.propagate_cast_rename("actress", old_name, new_name)

        assert report == SyncReport(0, 0)
        store.iter_prefix.assert_not_called()
        store.get_by_prefix.assert_not_called()
        store.set.assert_not_called()


class TestLabelRename:
    """Test propagate_label_rename."""

    def test_tag_rename(self, coordinator, put_movie, put_scmovie, read_record):
        put_movie("m1", tags="Drama, Office")
        put_scmovie("s1", tags="Drama")
        put_scmovie("s2", tags="Comedy")

        report = coordinator.propagate_label_rename("tag", "Drama", "Melodrama")

        assert report == SyncReport(1, 1)
        assert read_record("movie:m1")["tags"] == "Melodrama, Office"
        assert read_record("scmovie:s2")["tags"] == "Comedy"

    def test_type_rename(self, coordinator, put_movie, put_scmovie, read_record):
        put_movie("m1", type="Feature")
        put_scmovie("s1", type="Feature")

        report = coordinator.propagate_label_rename("type", "Feature", "Main Feature")

        assert report == SyncReport(1, 1)
        assert read_record("movie:m1")["type"] == "Main Feature"

    def test_propagate_dispatches_by_type(self, coordinator, put_movie):
        put_movie("m1", tags="Drama")
        assert coordinator.propagate("tag", "Drama", "Melo").records_updated == 1
        assert coordinator.propagate("studio", "S1", "S2") == SyncReport()


class TestPartialFailure:
    """Test continue-on-error behaviour."""

    @pytest.mark.parametrize(
        "error", [DatabaseError("disk I/O error"), OSError("network reset")]
    )
    def test_failed_write_is_skipped(
        self, coordinator, store, put_movie, read_record, error
    ):
        for movie_id in ("m1", "m2", "m3"):
            put_movie(movie_id, actress="Yui")

        original_set = store.set

        def flaky_set(key, value):
            if key == "movie:m2":
                raise error
            return original_set(key, value)

        with patch.object(store, "set", side_effect=flaky_set):
            report = coordinator.propagate_cast_rename("actress", "Yui", "Yui H.")

        assert report.records_updated == 2
        assert read_record("movie:m1")["actress"] == "Yui H."
        assert read_record("movie:m2")["actress"] == "Yui"
        assert read_record("movie:m3")["actress"] == "Yui H."

    def test_malformed_record_is_skipped(self, coordinator, store, put_movie, read_record):
        put_movie("m1", actress="Yui")
        store.set("movie:m2", "{broken")
        put_movie("m3", actress="Yui")

        summary = coordinator.rewrite_partition(
            "movie:", token_field_rewriter("actress", "Yui", "Yui H.")
        )

        assert (summary.updated, summary.failed, summary.unchanged) == (2, 1, 0)
        assert store.get("movie:m2") == "{broken"

    def test_transform_error_is_skipped(self, coordinator, put_movie, read_record):
        put_movie("m1", actress="Yui")
        put_movie("m2", actress="Yui", broken=True)
        put_movie("m3", actress="Yui")
        rewrite = token_field_rewriter("actress", "Yui", "Yui H.")

        def fragile(record):
            if record.get("broken"):
                raise TypeError("unexpected field layout")
            return rewrite(record)

        summary = coordinator.rewrite_partition("movie:", fragile)

        assert (summary.updated, summary.failed, summary.aborted) == (2, 1, False)
        assert read_record("movie:m2")["actress"] == "Yui"
        assert read_record("movie:m3")["actress"] == "Yui H."

    @pytest.mark.parametrize(
        "error", [DatabaseError("connection lost"), ConnectionResetError("reset")]
    )
    def test_scan_failure_keeps_completed_count(self, store, error):
        def failing_scan(prefix, page_size=None):
            yield "movie:m1", encode_record({"id": "m1", "actress": "Yui"})
            raise error

        coordinator = PropagationCoordinator(store)
        with patch.object(store, "iter_prefix", side_effect=failing_scan):
            summary = coordinator.rewrite_partition(
                "movie:", token_field_rewriter("actress", "Yui", "Yui H.")
            )

        assert summary.aborted is True
        assert summary.updated == 1


class TestSyncReport:
    """Test SyncReport serialization."""

    def test_to_dict_uses_wire_names(self):
        assert SyncReport(2, 1).to_dict() == {
            "recordsUpdated": 2,
            "secondaryRecordsUpdated": 1,
        }

    def test_total(self):
        assert SyncReport(2, 1).total == 3
