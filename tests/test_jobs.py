"""Tests for queued job discovery, the jobs query and the job introspector."""

import pytest

from fluent_introspect import Introspect, InvalidTargetError, JobHeuristic, ShouldQueue
from fluent_introspect.config import DiscoveryConfig
from fluent_introspect.query import MARKER_ONLY

from sample_app.contracts import Repository
from sample_app.jobs import ProcessPodcast, PruneStaleFiles, SendWelcomeEmail
from sample_app.services import CleanupJob, DynamicQueueJob

MODULES = ["sample_app"]


def short_names(classes):
    return sorted(cls.__name__ for cls in classes)


class TestJobDiscovery:
    """How classes are recognised as jobs."""

    def test_default_heuristic(self):
        """Marker, name suffix and module segment all count."""
        assert short_names(Introspect.jobs(MODULES).get()) == [
            "CleanupJob",
            "DynamicQueueJob",
            "ProcessPodcast",
            "PruneStaleFiles",
            "SendWelcomeEmail",
        ]

    def test_marker_only(self):
        assert short_names(Introspect.jobs(MODULES, heuristic=MARKER_ONLY).get()) == [
            "DynamicQueueJob",
            "ProcessPodcast",
            "SendWelcomeEmail",
        ]

    def test_custom_heuristic(self):
        heuristic = JobHeuristic(marker=None, suffixes=("Job",), module_segments=())
        assert short_names(Introspect.jobs(MODULES, heuristic=heuristic).get()) == [
            "CleanupJob",
            "DynamicQueueJob",
        ]

    def test_heuristic_from_config(self):
        heuristic = JobHeuristic.from_config(DiscoveryConfig(job_suffixes=["Podcast"]))
        assert heuristic.suffixes == ("Podcast",)
        assert heuristic.module_segments == ("jobs",)
        assert heuristic.marker is ShouldQueue

    def test_heuristic_rejects_interfaces(self):
        assert not JobHeuristic(suffixes=("Repository",))(Repository)

    def test_explicit_candidates_bypass_heuristic(self):
        query = Introspect.jobs(MODULES).in_(["sample_app.jobs.PruneStaleFiles"])
        assert query.where_tries(1).get() == ["sample_app.jobs.PruneStaleFiles"]


class TestJobsQuery:
    """Filters over job settings."""

    def test_where_queue(self):
        assert Introspect.jobs(MODULES).where_queue("emails").get() == [SendWelcomeEmail]

    def test_where_queue_or(self):
        query = (
            Introspect.jobs(MODULES)
            .where_queue("emails")
            .or_(lambda q: q.where_queue("maintenance"))
        )
        assert short_names(query.get()) == ["CleanupJob", "SendWelcomeEmail"]

    def test_dynamic_queue_matches_nothing(self):
        assert Introspect.jobs(MODULES).where_queue("dynamic").get() == []

    def test_where_connection(self):
        jobs = Introspect.jobs(MODULES)
        assert jobs.where_connection("redis").get() == [SendWelcomeEmail]
        assert jobs.where_connection("sqs").get() == []

    def test_where_tries(self):
        jobs = Introspect.jobs(MODULES)
        assert jobs.where_tries(5).get() == [ProcessPodcast]
        assert jobs.where_tries(1).get() == [PruneStaleFiles]

    def test_unique_and_encrypted(self):
        jobs = Introspect.jobs(MODULES)
        assert jobs.where_unique().get() == [ProcessPodcast]
        assert jobs.where_encrypted().get() == [ProcessPodcast]

    def test_where_has_middleware(self):
        """Middleware that needs constructor state counts as none."""
        assert Introspect.jobs(MODULES).where_has_middleware().get() == [ProcessPodcast]

    def test_to_list(self):
        rows = Introspect.jobs(MODULES).where_queue("emails").to_list()
        assert rows == [
            {
                "class": "sample_app.jobs.SendWelcomeEmail",
                "queue": "emails",
                "connection": "redis",
                "tries": 3,
                "backoff": [10, 30],
                "middleware": [],
                "unique": False,
                "encrypted": False,
            }
        ]


class TestJobIntrospector:
    """Settings of a single job."""

    def test_static_settings(self):
        job = Introspect.job(SendWelcomeEmail)
        assert job.queue() == "emails"
        assert job.connection() == "redis"
        assert job.tries() == 3
        assert job.timeout() == 120
        assert job.backoff() == [10, 30]
        assert job.max_exceptions() is None
        assert job.fail_on_timeout() is False

    def test_job_with_constructor(self):
        """Settings and middleware are read without calling __init__."""
        job = Introspect.job(ProcessPodcast)
        assert job.queue() == "media"
        assert job.max_exceptions() == 2
        assert job.fail_on_timeout() is True
        assert job.middleware() == ["rate_limited"]
        assert job.is_unique()
        assert job.is_encrypted()
        assert job.unique_id() == "podcast"

    def test_delete_when_missing_models(self):
        job = Introspect.job("sample_app.jobs.PruneStaleFiles")
        assert job.delete_when_missing_models() is True
        assert job.queue() is None

    def test_runtime_settings_are_unknown(self):
        job = Introspect.job(DynamicQueueJob)
        assert job.queue() is None
        assert job.connection() is None
        assert job.tries() is None
        assert job.middleware() == []

    def test_unique_id_needs_unique_marker(self):
        assert Introspect.job(CleanupJob).unique_id() is None

    def test_to_dict(self):
        data = Introspect.job(CleanupJob).to_dict()
        assert data["class"] == "sample_app.services.CleanupJob"
        assert data["namespace"] == "sample_app.services"
        assert data["short_name"] == "CleanupJob"
        assert data["queue"] == "maintenance"
        assert data["delete_when_missing_models"] is False
        assert data["unique_id"] is None

    def test_unknown_class(self):
        with pytest.raises(InvalidTargetError):
            Introspect.job("sample_app.jobs.Missing")

    def test_abstract_class(self):
        with pytest.raises(InvalidTargetError, match="not instantiable"):
            Introspect.job(Repository)
