import json

import pytest
from scoring_app.models import TaskType
from scoring_app.services.evaluation_store import (
    EvaluationStore, TaskEvaluationData, ensure_task_data, storage_key,
    update_metric_input, update_qualitative_opinion, update_qualitative_score,
)
from scoring_app.services.task_math import calculate_task_result

PERIOD = "2025-H2"


class TestStoreLayout:
    def test_key_is_period_dash_task(self):
        assert storage_key("2025-H1", "t3") == "2025-H1-t3"

    def test_get_missing_is_none(self, store):
        assert store.get(PERIOD, "t1") is None

    def test_set_and_get(self, store, make_data):
        data = make_data({"delay_days": 3})
        store.set(PERIOD, "t1", data)
        assert store.get(PERIOD, "t1") == data
        assert f"{PERIOD}-t1" in store

    def test_save_all_wire_shape(self, store, make_data):
        store.set(PERIOD, "t1", make_data({"delay_days": 3}, qualitative_score=75, opinion="ok"))
        assert store.save_all() == {
            "2025-H2-t1": {
                "metrics": {"delay_days": {"configId": "delay_days", "inputValue": 3.0}},
                "qualitativeScore": 75,
                "qualitativeOpinion": "ok",
            }
        }

    @pytest.mark.parametrize("blob", [None, "", {}])
    def test_load_empty(self, blob):
        assert len(EvaluationStore.load_all(blob)) == 0

    def test_load_rejects_non_object(self):
        with pytest.raises(ValueError):
            EvaluationStore.load_all("[1, 2]")

    def test_load_coerces_junk_inputs_to_zero(self):
        store = EvaluationStore.load_all({
            "2025-H2-t1": {
                "metrics": {"delay_days": {"configId": "delay_days", "inputValue": "abc"}},
                "qualitativeScore": None,
            },
            "2025-H2-t2": "not a record",
        })
        data = store.get(PERIOD, "t1")
        assert data.input_for("delay_days") == 0
        assert data.qualitative_score == 0
        assert data.qualitative_opinion == ""
        assert store.get(PERIOD, "t2") is None

    @pytest.mark.parametrize("metrics", [[1, 2], "x", 7])
    def test_load_ignores_non_mapping_metrics(self, metrics, caplog):
        store = EvaluationStore.load_all({"2025-H2-t1": {"metrics": metrics, "qualitativeScore": 70}})
        data = store.get(PERIOD, "t1")
        assert data.metrics == {}
        assert data.qualitative_score == 70
        assert "malformed metrics" in caplog.text

    def test_load_skips_non_mapping_metric_entries(self):
        store = EvaluationStore.load_all({"2025-H2-t1": {"metrics": {
            "delay_days": 5,
            "start_compliance": "x",
            "deadline_compliance": {"inputValue": 80},
        }}})
        data = store.get(PERIOD, "t1")
        assert set(data.metrics) == {"deadline_compliance"}
        assert data.input_for("deadline_compliance") == 80
        assert data.input_for("delay_days") == 0

    def test_qualitative_score_not_clamped_on_read(self):
        store = EvaluationStore.load_all({"2025-H2-t1": {"metrics": {}, "qualitativeScore": 140}})
        assert store.get(PERIOD, "t1").qualitative_score == 140


class TestRoundTrip:
    def test_reload_gives_identical_scores(self, make_task, make_data):
        tasks = [make_task("t1"), make_task("t2", task_type=TaskType.DEVELOPMENT), make_task("t3")]
        store = EvaluationStore()
        store.set(PERIOD, "t1", make_data({"plan_specificity": 117.5, "delay_days": 0.25},
                                          qualitative_score=77.7, opinion="한글 의견"))
        store.set(PERIOD, "t2", make_data({"schedule_changes": 12, "start_compliance": 101},
                                          qualitative_score=0))

        reloaded = EvaluationStore.load_all(json.loads(store.dumps()))

        assert reloaded.save_all() == store.save_all()
        for task in tasks:
            assert (calculate_task_result(task, reloaded.get(PERIOD, task.task_id))
                    == calculate_task_result(task, store.get(PERIOD, task.task_id)))

    def test_from_dict_to_dict(self, make_data):
        data = make_data({"start_compliance": 55}, qualitative_score=12.5, opinion="x")
        assert TaskEvaluationData.from_dict(data.to_dict()) == data


class TestInputChanges:
    def test_ensure_seeds_defaults_once(self, store, make_task):
        task = make_task()
        data = ensure_task_data(store, PERIOD, task)
        assert data.qualitative_score == 80
        assert data.qualitative_opinion == ""
        assert set(data.metrics) == {"plan_specificity", "schedule_changes", "start_compliance",
                                     "deadline_compliance", "delay_days"}

        update_qualitative_score(store, PERIOD, task, 10)
        assert ensure_task_data(store, PERIOD, task).qualitative_score == 10

    def test_update_metric_replaces_only_that_metric(self, store, make_task):
        task = make_task()
        before = ensure_task_data(store, PERIOD, task)
        after = update_metric_input(store, PERIOD, task, "delay_days", 12)

        assert after.input_for("delay_days") == 12
        assert before.input_for("delay_days") == 0
        for metric_id in ("plan_specificity", "schedule_changes", "start_compliance"):
            assert after.input_for(metric_id) == before.input_for(metric_id)
        assert store.get(PERIOD, task.task_id) == after

    @pytest.mark.parametrize("raw, expected", [(-10, 0), (0, 0), (55.5, 55.5), (100, 100),
                                               (250, 100), ("abc", 0), (None, 0)])
    def test_qualitative_score_clamped_on_write(self, store, make_task, raw, expected):
        data = update_qualitative_score(store, PERIOD, make_task(), raw)
        assert data.qualitative_score == expected

    def test_opinion(self, store, make_task):
        task = make_task()
        update_qualitative_opinion(store, PERIOD, task, "Great planning")
        assert store.get(PERIOD, task.task_id).qualitative_opinion == "Great planning"
        update_qualitative_opinion(store, PERIOD, task, None)
        assert store.get(PERIOD, task.task_id).qualitative_opinion == ""
