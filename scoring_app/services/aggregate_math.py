import logging

from scoring_app.services.evaluation_store import EvaluationStore
from scoring_app.services.task_math import (
    EvaluationResult, TaskSummary, calculate_task_result, grade_for, zero_result
)

logger = logging.getLogger(__name__)


def calculate_comprehensive_result(tasks, store: EvaluationStore, period) -> EvaluationResult:
    """
    Person-level result over all of their work items in a period.

    quant_converted and qual_converted are the means of the per-task
    converted scores; final is the sum of those two means, graded with the
    same thresholds as a single task. No tasks → zero result.
    """
    task_results = [(task, calculate_task_result(task, store.get(period, task.task_id)))
                    for task in tasks]
    if not task_results:
        return zero_result()

    count = len(task_results)
    avg_quant = sum(r.quant_converted for _, r in task_results) / count
    avg_qual = sum(r.qual_converted for _, r in task_results) / count
    avg_final = avg_quant + avg_qual

    logger.debug("Comprehensive score over %d tasks for %s: %.2f", count, period, avg_final)

    return EvaluationResult(
        quant_total_weighted=0.0,
        quant_converted=avg_quant,
        qual_converted=avg_qual,
        final_score=avg_final,
        grade=grade_for(avg_final),
        breakdown=[],
        is_comprehensive=True,
        task_summaries=[
            TaskSummary(
                task_id=task.task_id,
                task_name=task.name,
                final_score=result.final_score,
                quant_converted=result.quant_converted,
                qual_converted=result.qual_converted,
            )
            for task, result in task_results
        ],
    )
