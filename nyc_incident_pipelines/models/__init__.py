from .occurrence import (
    ClassifierSplit,
    ConfusionSummary,
    OccurrenceModelResult,
    run_occurrence_classifier,
    split_train_test,
)

__all__ = [
    "ClassifierSplit",
    "ConfusionSummary",
    "OccurrenceModelResult",
    "run_occurrence_classifier",
    "split_train_test",
]
