# Daily occurrence classifier: does a borough see at least one incident on a given day?
# Logistic regression on borough identity, evaluated with a confusion matrix.

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
import statsmodels.api as sm
from sklearn.metrics import confusion_matrix
from sklearn.model_selection import train_test_split
from rich.console import Console
from rich.table import Table

from config import OCCURRENCE_THRESHOLD, RANDOM_SEED, REFERENCE_BOROUGH, TRAIN_FRACTION
from nyc_incident_pipelines.utils.logging import log_step

console = Console()

TARGET_COL = "occurred"
GROUP_COL = "borough"


# -------------------------------------------------------------
# RESULT TYPES
# -------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class ClassifierSplit:
    train: pd.DataFrame
    test: pd.DataFrame

    @property
    def total(self) -> int:
        return len(self.train) + len(self.test)

    @property
    def train_fraction(self) -> float:
        return len(self.train) / self.total if self.total else float("nan")


def _ratio(numerator: int, denominator: int) -> Optional[float]:
    if denominator == 0:
        return None
    return numerator / denominator


@dataclass(frozen=True)
class ConfusionSummary:
    """
    2×2 tabulation of predicted vs actual occurrence.

    A ratio whose denominator is zero is None (undefined), never 0 or 1.
    """

    true_positive: int
    true_negative: int
    false_positive: int
    false_negative: int

    @classmethod
    def from_counts(cls, tp: int, tn: int, fp: int, fn: int) -> "ConfusionSummary":
        return cls(int(tp), int(tn), int(fp), int(fn))

    @classmethod
    def from_predictions(cls, actual, predicted) -> "ConfusionSummary":
        actual = np.asarray(actual, dtype=bool)
        predicted = np.asarray(predicted, dtype=bool)
        if len(actual) == 0:
            return cls(0, 0, 0, 0)
        tn, fp, fn, tp = confusion_matrix(actual, predicted, labels=[False, True]).ravel()
        return cls.from_counts(tp, tn, fp, fn)

    @property
    def total(self) -> int:
        return self.true_positive + self.true_negative + self.false_positive + self.false_negative

    @property
    def accuracy(self) -> Optional[float]:
        return _ratio(self.true_positive + self.true_negative, self.total)

    @property
    def sensitivity(self) -> Optional[float]:
        return _ratio(self.true_positive, self.true_positive + self.false_negative)

    @property
    def specificity(self) -> Optional[float]:
        return _ratio(self.true_negative, self.true_negative + self.false_positive)

    @property
    def undefined_ratios(self) -> List[str]:
        names = ["accuracy", "sensitivity", "specificity"]
        return [name for name in names if getattr(self, name) is None]

    def as_dict(self) -> Dict[str, object]:
        return {
            "true_positive": self.true_positive,
            "true_negative": self.true_negative,
            "false_positive": self.false_positive,
            "false_negative": self.false_negative,
            "total": self.total,
            "accuracy": self.accuracy,
            "sensitivity": self.sensitivity,
            "specificity": self.specificity,
            "undefined_ratios": self.undefined_ratios,
        }


@dataclass(frozen=True, eq=False)
class OccurrenceModelResult:
    split: ClassifierSplit
    reference: str
    levels: List[str]
    coefficients: pd.DataFrame
    predictions: pd.DataFrame
    confusion: ConfusionSummary
    converged: bool
    fit: object = field(repr=False, compare=False)


# -------------------------------------------------------------
# SPLIT
# -------------------------------------------------------------

def split_train_test(
    panel: pd.DataFrame,
    train_fraction: float = TRAIN_FRACTION,
    seed: int = RANDOM_SEED,
) -> ClassifierSplit:
    """Seeded random partition of panel rows into disjoint train/test sets."""
    if not 0 < train_fraction < 1:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")
    if len(panel) < 2:
        raise ValueError("Need at least 2 rows to split into train and test.")

    train, test = train_test_split(
        panel, train_size=train_fraction, random_state=seed, shuffle=True
    )
    split = ClassifierSplit(train=train.sort_index(), test=test.sort_index())

    log_step("Train split", split.train)
    log_step("Test split", split.test)
    return split


# -------------------------------------------------------------
# LOGISTIC MODEL
# -------------------------------------------------------------

def borough_levels(boroughs: pd.Series, reference: str = REFERENCE_BOROUGH) -> List[str]:
    """Reference level first, remaining boroughs alphabetical."""
    observed = set(boroughs.dropna().unique())
    if reference not in observed:
        raise ValueError(f"Reference borough '{reference}' not present in training data.")
    return [reference] + sorted(observed - {reference})


def design_matrix(boroughs: pd.Series, levels: List[str]) -> pd.DataFrame:
    """Intercept + treatment-coded borough dummies (reference level dropped)."""
    unknown = sorted(set(boroughs.dropna().unique()) - set(levels))
    if unknown:
        console.print(f"[yellow]Boroughs unseen in training, coded as reference:[/yellow] {unknown}")

    cat = pd.Categorical(boroughs, categories=levels)
    dummies = pd.get_dummies(cat, prefix=GROUP_COL, drop_first=True, dtype=float)
    dummies.index = boroughs.index
    return sm.add_constant(dummies, has_constant="add")


def fit_occurrence_model(train: pd.DataFrame, reference: str = REFERENCE_BOROUGH):
    """Fit occurred ~ borough with statsmodels Logit. Returns (fit result, levels)."""
    y = train[TARGET_COL].astype(int)
    if y.nunique() < 2:
        raise ValueError("Training response is constant; logistic model cannot be fit.")

    levels = borough_levels(train[GROUP_COL], reference)
    X = design_matrix(train[GROUP_COL], levels)

    console.print(f"[cyan]Fitting logistic model ({len(levels)} boroughs, reference={reference})...[/cyan]")
    result = sm.Logit(y, X).fit(disp=False)
    if not fit_converged(result):
        console.print(
            "[yellow]Logistic fit did not converge; coefficients may be unreliable "
            "(a borough with no variation in occurrence?).[/yellow]"
        )
    return result, levels


def fit_converged(result) -> bool:
    """True when the maximum-likelihood optimizer reported convergence."""
    return bool(result.mle_retvals.get("converged", False))


def coefficient_table(result) -> pd.DataFrame:
    """Log-odds coefficients relative to the reference borough."""
    table = pd.DataFrame({
        "term": result.params.index,
        "coef": result.params.values,
        "std_err": result.bse.values,
        "p_value": result.pvalues.values,
    })
    table["odds_ratio"] = np.exp(table["coef"])
    return table.reset_index(drop=True)


def predict_occurrence(
    result,
    test: pd.DataFrame,
    levels: List[str],
    threshold: float = OCCURRENCE_THRESHOLD,
) -> pd.DataFrame:
    """Test rows with predicted probability and predicted occurrence (prob >= threshold)."""
    X_test = design_matrix(test[GROUP_COL], levels)
    X_test = X_test.reindex(columns=result.params.index, fill_value=0.0)

    preds = test.copy()
    preds["probability"] = np.asarray(result.predict(X_test), dtype=float)
    preds["predicted"] = preds["probability"] >= threshold
    return preds


# -------------------------------------------------------------
# EVALUATION
# -------------------------------------------------------------

def show_confusion_summary(summary: ConfusionSummary) -> None:
    table = Table(title="Occurrence Classifier – Test Set", show_lines=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("True positive", f"{summary.true_positive:,}")
    table.add_row("True negative", f"{summary.true_negative:,}")
    table.add_row("False positive", f"{summary.false_positive:,}")
    table.add_row("False negative", f"{summary.false_negative:,}")
    for name in ["accuracy", "sensitivity", "specificity"]:
        value = getattr(summary, name)
        table.add_row(name.capitalize(), "undefined" if value is None else f"{value:.4f}")

    console.print(table)

    for name in summary.undefined_ratios:
        console.print(f"[yellow]{name.capitalize()} undefined: zero denominator in test set.[/yellow]")


def run_occurrence_classifier(
    panel: pd.DataFrame,
    train_fraction: float = TRAIN_FRACTION,
    seed: int = RANDOM_SEED,
    reference: str = REFERENCE_BOROUGH,
    threshold: float = OCCURRENCE_THRESHOLD,
) -> OccurrenceModelResult:
    """Split → fit → predict → confusion matrix."""
    split = split_train_test(panel, train_fraction=train_fraction, seed=seed)
    result, levels = fit_occurrence_model(split.train, reference=reference)
    predictions = predict_occurrence(result, split.test, levels, threshold=threshold)

    summary = ConfusionSummary.from_predictions(predictions[TARGET_COL], predictions["predicted"])
    show_confusion_summary(summary)

    return OccurrenceModelResult(
        split=split,
        reference=reference,
        levels=levels,
        coefficients=coefficient_table(result),
        predictions=predictions,
        confusion=summary,
        converged=fit_converged(result),
        fit=result,
    )


__all__ = [
    "ClassifierSplit",
    "ConfusionSummary",
    "OccurrenceModelResult",
    "split_train_test",
    "borough_levels",
    "design_matrix",
    "fit_occurrence_model",
    "fit_converged",
    "coefficient_table",
    "predict_occurrence",
    "show_confusion_summary",
    "run_occurrence_classifier",
]
