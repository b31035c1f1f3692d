"""
Performance Evaluation

Evaluates network predictions against their gold standards. A
PerformanceEvaluator runs the per-network analyses selected by the
analysis flags; the BatchPerformanceEvaluator runs one evaluator per gold
standard and then the analyses done over the complete batch (background
confidence, network motifs, feedback loops).
"""

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from .analysis.background import BackgroundAnalysis, BackgroundPrediction
from .analysis.edge_types import EdgeTypePrediction
from .analysis.loops import LoopAnalysis, LoopPrediction
from .analysis.motif_analysis import MotifAnalysis
from .analysis.score import ScoreCurve
from .exceptions import EvaluationCancelled, MissingPredictionError
from .motifs.catalog import MotifCatalog, default_catalog
from .motifs.profile import MotifProfile, MotifProfiler
from .network.gold_standard import GoldStandard, GraphFacts
from .network.prediction import RankMatrix
from .utils.config import EvaluationSettings
from .utils.io import result_path, write_table
from .utils.logging import ProgressLogger, get_logger, log_duration


logger = get_logger("evaluator")


class PerformanceEvaluator:
    """
    Performance analysis of the prediction of one gold standard.

    Parameters
    ----------
    gold_standard : GoldStandard
        The network to evaluate against.
    settings : EvaluationSettings, optional
        Analysis flags; defaults to the packaged configuration.
    catalog : MotifCatalog, optional
        Motif definitions shared by all evaluators.
    """

    def __init__(
        self,
        gold_standard: GoldStandard,
        settings: Optional[EvaluationSettings] = None,
        catalog: Optional[MotifCatalog] = None,
    ):
        self.gold_standard = gold_standard
        self.settings = settings or EvaluationSettings.default()
        self.catalog = catalog or default_catalog()
        self.facts = GraphFacts.from_gold_standard(gold_standard)

        self.rank_matrix: Optional[RankMatrix] = None
        self._reset_results()

    def _reset_results(self):
        self.background: Optional[BackgroundPrediction] = None
        self.motif_profile: Optional[MotifProfile] = None
        self.edge_types: Optional[EdgeTypePrediction] = None
        self.loops: Optional[LoopPrediction] = None
        self.score: Optional[ScoreCurve] = None

    @property
    def name(self) -> str:
        return self.gold_standard.name

    @property
    def has_prediction(self) -> bool:
        return self.rank_matrix is not None

    def load_prediction(self, source, name: str = "") -> RankMatrix:
        """
        Load a prediction from a TSV file or from rows.

        The rank matrix is only replaced once the new prediction was read
        without error.

        Parameters
        ----------
        source : str, Path, or iterable of rows
            Prediction file, or ``(source, target, confidence)`` rows.
        name : str
            Prediction name for rows (files use their stem).
        """
        if isinstance(source, (str, Path)):
            rank_matrix = RankMatrix.from_file(
                self.gold_standard, source, self.settings.predict_self_loops
            )
        else:
            rank_matrix = RankMatrix.from_rows(
                self.gold_standard, source, self.settings.predict_self_loops, name=name
            )

        self.rank_matrix = rank_matrix
        self._reset_results()
        return rank_matrix

    def reset_prediction(self):
        self.rank_matrix = None
        self._reset_results()

    def require_rank_matrix(self) -> RankMatrix:
        if self.rank_matrix is None:
            raise MissingPredictionError(f"No prediction loaded for gold standard {self.name}")
        return self.rank_matrix

    def run(self) -> "PerformanceEvaluator":
        """Run the per-network analyses enabled in the settings."""
        settings = self.settings
        self._reset_results()

        if self.rank_matrix is None and (settings.needs_score or settings.loop_analysis or settings.needs_background):
            logger.warning(f"No prediction for {self.name}, rank-dependent analyses are skipped")

        if settings.needs_background and self.rank_matrix is not None:
            self.background = BackgroundPrediction.from_prediction(self.facts, self.rank_matrix)

        if settings.network_motif_analysis:
            profiler = MotifProfiler(self.facts, self.catalog, self.rank_matrix)
            self.motif_profile = profiler.profile()

        if self.rank_matrix is None:
            return self

        if settings.edge_type_analysis:
            self.edge_types = EdgeTypePrediction(self.facts, self.rank_matrix)
            self.edge_types.run()

        if settings.loop_analysis:
            self.loops = LoopPrediction.from_prediction(self.facts, self.rank_matrix)

        if settings.needs_score:
            if self.facts.num_scored_edges() == 0:
                logger.warning(f"Gold standard {self.name} has no edges, PR and ROC curves are skipped")
            else:
                self.score = ScoreCurve(self.facts, self.rank_matrix).run()

        return self

    def save(self, output_dir: Optional[str | Path] = None) -> List[Path]:
        """Write the per-network results; I/O errors are logged by the writers."""
        output_dir = output_dir or self.settings.output_dir
        written: List[Path] = []

        if self.motif_profile is not None:
            written += self.motif_profile.save(output_dir)
        if self.edge_types is not None:
            path = self.edge_types.save(output_dir)
            if path is not None:
                written.append(path)
        if self.score is not None and (self.settings.plot_pr or self.settings.plot_roc):
            written += self.score.save(output_dir)
            curves = [c for c, on in (("pr", self.settings.plot_pr), ("roc", self.settings.plot_roc)) if on]
            path = self.score.save_plot(curves, output_dir)
            if path is not None:
                written.append(path)

        return written


class BatchPerformanceEvaluator:
    """
    Batch performance evaluator for a set of networks.

    ROC and PR curves are computed for every network; the network motif
    and loop analyses are done over the complete set of networks.

    Parameters
    ----------
    gold_standards : sequence of GoldStandard
        One gold standard per network of the batch.
    settings : EvaluationSettings, optional
        Analysis flags; defaults to the packaged configuration.
    catalog : MotifCatalog, optional
        Motif definitions shared by all evaluators.
    """

    def __init__(
        self,
        gold_standards: Sequence[GoldStandard],
        settings: Optional[EvaluationSettings] = None,
        catalog: Optional[MotifCatalog] = None,
    ):
        self.settings = settings or EvaluationSettings.default()
        self.catalog = catalog or default_catalog()
        self.evaluators = [
            PerformanceEvaluator(gs, self.settings, self.catalog) for gs in gold_standards
        ]

        self.background: Optional[BackgroundAnalysis] = None
        self.motif_analysis: Optional[MotifAnalysis] = None
        self.loop_analysis: Optional[LoopAnalysis] = None

    @property
    def prediction_name(self) -> str:
        if self.settings.prediction_name:
            return self.settings.prediction_name
        for evaluator in self.evaluators:
            if evaluator.rank_matrix is not None and evaluator.rank_matrix.name:
                return evaluator.rank_matrix.name
        return "prediction"

    def load_predictions(self, prediction_files: Sequence[str | Path]) -> int:
        """
        Load one prediction file per gold standard, in the same order.

        A count mismatch is only logged; the available pairs are loaded.

        Returns
        -------
        int
            Number of predictions loaded.
        """
        if len(prediction_files) != 0 and len(prediction_files) != len(self.evaluators):
            logger.warning(
                f"The number of predictions ({len(prediction_files)}) doesn't match "
                f"the number of gold standards ({len(self.evaluators)})"
            )

        loaded = 0
        for evaluator, filepath in zip(self.evaluators, prediction_files):
            evaluator.load_prediction(filepath)
            loaded += 1

        return loaded

    def _evaluate(self, evaluator: PerformanceEvaluator, cancel_event: Optional[threading.Event]) -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return False
        evaluator.run()
        return True

    def run(
        self,
        cancel_event: Optional[threading.Event] = None,
        max_workers: int = 1,
    ) -> "BatchPerformanceEvaluator":
        """
        Run the evaluators, then the batch analyses.

        Parameters
        ----------
        cancel_event : threading.Event, optional
            Checked before every network; once set, the remaining networks
            are skipped and EvaluationCancelled is raised.
        max_workers : int
            Number of networks evaluated in parallel.
        """
        progress = ProgressLogger(len(self.evaluators), desc="Evaluating networks", logger=logger)

        if max_workers <= 1:
            for evaluator in self.evaluators:
                if not self._evaluate(evaluator, cancel_event):
                    break
                progress.update(item=evaluator.name)
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = {
                    executor.submit(self._evaluate, evaluator, cancel_event): evaluator
                    for evaluator in self.evaluators
                }
                for future in as_completed(futures):
                    if future.result():
                        progress.update(item=futures[future].name)

        if cancel_event is not None and cancel_event.is_set():
            progress.close("cancelled")
            raise EvaluationCancelled(
                f"The batch evaluation was cancelled, {progress.remaining} networks not evaluated"
            )

        progress.close()
        with log_duration(logger, "Batch analyses"):
            self._run_batch_analyses()
        return self

    def _run_batch_analyses(self):
        settings = self.settings
        evaluated = [e for e in self.evaluators if e.has_prediction]

        if settings.needs_background:
            self.background = BackgroundAnalysis([e.background for e in evaluated])

        if settings.network_motif_analysis:
            self.motif_analysis = MotifAnalysis(
                [e.motif_profile for e in evaluated],
                self.background,
                catalog=self.catalog,
                pvalue_floor=settings.pvalue_floor,
            ).run()

        if settings.loop_analysis:
            self.loop_analysis = LoopAnalysis(
                [e.loops for e in evaluated],
                pvalue_floor=settings.pvalue_floor,
            )

    def score_summary(self) -> pd.DataFrame:
        """AUPR and AUROC of every network (NaN where not computed)."""
        records = []
        for evaluator in self.evaluators:
            score = evaluator.score
            records.append({
                "network": evaluator.name,
                "prediction": evaluator.rank_matrix.name if evaluator.rank_matrix is not None else "",
                "aupr": score.aupr if score is not None else np.nan,
                "auroc": score.auroc if score is not None else np.nan,
            })
        return pd.DataFrame(records, columns=["network", "prediction", "aupr", "auroc"])

    def save(self, output_dir: Optional[str | Path] = None) -> List[Path]:
        """
        Write the results of every enabled analysis.

        Errors are logged; the results stay available in memory.
        """
        output_dir = output_dir or self.settings.output_dir
        name = self.prediction_name
        written: List[Path] = []

        for evaluator in self.evaluators:
            written += evaluator.save(output_dir)

        if self.motif_analysis is not None:
            written += self.motif_analysis.save(name, output_dir)
            path = self.catalog.save_definitions(result_path(output_dir, "motif_definitions.txt"))
            if path is not None:
                written.append(path)

        if self.loop_analysis is not None:
            written += self.loop_analysis.save(name, output_dir)

        if self.settings.aupr or self.settings.auroc:
            try:
                written.append(write_table(
                    self.score_summary(), result_path(output_dir, name, "scores.tsv"), header=True
                ))
            except OSError as e:
                logger.warning(f"Error saving score summary: {e}")

        return written


def evaluate(
    gold_standards: Iterable[GoldStandard],
    prediction_files: Sequence[str | Path],
    settings: Optional[EvaluationSettings] = None,
    max_workers: int = 1,
    configure_logging: bool = False,
) -> BatchPerformanceEvaluator:
    """Load, run and return a batch evaluation."""
    settings = settings or EvaluationSettings.default()
    if configure_logging:
        settings.configure_logging()

    batch = BatchPerformanceEvaluator(list(gold_standards), settings)
    batch.load_predictions(prediction_files)
    return batch.run(max_workers=max_workers)
