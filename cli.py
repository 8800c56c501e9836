#!/usr/bin/env python3
"""
MASC Point Cloud Classifier - Command Line Interface

Trening i ewaluacja klasyfikatora Random Trees na cechach punktowych
(pola skalarne, współrzędne, kolory) chmur LAS/LAZ.

Usage:
    python cli.py train labeled.las model.pkl --features Intensity,Z,R,G,B
    python cli.py evaluate test.las model.pkl
    python cli.py classify input.las model.pkl output.las

Examples:
    # Trening z 20% punktów odłożonych do testu i raportem JSON
    python cli.py train data/labeled.las models/masc.pkl -f Intensity,Z --test-ratio 0.2 --report out/train.json

    # Ewaluacja na innej chmurze (cechy zapisane w modelu)
    python cli.py evaluate data/test.las models/masc.pkl

    # Klasyfikacja całej chmury
    python cli.py classify data/input.las models/masc.pkl output/classified.las
"""

import argparse
import itertools
import json
import logging
import sys
import time
from pathlib import Path

from masc.config import LOGGING, SAMPLING
from masc.core import LASLoader, LASWriter, PointSubset
from masc.features import parse_features, missing_features
from masc.ml import Classifier, ProgressSink, RandomTreesParams

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description="MASC Point Cloud Classifier - Random Trees na cechach punktowych",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Cechy (--features, oddzielone przecinkami):
  X, Y, Z        - współrzędne
  R, G, B        - kanały koloru
  SF:<nazwa>     - pole skalarne (lub sama nazwa pola, np. Intensity)

Przykłady:
  python cli.py train labeled.las model.pkl -f Intensity,Z
  python cli.py classify input.las model.pkl output.las
        """
    )

    # Verbosity
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimalne wyjście (tylko błędy)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Szczegółowe wyjście"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    # train
    train = commands.add_parser("train", help="Trening klasyfikatora")
    train.add_argument("input", type=str, help="Chmura LAS/LAZ z polem Classification")
    train.add_argument("model", type=str, help="Ścieżka do pliku modelu (wyjście)")
    train.add_argument(
        "--features", "-f",
        type=str,
        required=True,
        help="Lista cech, np. Intensity,Z,R,G,B"
    )
    train.add_argument(
        "--test-ratio",
        type=float,
        default=SAMPLING.TEST_DATA_RATIO,
        help="Część punktów do ewaluacji (0 = trening na całej chmurze, bez testu)"
    )
    train.add_argument(
        "--stratify",
        action="store_true",
        help="Podział train/test z zachowaniem proporcji klas"
    )
    params = RandomTreesParams()
    train.add_argument("--max-depth", type=int, default=params.max_depth,
                       help="Maksymalna głębokość drzewa")
    train.add_argument("--min-samples", type=int, default=params.min_sample_count,
                       help="Minimalna liczba próbek w węźle do podziału")
    train.add_argument("--active-vars", type=int, default=params.active_var_count,
                       help="Liczba cech losowanych w węźle (0 = sqrt)")
    train.add_argument("--max-trees", type=int, default=params.max_tree_count,
                       help="Maksymalna liczba drzew")
    train.add_argument("--no-var-importance", action="store_true",
                       help="Nie licz ważności cech")
    train.add_argument("--report", "-r", type=str, default=None,
                       help="Ścieżka do pliku raportu JSON (opcjonalne)")

    # evaluate
    evaluate = commands.add_parser("evaluate", help="Ewaluacja klasyfikatora na całej chmurze")
    evaluate.add_argument("input", type=str, help="Chmura LAS/LAZ z polem Classification")
    evaluate.add_argument("model", type=str, help="Plik modelu")
    evaluate.add_argument("--features", "-f", type=str, default=None,
                          help="Lista cech (domyślnie cechy zapisane w modelu)")
    evaluate.add_argument("--report", "-r", type=str, default=None,
                          help="Ścieżka do pliku raportu JSON (opcjonalne)")

    # classify
    classify = commands.add_parser("classify", help="Klasyfikacja chmury i zapis LAS/LAZ")
    classify.add_argument("input", type=str, help="Chmura LAS/LAZ")
    classify.add_argument("model", type=str, help="Plik modelu")
    classify.add_argument("output", type=str, help="Ścieżka do pliku wyjściowego LAS/LAZ")
    classify.add_argument("--features", "-f", type=str, default=None,
                          help="Lista cech (domyślnie cechy zapisane w modelu)")

    return parser.parse_args(argv)


class ConsoleProgress(ProgressSink):
    """Spinner w terminalu dla operacji o nieokreślonym czasie"""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.label = ""
        self._frames = itertools.cycle("|/-\\")
        self._start_time = 0.0

    def start(self, label: str) -> None:
        self.label = label
        self._start_time = time.time()

    def pump(self) -> None:
        if self.quiet:
            return
        elapsed = time.time() - self._start_time
        print(f"\r[{next(self._frames)}] {self.label}... {elapsed:5.1f}s", end="", flush=True)

    def stop(self) -> None:
        if self.quiet:
            return
        elapsed = time.time() - self._start_time
        print(f"\r[✓] {self.label} ({elapsed:.1f}s)          ")


def setup_logging(quiet: bool, verbose: bool) -> None:
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOGGING.VERBOSE_FORMAT)
    else:
        logging.basicConfig(level=logging.INFO, format=LOGGING.FORMAT)


def load_cloud(path: str):
    input_path = Path(path)
    if not input_path.exists():
        raise FileNotFoundError(f"Plik wejściowy nie istnieje: {input_path}")
    if input_path.suffix.lower() not in ['.las', '.laz']:
        raise ValueError(f"Nieobsługiwany format pliku: {input_path.suffix}")
    return LASLoader(str(input_path)).load()


def resolve_features(tokens, cloud, classifier: Classifier = None):
    """Parsuje cechy z CLI lub bierze cechy zapisane w modelu"""
    if tokens:
        names = [t for t in tokens.split(",") if t.strip()]
    elif classifier is not None:
        names = classifier.feature_names()
    else:
        names = []

    if not names:
        raise ValueError("Brak cech (--features)")

    features = parse_features(names, cloud)
    missing = missing_features(features)
    if missing:
        raise ValueError(f"Cechy niedostępne w chmurze '{cloud.name}': {', '.join(f.name for f in missing)}")
    return features


def load_classifier(path: str, progress: ProgressSink) -> Classifier:
    classifier = Classifier()
    ok, msg = classifier.from_file(path, progress)
    if not ok:
        raise RuntimeError(msg)
    if not classifier.is_valid():
        raise RuntimeError(f"Klasyfikator w pliku {path} nie jest wytrenowany")
    return classifier


def write_report(path: str, report: dict) -> None:
    report_path = Path(path)
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, 'w', encoding='utf-8') as f:
        json.dump(report, f, indent=2, ensure_ascii=False)


def print_metrics(metrics, quiet: bool) -> None:
    if quiet:
        return
    print(f"📊 Próbki:     {metrics.sample_count:,}")
    print(f"   Poprawne:   {metrics.correct_count:,}")
    print(f"   Dokładność: {metrics.ratio * 100:.2f}%")


def run_train(args, progress: ProgressSink) -> dict:
    cloud = load_cloud(args.input)
    features = resolve_features(args.features, cloud)

    params = RandomTreesParams(
        max_depth=args.max_depth,
        min_sample_count=args.min_samples,
        active_var_count=args.active_vars,
        calc_var_importance=not args.no_var_importance,
        max_tree_count=args.max_trees
    )

    train_subset, test_subset = None, None
    if args.test_ratio > 0:
        train_subset, test_subset = PointSubset.full(cloud).split(args.test_ratio, stratify=args.stratify)

    classifier = Classifier()
    ok, msg = classifier.train(params, features, train_subset, progress)
    if not ok:
        raise RuntimeError(msg)

    report = {
        "input_file": args.input,
        "model_file": args.model,
        "features": [f.name for f in features],
        "params": params.to_dict(),
        "train_samples": train_subset.size() if train_subset is not None else cloud.size(),
        "variable_importance": classifier.variable_importance()
    }

    if test_subset is not None:
        ok, metrics, msg = classifier.evaluate(features, test_subset, progress)
        if not ok:
            raise RuntimeError(msg)
        print_metrics(metrics, args.quiet)
        report["accuracy"] = vars(metrics)

    ok, msg = classifier.to_file(args.model, progress)
    if not ok:
        raise RuntimeError(msg)

    if not args.quiet:
        print(f"   ✅ Model: {args.model}")
    return report


def run_evaluate(args, progress: ProgressSink) -> dict:
    classifier = load_classifier(args.model, progress)
    cloud = load_cloud(args.input)
    features = resolve_features(args.features, cloud, classifier)

    ok, metrics, msg = classifier.evaluate(features, PointSubset.full(cloud), progress)
    if not ok:
        raise RuntimeError(msg)

    print_metrics(metrics, args.quiet)
    return {
        "input_file": args.input,
        "model_file": args.model,
        "features": [f.name for f in features],
        "accuracy": vars(metrics)
    }


def run_classify(args, progress: ProgressSink) -> dict:
    classifier = load_classifier(args.model, progress)
    cloud = load_cloud(args.input)
    features = resolve_features(args.features, cloud, classifier)

    ok, labels, msg = classifier.classify(features, progress=progress)
    if not ok:
        raise RuntimeError(msg)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    LASWriter.write(str(output_path), cloud, labels)

    if not args.quiet:
        print(f"   ✅ Zapisano: {output_path}")
    return {"input_file": args.input, "output_file": args.output, "n_points": cloud.size()}


COMMANDS = {
    "train": run_train,
    "evaluate": run_evaluate,
    "classify": run_classify,
}


def main(argv=None) -> int:
    """Main CLI entry point"""
    args = parse_args(argv)
    setup_logging(args.quiet, args.verbose)

    if not args.quiet:
        print("=" * 60)
        print(f"🔷 MASC POINT CLOUD CLASSIFIER - {args.command}")
        print("=" * 60)

    start_time = time.time()
    progress = ConsoleProgress(quiet=args.quiet)

    try:
        report = COMMANDS[args.command](args, progress)

        report_path = getattr(args, "report", None)
        if report_path:
            report["processing_time_seconds"] = time.time() - start_time
            write_report(report_path, report)
            if not args.quiet:
                print(f"   ✅ Raport JSON: {report_path}")

    except Exception as e:
        print(f"\n❌ Błąd: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    if not args.quiet:
        print("=" * 60)
        print(f"⏱️  Czas całkowity: {time.time() - start_time:.1f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
