"""
End-to-end tests for the command line interface
"""

import json
import numpy as np
import logging

from cli import main, parse_args
from masc.core import LASLoader, LASWriter

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def write_labeled_las(cloud, path):
    classification = np.trunc(cloud.scalar_field("Classification")).astype(np.uint8)
    LASWriter.write(str(path), cloud, classification)
    return str(path)


def test_parse_args_defaults():
    args = parse_args(["train", "in.las", "model.pkl", "-f", "Z,Intensity"])

    assert args.command == "train"
    assert args.features == "Z,Intensity"
    assert args.test_ratio == 0.2
    assert args.max_trees == 150
    assert args.min_samples == 2
    assert not args.no_var_importance


def test_train_evaluate_classify(random_cloud, tmp_path):
    """Pelny przeplyw: train -> evaluate -> classify"""
    logger.info("Testing CLI workflow...")

    las_path = write_labeled_las(random_cloud, tmp_path / "labeled.las")
    model_path = str(tmp_path / "models" / "masc.pkl")
    train_report = tmp_path / "reports" / "train.json"

    code = main(["-q", "train", las_path, model_path, "-f", "Z,Intensity,R",
                 "--max-trees", "20", "--stratify", "--report", str(train_report)])
    assert code == 0

    report = json.loads(train_report.read_text(encoding="utf-8"))
    assert report["features"] == ["Z", "SF:Intensity", "R"]
    assert report["train_samples"] == 400
    assert report["accuracy"]["sample_count"] == 100
    assert report["accuracy"]["ratio"] > 0.9
    assert set(report["variable_importance"]) == {"Z", "SF:Intensity", "R"}

    # Cechy brane z modelu
    eval_report = tmp_path / "reports" / "eval.json"
    code = main(["-q", "evaluate", las_path, model_path, "--report", str(eval_report)])
    assert code == 0
    report = json.loads(eval_report.read_text(encoding="utf-8"))
    assert report["accuracy"]["sample_count"] == 500

    output_path = tmp_path / "out" / "classified.las"
    code = main(["-q", "classify", las_path, model_path, str(output_path)])
    assert code == 0

    classified = LASLoader(str(output_path)).load()
    assert classified.size() == 500
    assert set(np.unique(classified.scalar_field("Classification"))) <= {2, 5}

    logger.info("✅ CLI workflow test passed")


def test_train_without_test_split(intensity_cloud, tmp_path):
    las_path = write_labeled_las(intensity_cloud, tmp_path / "small.las")
    model_path = tmp_path / "small.pkl"

    code = main(["-q", "train", las_path, str(model_path), "-f", "Intensity", "--test-ratio", "0"])

    assert code == 0
    assert model_path.exists()


def test_missing_feature_fails(random_cloud, tmp_path, capsys):
    las_path = write_labeled_las(random_cloud, tmp_path / "labeled.las")
    model_path = tmp_path / "model.pkl"

    code = main(["-q", "train", las_path, str(model_path), "-f", "Z,Ghost"])

    assert code == 1
    assert not model_path.exists()
    assert "SF:Ghost" in capsys.readouterr().err


def test_missing_model_fails(random_cloud, tmp_path):
    las_path = write_labeled_las(random_cloud, tmp_path / "labeled.las")
    code = main(["-q", "evaluate", las_path, str(tmp_path / "missing.pkl")])
    assert code == 1
