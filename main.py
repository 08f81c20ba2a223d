#!/usr/bin/env python
"""
Supervised AutoML - Main Entry Point
Compares the configured model families on a CSV dataset, retrains the winner
and saves it as a tagged final model; or scores new rows with a saved model.
"""
import sys
import logging
import argparse
import traceback
from pathlib import Path
from typing import Union

import numpy as np
import pandas as pd

from modules.config_manager import ConfigurationManager
from modules.logging_config import LoggingConfigurator
from modules.prediction_engine import PredictionEngine
from modules.supervised_model import SupervisedModel
from modules.training_engine import FinalModel
from utils.exceptions import AutoMLException, DataValidationError


def parse_arguments(argv=None):
    """
    Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    parser = argparse.ArgumentParser(
        description="Supervised AutoML - cross-validated model comparison",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        "--config",
        type=str,
        default="config/config.json",
        help="Path to the configuration JSON file"
    )

    parser.add_argument(
        "--schema",
        type=str,
        default="config/schema.json",
        help="Path to the configuration JSON schema"
    )

    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="CSV file with feature columns and one target column"
    )

    parser.add_argument(
        "--target",
        type=str,
        default="-1",
        help="Target column name, or its integer position"
    )

    parser.add_argument(
        "--no-header",
        action="store_true",
        help="The CSV files have no header row"
    )

    parser.add_argument(
        "--output",
        type=str,
        default="final_model.aml",
        help="Where to save the trained final model"
    )

    parser.add_argument(
        "--predict",
        type=str,
        default=None,
        help="CSV of feature rows to score with a saved model (requires --model)"
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Saved final model used with --predict"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration without training anything"
    )

    return parser.parse_args(argv)


def parse_target(target: str) -> Union[str, int]:
    """Integer-looking targets are column positions."""
    try:
        return int(target)
    except ValueError:
        return target


def run_prediction(args, settings, logger: logging.Logger) -> int:
    if not args.model:
        raise DataValidationError("--predict requires --model")

    final_model = FinalModel.load(args.model)
    logger.info(f"Loaded final model {final_model.variant} from {args.model}")

    predict_path = Path(args.predict)
    if not predict_path.exists():
        raise DataValidationError(f"Prediction input not found: {predict_path}")
    rows = pd.read_csv(predict_path, header=None if args.no_header else 0)
    engine = PredictionEngine(settings, logger)
    predictions = engine.execute(final_model, rows.to_numpy(dtype=float))

    np.savetxt(sys.stdout, predictions, fmt="%.6g")
    logger.info(f"Scored {len(predictions)} rows")
    return 0


def run_comparison(args, settings, logger: logging.Logger) -> int:
    if not args.data:
        raise DataValidationError("--data is required to compare models")

    model = SupervisedModel.from_csv(
        args.data,
        parse_target(args.target),
        header=not args.no_header,
        settings=settings,
        logger=logger,
    )
    model.compare_models()
    print(model)

    summary = model.run_summary
    for variant, cause in summary.failed.items():
        print(f"[FAILED] {variant}: {cause}")

    model.train_final_model()
    path = model.save_final_model(args.output)
    print(f"\n[SUCCESS] Final model {model.final_model.variant} saved to: {path}")
    return 0


def main(argv=None):
    """
    Returns:
        int: Exit code (0 success, 1 known error, 2 unexpected error)
    """
    logger = None

    try:
        args = parse_arguments(argv)

        config_manager = ConfigurationManager(config_path=args.config, schema_path=args.schema)
        config = config_manager.load_and_validate()

        if args.verbose:
            config.setdefault('logging', {})['level'] = 'DEBUG'

        logging_configurator = LoggingConfigurator(config)
        logging_configurator.setup()
        logger = logging_configurator.get_logger('cli')

        logger.info(f"Configuration loaded from: {args.config}")
        settings = config_manager.build_settings(config)

        if settings.results_dir:
            run_dir = Path(settings.results_dir)
            config_manager.generate_run_id()
            config_manager.save_artifacts(str(run_dir))
            logger.info(f"Output Directory: {run_dir.absolute()}")

        if args.dry_run:
            logger.info("Dry run mode: validation complete. Exiting without training.")
            print("\n[SUCCESS] Configuration validated successfully.")
            return 0

        if args.predict:
            return run_prediction(args, settings, logger)
        return run_comparison(args, settings, logger)

    except AutoMLException as e:
        msg = f"AutoML Error: {str(e)}"
        print(f"\n[ERROR] {msg}")
        if logger:
            logger.critical(msg, exc_info=True)
        return 1

    except KeyboardInterrupt:
        print("\n[INTERRUPTED] Run interrupted by user.")
        if logger:
            logger.warning("Run interrupted by user (Ctrl+C)")
        return 130

    except Exception as e:
        msg = f"Unexpected Error: {str(e)}"
        print(f"\n[CRITICAL] {msg}")
        if logger:
            logger.critical(msg, exc_info=True)
        else:
            traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
