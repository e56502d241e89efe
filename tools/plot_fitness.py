#!/usr/bin/env python3
"""
Fitness History Plot

Reads the generation statistics stored in a checkpoint and writes a fitness
plot (min / mean ± std / max per generation) plus the raw table as CSV.

Usage:
    python tools/plot_fitness.py --checkpoint-dir checkpoints --output-folder results
"""

import argparse
from pathlib import Path
import sys

from loguru import logger

from evoarena.analysis import history_frame, plot_fitness_history
from evoarena.exceptions import EvoArenaError
from evoarena.storage import CheckpointStorage
from evoarena.utils.logger_setup import setup_logger


def main() -> int:
    parser = argparse.ArgumentParser(description="Plot fitness history of a run")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--checkpoint", help="Path to a checkpoint JSON file")
    source.add_argument("--checkpoint-dir", help="Use the latest checkpoint in this directory")
    parser.add_argument("--output-folder", default="results")
    args = parser.parse_args()

    setup_logger(log_to_file=False)

    try:
        if args.checkpoint:
            checkpoint = CheckpointStorage(".").load(args.checkpoint)
        else:
            checkpoint = CheckpointStorage(args.checkpoint_dir).latest()
        out = Path(args.output_folder)
        plot_fitness_history(checkpoint.history, out / "fitness.png")
    except EvoArenaError as e:
        logger.error(f"Plotting failed: {e}")
        return 1

    csv_path = out / "fitness_history.csv"
    history_frame(checkpoint.history).to_csv(csv_path)
    logger.info(f"Saved fitness table to {csv_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
