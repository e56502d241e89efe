#!/usr/bin/env python3
"""
Champion Replay

Loads a checkpoint, replays its champion in a freshly seeded world and saves
snapshots of the arena along the way.

Usage:
    python tools/replay.py --checkpoint checkpoints/checkpoint_gen_000100.json --out replay/
    python tools/replay.py --checkpoint-dir checkpoints --seed 7 --every 25
"""

import argparse
import sys

from loguru import logger

from evoarena.analysis import replay_champion
from evoarena.exceptions import EvoArenaError
from evoarena.simulation import Simulation
from evoarena.storage import CheckpointStorage
from evoarena.utils.logger_setup import setup_logger


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay the champion of a checkpoint")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--checkpoint", help="Path to a checkpoint JSON file")
    source.add_argument("--checkpoint-dir", help="Use the latest checkpoint in this directory")
    parser.add_argument("--seed", type=int, default=0, help="World seed for the replay")
    parser.add_argument("--out", default="replay", help="Directory for snapshots")
    parser.add_argument("--every", type=int, default=50, help="Snapshot every N ticks")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    setup_logger(level=args.log_level, log_to_file=False)

    try:
        if args.checkpoint:
            checkpoint = CheckpointStorage(".").load(args.checkpoint)
        else:
            checkpoint = CheckpointStorage(args.checkpoint_dir).latest()
        simulation = Simulation(checkpoint.simulation)
        result = replay_champion(
            checkpoint, simulation, seed=args.seed, out_dir=args.out, every=args.every
        )
    except EvoArenaError as e:
        logger.error(f"Replay failed: {e}")
        return 1

    print(result.model_dump_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
