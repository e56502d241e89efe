import asyncio
from datetime import datetime, timezone
import time

from dotenv import load_dotenv
import hydra
from hydra.utils import instantiate
from loguru import logger
from omegaconf import DictConfig

from evoarena.config.resolvers import register_resolvers
from evoarena.engine import EvolutionEngine
from evoarena.storage import CheckpointStorage
from evoarena.utils.logger_setup import setup_logger
from evoarena.utils.serve import serve_until_signal


async def run_experiment(cfg: DictConfig):
    start_time = time.time()

    logger.info("=" * 80)
    logger.info("EvoArena Evolution Experiment")
    logger.info("=" * 80)
    logger.info(f"Experiment: {cfg.experiment_name}")
    logger.info(f"Start time: {datetime.now(timezone.utc).isoformat()}")
    logger.info("")

    engine: EvolutionEngine | None = None
    try:
        logger.info("Step 1/3: Initializing components...")
        engine = instantiate(cfg.evolution_engine, _recursive_=True)
        logger.info("Step 1/3: Complete")
        logger.info("")

        logger.info("Step 2/3: Preparing population...")
        if cfg.resume_from:
            checkpoint = CheckpointStorage(cfg.checkpoints.directory).load(cfg.resume_from)
            engine.restore(checkpoint)
            logger.info(f"Step 2/3: Resumed from generation {checkpoint.generation}")
        else:
            logger.info(f"Step 2/3: Fresh population of {len(engine.population)} individuals")
        logger.info("")

        logger.info("Step 3/3: Starting evolution...")
        max_gens: int | None = cfg.engine.max_generations
        logger.info(f"  Max generations: {max_gens if max_gens else 'unlimited'}")
        logger.info(f"  Enemies per world: {cfg.world.num_enemies}")
        logger.info(f"  Episode length: {cfg.simulation.episode_ticks} ticks")

        task = engine.start()
        await serve_until_signal(stop_coros=(engine.shutdown(),), watch=(task,))

    except KeyboardInterrupt:
        logger.info("Evolution experiment interrupted by user")
    except Exception as e:  # pylint: disable=broad-except
        logger.error(f"Evolution experiment failed: {e}")
        raise
    finally:
        logger.info("")
        logger.info("Starting cleanup...")
        if engine is not None:
            if engine.tracker is not None:
                engine.tracker.close()
            if engine.champion is not None:
                logger.info(
                    f"Champion fitness: {engine.champion.fitness:.2f} "
                    f"(generation {engine.champion.generation})"
                )
        duration = time.time() - start_time
        logger.info(
            f"Total experiment duration: {duration:.2f} seconds ({duration / 3600:.2f} hours)"
        )
        logger.info(f"End time: {datetime.now(timezone.utc).isoformat()}")
        logger.info("=" * 80)


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    load_dotenv()

    log_file_path = setup_logger(
        log_dir=cfg.logging.log_dir,
        level=cfg.logging.level,
        rotation=cfg.logging.rotation,
        retention=cfg.logging.retention,
    )
    logger.info(
        "Experiment working directory: {}.",
        hydra.core.hydra_config.HydraConfig.get().runtime.output_dir,
    )
    logger.info(f"Log file: {log_file_path}")
    asyncio.run(run_experiment(cfg))


if __name__ == "__main__":
    register_resolvers()
    main()
