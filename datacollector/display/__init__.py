"""Terminal display of stored readings."""

import argparse

from .report import ReadingsReport


def main():
    """Entry point for display service."""
    from datacollector.listener import create_store
    from datacollector.listener.config import load_config
    from datacollector.shared.logging import get_logger, setup_logging

    parser = argparse.ArgumentParser(
        description="Show the latest reading and recent history",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--hours", type=float, default=1.0, help="History window in hours")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config file")
    args = parser.parse_args()

    config = load_config(args.config)
    setup_logging(config.log_level)
    logger = get_logger("ReadingsReport")

    store = create_store(config)
    try:
        ReadingsReport(store).show(hours=args.hours)
    except Exception as e:
        logger.error(f"Failed to render readings: {e}")
        raise SystemExit(1)
    finally:
        store.close()


__all__ = ["ReadingsReport", "main"]
