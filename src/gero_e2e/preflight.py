"""Suite-level setup and teardown for the UI run."""
from __future__ import annotations

import logging
from typing import List

from gero_e2e.config import ConfigError, HarnessConfig
from gero_e2e.extension import cleanup_profiles

logger = logging.getLogger(__name__)


def run_preflight(config: HarnessConfig) -> HarnessConfig:
    """Validate the environment and create output directories.

    Raises:
        ConfigError: listing every problem found; nothing is created then
    """
    logger.info("Starting GeroWallet E2E test suite")
    issues = config.problems()
    if issues:
        for issue in issues:
            logger.error(issue)
        raise ConfigError("\n".join(issues))

    for directory in (config.screenshot_dir, config.artifacts_dir, config.profile_root):
        directory.mkdir(parents=True, exist_ok=True)

    logger.info("Environment validation passed")
    logger.info(f"Extension path: {config.extension_path}")
    logger.info(f"Network: {config.network.name}")
    logger.info(f"Blockfrost: {config.blockfrost.url}")
    logger.info(f"Headless: {config.headless}")
    return config


def run_teardown(config: HarnessConfig) -> List[str]:
    """Remove the temporary browser profiles of this run."""
    logger.info("Cleaning up test artifacts...")
    removed = cleanup_profiles(config.profile_root)
    logger.info("Test suite completed")
    return removed
