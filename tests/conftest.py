import logging
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load optional test overrides before any application code reads the environment.
project_root = Path(__file__).parent.parent
env_test_path = project_root / '.env.test'
if env_test_path.exists():
    load_dotenv(env_test_path, override=True)
    logging.info(f"Loaded test environment from {env_test_path}")

def pytest_configure(config):
    # Create a custom logger
    logger = logging.getLogger('agentstudio')
    logger.setLevel(logging.DEBUG)

    # Create console handler and set level to debug
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG)

    # Create formatter
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # Add formatter to ch
    ch.setFormatter(formatter)

    # Add ch to logger
    logger.addHandler(ch)
