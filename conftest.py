import sys
from pathlib import Path

# Top-level packages (core, pipeline, storage, app) live next to this file
ROOT_DIR = Path(__file__).parent.absolute()

if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))
