import sys
from pathlib import Path
import os

# Ensure repo root on sys.path for imports from anywhere in tests tree.
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENV", "dev")

from engines.annotations.service import set_annotation_service  # noqa: E402

set_annotation_service(None)
