"""Pytest bootstrap for local source imports.

Running the ``pytest`` console script from a checkout may leave the repository
root off ``sys.path``; insert it so ``import lazyfinder`` finds this tree.
"""

from __future__ import annotations

import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))
