"""
Test configuration for the athlete profile engine tests.

sys.path is configured so 'from athlete_profile...' resolves whether pytest
is run from the project root or from athlete_profile/.
"""
import sys
from pathlib import Path

_package_dir = Path(__file__).parent.parent        # .../athlete_profile/
_project_root = _package_dir.parent                # project root

if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))
