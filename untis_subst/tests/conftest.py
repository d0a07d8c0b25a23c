import os
import sys

# Add project root to sys.path to allow imports like 'from untis_subst...'
# This assumes pytest is run from the project root directory
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest

from untis_subst.models.models import ParserConfig
from untis_subst.tests.html_helpers import ROSTER


@pytest.fixture
def roster():
    return list(ROSTER)


@pytest.fixture
def flat_config():
    """Flat table with a class column and an explicit type column."""
    return ParserConfig.from_data({
        "columns": ["class", "lesson", "subject", "type", "room"],
        "classes": ROSTER,
    })


@pytest.fixture
def grouped_config():
    """Table grouped by inline class headers."""
    return ParserConfig.from_data({
        "columns": ["lesson", "subject", "teacher", "room", "desc"],
        "classInExtraLine": True,
        "classes": ROSTER,
    })
