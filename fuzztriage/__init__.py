"""fuzztriage: publish new Go fuzz corpus entries found in CI.

Runs a ``go test -fuzz`` campaign and, when the fuzzer records a new failing
input, pushes a branch named after it so the failure can be inspected and
reproduced later:

  - Detects exactly one new ``testdata/fuzz/Fuzz*/<id>`` entry in the work tree
  - Resolves the repository through the GitHub GraphQL API
  - Creates ``<prefix>/<package>/<FuzzFunc>/<id>`` at the pre-run HEAD
  - Restores the index and removes the published corpus file
"""

__version__ = "0.1.0"
__description__ = "Publish new Go fuzz corpus entries found in CI to a branch"

from fuzztriage.core.orchestrator import FuzzCampaignOrchestrator
from fuzztriage.cli.app import app as cli

__all__ = ["FuzzCampaignOrchestrator", "cli", "__version__"]
