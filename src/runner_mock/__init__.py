"""Mock runner-registration service.

Emulates the registration-token, runner-listing, release and health
endpoints of a CI control plane so provisioning scripts and tests can run
without network access or credentials.
"""

__version__ = "1.0.0"

from runner_mock.application import MockApplication  # noqa: E402
from runner_mock.server import MockServer  # noqa: E402

__all__ = ["__version__", "MockApplication", "MockServer"]
