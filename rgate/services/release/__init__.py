"""Release qualification: version extraction, tag notes, gatekeeper."""

from rgate.services.release.errors import GateError
from rgate.services.release.gatekeeper import Confirm, ReleaseGatekeeper, ReleaseOutcome
from rgate.services.release.notes import ReleaseTag, build_release_tag
from rgate.services.release.version import VersionDescriptor, read_version

__all__ = [
    "Confirm",
    "GateError",
    "ReleaseGatekeeper",
    "ReleaseOutcome",
    "ReleaseTag",
    "VersionDescriptor",
    "build_release_tag",
    "read_version",
]
