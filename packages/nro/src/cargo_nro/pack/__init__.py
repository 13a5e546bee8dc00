from .linkle import LinklePackager
from .types import PackagedArtifact, Packager

__all__ = ["LinklePackager", "PackagedArtifact", "Packager"]
