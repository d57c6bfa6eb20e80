from .enums import PlatformKind
from .models import Host

DEFAULT_HOSTS: tuple[Host, ...] = (
    Host(name="RuthServer", address="ruthcloud.xyz", platform=PlatformKind.X86),
    Host(name="RuthPiMaster", address="cluster0.ruthcloud.xyz", platform=PlatformKind.ARM),
    Host(name="RuthPiNode1", address="cluster1.ruthcloud.xyz", platform=PlatformKind.ARM),
    Host(name="RuthPiNode2", address="cluster2.ruthcloud.xyz", platform=PlatformKind.ARM),
)
