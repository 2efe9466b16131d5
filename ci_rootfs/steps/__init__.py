from .step_10_hostname import HostnameStep
from .step_20_fcnet_service import FcnetServiceStep
from .step_30_ssh_key import SshKeyStep
from .step_35_sshd_config import SshdConfigStep
from .step_40_root_password import RootPasswordStep
from .step_50_init import InitStep
from .step_55_helper_tools import HelperToolsStep
from .step_60_apt_sources import AptSourcesStep
from .step_70_install_packages import InstallPackagesStep

__all__ = [
    "HostnameStep",
    "FcnetServiceStep",
    "SshKeyStep",
    "SshdConfigStep",
    "RootPasswordStep",
    "InitStep",
    "HelperToolsStep",
    "AptSourcesStep",
    "InstallPackagesStep",
]
