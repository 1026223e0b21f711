"""pvsadm — IBM Cloud PowerVS image lifecycle tool.

Imports, lists and purges PowerVS images by composing the IBM Cloud
resource controller, Cloud Object Storage and PowerVS APIs.
"""

from pvsadm.version import __version__

__all__: list[str] = ["__version__"]
