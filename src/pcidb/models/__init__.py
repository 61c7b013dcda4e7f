from pcidb.models.database import PciDatabase
from pcidb.models.device import PciDevice, PciDeviceDescription
from pcidb.models.pci import (
    PciClass,
    PciProduct,
    PciProgrammingInterface,
    PciSubclass,
    PciVendor,
)

__all__ = [
    "PciClass",
    "PciDatabase",
    "PciDevice",
    "PciDeviceDescription",
    "PciProduct",
    "PciProgrammingInterface",
    "PciSubclass",
    "PciVendor",
]
