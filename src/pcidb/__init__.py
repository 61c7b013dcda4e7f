from pcidb.config import LoaderConfig, default_candidate_paths
from pcidb.exceptions import (
    ConfigError,
    LoadError,
    NoSourceFoundError,
    ParseError,
    PciDbError,
    SourceReadError,
)
from pcidb.loader import find_source, load, load_file
from pcidb.models import (
    PciClass,
    PciDatabase,
    PciDevice,
    PciDeviceDescription,
    PciProduct,
    PciProgrammingInterface,
    PciSubclass,
    PciVendor,
)
from pcidb.parser import PciIdsParser, parse_lines, parse_string

__version__ = "0.1.0"
