r"""State machine turning pci.ids lines into a PciDatabase.

The file nests two hierarchies by leading tabs:

    C 02  Network controller              class
    \t00  Ethernet controller             subclass
    \t\t00  Interface A                   programming interface
    0a89  BREA Technologies Inc           vendor
    \t0001  Widget                        product
    \t\t0a89 0001  SubWidget              subsystem

A tab-indented line belongs to whichever top-level block (class or vendor)
was opened last. Fields are read from fixed columns. Children are collected
while their parent is open and attached when the parent closes, which
happens on the next sibling-or-higher line or at end of input.
"""

import logging
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel

from pcidb.exceptions import ParseError
from pcidb.models import (
    PciClass,
    PciDatabase,
    PciProduct,
    PciProgrammingInterface,
    PciSubclass,
    PciVendor,
)

log = logging.getLogger(__name__)

# (id start, id end, name start) for each line kind
CLASS_COLUMNS = (2, 4, 6)
VENDOR_COLUMNS = (0, 4, 6)
SUBCLASS_COLUMNS = (1, 3, 5)
PRODUCT_COLUMNS = (1, 5, 7)
PROG_IF_COLUMNS = (2, 4, 6)
# subsystem lines carry two ids: subvendor [2,6) and subdevice [7,11)
SUBSYSTEM_VENDOR_COLUMNS = (2, 6)
SUBSYSTEM_COLUMNS = (7, 11, 13)


class _OpenSubclass(BaseModel):
    id: str
    name: str
    programming_interfaces: List[PciProgrammingInterface] = []

    def close(self) -> PciSubclass:
        return PciSubclass(
            id=self.id,
            name=self.name,
            programming_interfaces=self.programming_interfaces,
        )


class _OpenClass(BaseModel):
    id: str
    name: str
    subclasses: List[PciSubclass] = []
    subclass: Optional[_OpenSubclass] = None

    def close_subclass(self) -> None:
        if self.subclass is not None:
            self.subclasses.append(self.subclass.close())
            self.subclass = None

    def close(self) -> PciClass:
        self.close_subclass()
        return PciClass(id=self.id, name=self.name, subclasses=self.subclasses)


class _OpenProduct(BaseModel):
    vendor_id: str
    id: str
    name: str
    subsystems: List[PciProduct] = []

    def close(self) -> PciProduct:
        return PciProduct(
            vendor_id=self.vendor_id,
            id=self.id,
            name=self.name,
            subsystems=self.subsystems,
        )


class _OpenVendor(BaseModel):
    id: str
    name: str
    products: List[PciProduct] = []
    product: Optional[_OpenProduct] = None

    def close_product(self) -> Optional[PciProduct]:
        if self.product is None:
            return None
        product = self.product.close()
        self.products.append(product)
        self.product = None
        return product

    def close(self) -> PciVendor:
        self.close_product()
        return PciVendor(id=self.id, name=self.name, products=self.products)


class PciIdsParser:
    """Incremental pci.ids parser.

    Feed lines one at a time with feed(), then call finish() to flush the
    blocks still open and get the database. Each instance parses one input.
    """

    def __init__(self):
        self.line_number = 0
        self.block: Union[None, _OpenClass, _OpenVendor] = None
        self.classes: Dict[str, PciClass] = {}
        self.vendors: Dict[str, PciVendor] = {}
        self.products: Dict[str, PciProduct] = {}
        self.finished = False

    @property
    def in_class_block(self) -> bool:
        return isinstance(self.block, _OpenClass)

    @property
    def in_vendor_block(self) -> bool:
        return isinstance(self.block, _OpenVendor)

    def feed(self, line: str) -> None:
        if self.finished:
            raise RuntimeError("parser already finished")

        self.line_number += 1
        line = line.rstrip("\r\n")

        if not line or line.startswith("#"):
            return

        if line[0] == "C":
            self._open_class(line)
        elif line[0] != "\t":
            self._open_vendor(line)
        elif len(line) < 2 or line[1] != "\t":
            if self.in_class_block:
                self._open_subclass(line)
            elif self.in_vendor_block:
                self._open_product(line)
            else:
                self._error("indented line outside of a class or vendor block")
        else:
            if self.in_class_block:
                self._add_programming_interface(line)
            elif self.in_vendor_block:
                self._add_subsystem(line)
            else:
                self._error("indented line outside of a class or vendor block")

    def finish(self) -> PciDatabase:
        if not self.finished:
            self._close_block()
            self.finished = True
        return PciDatabase(
            classes=self.classes,
            vendors=self.vendors,
            products=self.products,
        )

    def _error(self, reason: str):
        raise ParseError(self.line_number, reason)

    def _fields(self, line: str, kind: str, columns) -> tuple:
        id_start, id_end, name_start = columns
        if len(line) < name_start:
            self._error(
                f"{kind} line is {len(line)} characters long, "
                f"expected at least {name_start}"
            )
        return line[id_start:id_end], line[name_start:]

    def _close_block(self) -> None:
        if isinstance(self.block, _OpenClass):
            pci_class = self.block.close()
            self.classes[pci_class.id] = pci_class
        elif isinstance(self.block, _OpenVendor):
            # the open product registers itself before the vendor closes
            self._close_product()
            vendor = self.block.close()
            self.vendors[vendor.id] = vendor
        self.block = None

    def _close_product(self) -> None:
        product = self.block.close_product()
        if product is not None:
            self.products[product.key] = product

    def _open_class(self, line: str) -> None:
        class_id, name = self._fields(line, "class", CLASS_COLUMNS)
        self._close_block()
        self.block = _OpenClass(id=class_id, name=name)

    def _open_vendor(self, line: str) -> None:
        vendor_id, name = self._fields(line, "vendor", VENDOR_COLUMNS)
        self._close_block()
        self.block = _OpenVendor(id=vendor_id, name=name)

    def _open_subclass(self, line: str) -> None:
        subclass_id, name = self._fields(line, "subclass", SUBCLASS_COLUMNS)
        self.block.close_subclass()
        self.block.subclass = _OpenSubclass(id=subclass_id, name=name)

    def _open_product(self, line: str) -> None:
        product_id, name = self._fields(line, "product", PRODUCT_COLUMNS)
        self._close_product()
        self.block.product = _OpenProduct(
            vendor_id=self.block.id, id=product_id, name=name
        )

    def _add_programming_interface(self, line: str) -> None:
        prog_if_id, name = self._fields(
            line, "programming interface", PROG_IF_COLUMNS
        )
        if self.block.subclass is None:
            self._error("programming interface line without an open subclass")
        self.block.subclass.programming_interfaces.append(
            PciProgrammingInterface(id=prog_if_id, name=name)
        )

    def _add_subsystem(self, line: str) -> None:
        subsystem_id, name = self._fields(line, "subsystem", SUBSYSTEM_COLUMNS)
        vendor_start, vendor_end = SUBSYSTEM_VENDOR_COLUMNS
        if self.block.product is None:
            self._error("subsystem line without an open product")
        self.block.product.subsystems.append(
            PciProduct(
                vendor_id=line[vendor_start:vendor_end],
                id=subsystem_id,
                name=name,
            )
        )


def parse_lines(lines: Iterable[str]) -> PciDatabase:
    """Parse an iterable of pci.ids lines, e.g. an open file."""
    parser = PciIdsParser()
    for line in lines:
        parser.feed(line)
    db = parser.finish()
    log.debug("parsed %d lines: %s", parser.line_number, db.summary())
    return db


def parse_string(text: str) -> PciDatabase:
    # only "\n" ends a line; names may contain other unicode line breaks
    return parse_lines(text.split("\n"))
