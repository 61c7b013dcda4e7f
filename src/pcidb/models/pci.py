from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict


class PciProgrammingInterface(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class PciSubclass(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    programming_interfaces: Tuple[PciProgrammingInterface, ...] = ()

    def get_programming_interface(
        self, prog_if_id: str
    ) -> Optional[PciProgrammingInterface]:
        for prog_if in self.programming_interfaces:
            if prog_if.id == prog_if_id:
                return prog_if
        return None


class PciClass(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    subclasses: Tuple[PciSubclass, ...] = ()

    def get_subclass(self, subclass_id: str) -> Optional[PciSubclass]:
        for subclass in self.subclasses:
            if subclass.id == subclass_id:
                return subclass
        return None


class PciProduct(BaseModel):
    """A product (device) of a vendor.

    Subsystems reuse this shape: for those, vendor_id is the subsystem
    vendor and id is the subsystem device id.
    """

    model_config = ConfigDict(frozen=True)

    vendor_id: str
    id: str
    name: str
    subsystems: Tuple["PciProduct", ...] = ()

    @property
    def key(self) -> str:
        return self.vendor_id + self.id

    def get_subsystem(self, vendor_id: str, subsystem_id: str) -> Optional["PciProduct"]:
        for subsystem in self.subsystems:
            if subsystem.vendor_id == vendor_id and subsystem.id == subsystem_id:
                return subsystem
        return None


class PciVendor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    products: Tuple[PciProduct, ...] = ()

    def get_product(self, product_id: str) -> Optional[PciProduct]:
        # duplicate ids within a vendor resolve to the last one, as in the
        # database-wide product mapping
        found = None
        for product in self.products:
            if product.id == product_id:
                found = product
        return found
