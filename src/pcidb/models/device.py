from typing import Optional

from pydantic import BaseModel, Field, computed_field, field_validator

from pcidb.models.database import PciDatabase


def _normalize_hex_id(v):
    """Accept ids as reported by sysfs or inspection tools, e.g. "0x10DE"."""
    if isinstance(v, int):
        return f"{v:04x}"
    if not isinstance(v, str):
        return v
    v = v.strip().lower()
    if v.startswith("0x"):
        v = v[2:]
    return v


class PciDeviceDescription(BaseModel):
    vendor_name: Optional[str] = None
    product_name: Optional[str] = None
    subsystem_name: Optional[str] = None
    class_name: Optional[str] = None
    subclass_name: Optional[str] = None
    programming_interface_name: Optional[str] = None


class PciDevice(BaseModel):
    vendor_id: str
    product_id: str
    pci_class: str = Field(alias="class")
    subsystem_vendor_id: Optional[str] = None
    subsystem_id: Optional[str] = None
    bus: Optional[str] = None

    @field_validator(
        "vendor_id", "product_id", "subsystem_vendor_id", "subsystem_id", mode="before"
    )
    @classmethod
    def _normalize_id(cls, v):
        return _normalize_hex_id(v)

    @field_validator("pci_class", mode="before")
    @classmethod
    def _normalize_class(cls, v):
        if isinstance(v, int):
            return f"{v:06x}"
        v = _normalize_hex_id(v)
        if isinstance(v, str) and len(v) != 6:
            raise ValueError(f"class code must be 6 hex digits, got {v!r}")
        return v

    @computed_field
    @property
    def class_id(self) -> str:
        return self.pci_class[0:2]

    @computed_field
    @property
    def subclass_id(self) -> str:
        return self.pci_class[2:4]

    @computed_field
    @property
    def prog_if_id(self) -> str:
        return self.pci_class[4:6]

    def describe(self, db: PciDatabase) -> PciDeviceDescription:
        """Resolve the ids of this device to names found in db."""
        description = PciDeviceDescription()

        vendor = db.get_vendor(self.vendor_id)
        if vendor:
            description.vendor_name = vendor.name

        product = db.get_product(self.vendor_id, self.product_id)
        if product:
            description.product_name = product.name
            if self.subsystem_vendor_id and self.subsystem_id:
                subsystem = product.get_subsystem(
                    self.subsystem_vendor_id, self.subsystem_id
                )
                if subsystem:
                    description.subsystem_name = subsystem.name

        pci_class = db.get_class(self.class_id)
        if pci_class:
            description.class_name = pci_class.name
            subclass = pci_class.get_subclass(self.subclass_id)
            if subclass:
                description.subclass_name = subclass.name
                prog_if = subclass.get_programming_interface(self.prog_if_id)
                if prog_if:
                    description.programming_interface_name = prog_if.name

        return description
