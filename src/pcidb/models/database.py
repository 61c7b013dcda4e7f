import types
from typing import Dict, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
)

from pcidb.models.pci import (
    PciClass,
    PciProduct,
    PciProgrammingInterface,
    PciSubclass,
    PciVendor,
)


class PciDatabase(BaseModel):
    """Lookup tables built from a pci.ids file.

    Products are keyed by the owning vendor id concatenated with the product
    id, e.g. "10de1e30". The mappings are read-only views.
    """

    model_config = ConfigDict(frozen=True)

    classes: Mapping[str, PciClass] = Field(
        default_factory=dict, validate_default=True
    )
    vendors: Mapping[str, PciVendor] = Field(
        default_factory=dict, validate_default=True
    )
    products: Mapping[str, PciProduct] = Field(
        default_factory=dict, validate_default=True
    )

    @field_validator("classes", "vendors", "products", mode="after")
    @classmethod
    def _read_only(cls, v):
        return types.MappingProxyType(dict(v))

    @field_serializer("classes", "vendors", "products")
    def _serialize_mapping(self, v):
        return dict(v)

    @computed_field
    @property
    def empty(self) -> bool:
        return not (self.classes or self.vendors or self.products)

    def get_class(self, class_id: str) -> Optional[PciClass]:
        return self.classes.get(class_id)

    def get_vendor(self, vendor_id: str) -> Optional[PciVendor]:
        return self.vendors.get(vendor_id)

    def get_product(self, vendor_id: str, product_id: str) -> Optional[PciProduct]:
        return self.products.get(vendor_id + product_id)

    def get_subclass(self, class_id: str, subclass_id: str) -> Optional[PciSubclass]:
        pci_class = self.get_class(class_id)
        if pci_class is None:
            return None
        return pci_class.get_subclass(subclass_id)

    def get_programming_interface(
        self, class_id: str, subclass_id: str, prog_if_id: str
    ) -> Optional[PciProgrammingInterface]:
        subclass = self.get_subclass(class_id, subclass_id)
        if subclass is None:
            return None
        return subclass.get_programming_interface(prog_if_id)

    def get_subsystem(
        self, vendor_id: str, product_id: str, subvendor_id: str, subdevice_id: str
    ) -> Optional[PciProduct]:
        product = self.get_product(vendor_id, product_id)
        if product is None:
            return None
        return product.get_subsystem(subvendor_id, subdevice_id)

    def summary(self) -> Dict[str, int]:
        return {
            "classes": len(self.classes),
            "vendors": len(self.vendors),
            "products": len(self.products),
        }
