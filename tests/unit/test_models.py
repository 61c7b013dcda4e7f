import json
import operator
import pathlib

from oslotest import base
from pydantic import ValidationError

from pcidb.models import PciClass, PciDatabase, PciDevice, PciProduct, PciVendor
from pcidb.parser import parse_lines

SAMPLES_DIR = pathlib.Path(__file__).parent / "samples"


def _sample_db():
    with open(SAMPLES_DIR / "pci.ids") as f:
        return parse_lines(f)


class TestPciDatabase(base.BaseTestCase):
    def setUp(self):
        super().setUp()
        self.db = _sample_db()

    def test_get_class(self):
        self.assertEqual("Display controller", self.db.get_class("03").name)
        self.assertIsNone(self.db.get_class("ff"))

    def test_get_vendor(self):
        self.assertEqual("NVIDIA Corporation", self.db.get_vendor("10de").name)
        self.assertIsNone(self.db.get_vendor("ffff"))

    def test_get_product(self):
        product = self.db.get_product("10de", "1e30")
        self.assertEqual("TU102GL [Quadro RTX 6000/8000]", product.name)
        self.assertIsNone(self.db.get_product("10de", "0000"))
        # product ids are scoped by vendor
        self.assertIsNone(self.db.get_product("10ee", "1e30"))

    def test_get_subclass(self):
        self.assertEqual("3D controller", self.db.get_subclass("03", "02").name)
        self.assertIsNone(self.db.get_subclass("03", "80"))
        self.assertIsNone(self.db.get_subclass("ff", "00"))

    def test_get_programming_interface(self):
        prog_if = self.db.get_programming_interface("0c", "03", "30")
        self.assertEqual("XHCI", prog_if.name)
        self.assertIsNone(self.db.get_programming_interface("0c", "03", "fe"))
        self.assertIsNone(self.db.get_programming_interface("0c", "05", "00"))

    def test_get_subsystem(self):
        subsystem = self.db.get_subsystem("0e11", "0046", "0e11", "409a")
        self.assertEqual("Smart Array 641", subsystem.name)
        self.assertIsNone(self.db.get_subsystem("0e11", "0046", "0e11", "0000"))
        self.assertIsNone(self.db.get_subsystem("0e11", "ffff", "0e11", "409a"))

    def test_empty(self):
        assert not self.db.empty
        assert PciDatabase().empty

    def test_json_round_trip(self):
        dumped = self.db.model_dump_json()
        self.assertEqual(self.db, PciDatabase.model_validate_json(dumped))

    def test_entities_are_frozen(self):
        vendor = self.db.get_vendor("10de")
        self.assertRaises(ValidationError, setattr, vendor, "name", "Other")

    def test_mappings_are_read_only(self):
        self.assertRaises(TypeError, operator.setitem, self.db.classes, "zz", None)
        self.assertRaises(TypeError, operator.delitem, self.db.vendors, "10de")
        self.assertRaises(
            TypeError, operator.setitem, self.db.products, "10de0000", None
        )
        self.assertIn("10de", self.db.vendors)

    def test_mappings_do_not_share_input(self):
        classes = {}
        db = PciDatabase(classes=classes)
        classes["02"] = PciClass(id="02", name="Network controller")
        self.assertIsNone(db.get_class("02"))

    def test_dump_keeps_mappings(self):
        data = self.db.model_dump()
        self.assertEqual("NVIDIA Corporation", data["vendors"]["10de"]["name"])
        self.assertIn("10de1e30", data["products"])


class TestEntities(base.BaseTestCase):
    def test_product_key(self):
        product = PciProduct(vendor_id="10de", id="1e30", name="TU102GL")
        self.assertEqual("10de1e30", product.key)

    def test_vendor_get_product_last_duplicate(self):
        vendor = PciVendor(
            id="1234",
            name="Vendor",
            products=[
                PciProduct(vendor_id="1234", id="0001", name="first"),
                PciProduct(vendor_id="1234", id="0001", name="second"),
            ],
        )
        self.assertEqual("second", vendor.get_product("0001").name)
        self.assertIsNone(vendor.get_product("0002"))

    def test_children_are_tuples(self):
        vendor = PciVendor(id="1234", name="Vendor", products=[])
        self.assertIsInstance(vendor.products, tuple)


class TestPciDevice(base.BaseTestCase):
    def setUp(self):
        super().setUp()
        self.db = _sample_db()
        with open(SAMPLES_DIR / "pci_devices.json") as f:
            self.device_jsons = json.load(f)

    def test_normalize_ids(self):
        device = PciDevice.model_validate(self.device_jsons[0])
        self.assertEqual("10de", device.vendor_id)
        self.assertEqual("1e30", device.product_id)

    def test_class_code_split(self):
        device = PciDevice.model_validate(
            {"vendor_id": "8086", "product_id": "a182", "class": "0x010601"}
        )
        self.assertEqual("01", device.class_id)
        self.assertEqual("06", device.subclass_id)
        self.assertEqual("01", device.prog_if_id)

    def test_integer_ids(self):
        device = PciDevice.model_validate(
            {"vendor_id": 0x10DE, "product_id": 0x1E30, "class": 0x030000}
        )
        self.assertEqual("10de", device.vendor_id)
        self.assertEqual("030000", device.pci_class)

    def test_bad_class_code(self):
        self.assertRaises(
            ValidationError,
            PciDevice.model_validate,
            {"vendor_id": "10de", "product_id": "1e30", "class": "03"},
        )

    def test_describe_known_device(self):
        device = PciDevice.model_validate(self.device_jsons[0])
        description = device.describe(self.db)

        self.assertEqual("NVIDIA Corporation", description.vendor_name)
        self.assertEqual("TU102GL [Quadro RTX 6000/8000]", description.product_name)
        self.assertEqual("Quadro RTX 6000", description.subsystem_name)
        self.assertEqual("Display controller", description.class_name)
        self.assertEqual("VGA compatible controller", description.subclass_name)
        self.assertEqual("VGA controller", description.programming_interface_name)

    def test_describe_unknown_class(self):
        device = PciDevice.model_validate(self.device_jsons[1])
        description = device.describe(self.db)

        self.assertEqual("Xilinx Corporation", description.vendor_name)
        self.assertEqual("Alveo U280 Golden Image", description.product_name)
        self.assertIsNone(description.subsystem_name)
        self.assertIsNone(description.class_name)

    def test_describe_unknown_vendor(self):
        device = PciDevice.model_validate(self.device_jsons[2])
        description = device.describe(self.db)

        self.assertIsNone(description.vendor_name)
        self.assertIsNone(description.product_name)
