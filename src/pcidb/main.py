import argparse
import json
import logging
import sys

from pydantic import ValidationError

from pcidb import loader
from pcidb.exceptions import LoadError
from pcidb.models import PciDevice

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_LOAD_ERROR = 2


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="pcidb",
        description="Look up PCI class, vendor and product names in pci.ids",
    )
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument(
        "--pci-ids",
        action="append",
        metavar="PATH",
        help="pci.ids file to load. May be given more than once, the first "
        "readable file wins. Replaces the default search paths.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    class_parser = subparsers.add_parser("class", help="Look up a device class")
    class_parser.add_argument("class_id")
    class_parser.add_argument("subclass_id", nargs="?")
    class_parser.add_argument("prog_if_id", nargs="?")

    vendor_parser = subparsers.add_parser("vendor", help="Look up a vendor")
    vendor_parser.add_argument("vendor_id")

    product_parser = subparsers.add_parser("product", help="Look up a product")
    product_parser.add_argument("vendor_id")
    product_parser.add_argument("product_id")

    describe_parser = subparsers.add_parser(
        "describe",
        help="Name the devices in a JSON file. Example entry: "
        '`{"vendor_id": "10de", "product_id": "1e30", "class": "030000"}`',
    )
    describe_parser.add_argument("devices_file")

    subparsers.add_parser("dump", help="Print the whole database as JSON")
    subparsers.add_parser("summary", help="Print entity counts")

    return parser.parse_args(argv)


def _print_class(pci_class, subclass_id=None, prog_if_id=None):
    print(f"{pci_class.id}  {pci_class.name}")
    for subclass in pci_class.subclasses:
        if subclass_id and subclass.id != subclass_id:
            continue
        print(f"\t{subclass.id}  {subclass.name}")
        for prog_if in subclass.programming_interfaces:
            if prog_if_id and prog_if.id != prog_if_id:
                continue
            print(f"\t\t{prog_if.id}  {prog_if.name}")


def _print_product(product):
    print(f"{product.vendor_id}:{product.id}  {product.name}")
    for subsystem in product.subsystems:
        print(f"\t{subsystem.vendor_id}:{subsystem.id}  {subsystem.name}")


def _print_vendor(vendor):
    print(f"{vendor.id}  {vendor.name}")
    for product in vendor.products:
        print(f"\t{product.id}  {product.name}")


def lookup_class(db, args):
    pci_class = db.get_class(args.class_id)
    if pci_class is None:
        print(f"class {args.class_id} not found", file=sys.stderr)
        return EXIT_NOT_FOUND

    if args.subclass_id:
        subclass = pci_class.get_subclass(args.subclass_id)
        if subclass is None:
            print(
                f"subclass {args.class_id}{args.subclass_id} not found",
                file=sys.stderr,
            )
            return EXIT_NOT_FOUND
        if args.prog_if_id and subclass.get_programming_interface(args.prog_if_id) is None:
            print(
                f"programming interface "
                f"{args.class_id}{args.subclass_id}{args.prog_if_id} not found",
                file=sys.stderr,
            )
            return EXIT_NOT_FOUND

    if args.json:
        print(pci_class.model_dump_json(indent=2))
    else:
        _print_class(pci_class, args.subclass_id, args.prog_if_id)
    return EXIT_OK


def lookup_vendor(db, args):
    vendor = db.get_vendor(args.vendor_id)
    if vendor is None:
        print(f"vendor {args.vendor_id} not found", file=sys.stderr)
        return EXIT_NOT_FOUND

    if args.json:
        print(vendor.model_dump_json(indent=2))
    else:
        _print_vendor(vendor)
    return EXIT_OK


def lookup_product(db, args):
    product = db.get_product(args.vendor_id, args.product_id)
    if product is None:
        print(
            f"product {args.vendor_id}:{args.product_id} not found", file=sys.stderr
        )
        return EXIT_NOT_FOUND

    if args.json:
        print(product.model_dump_json(indent=2))
    else:
        _print_product(product)
    return EXIT_OK


def describe_devices(db, args):
    try:
        with open(args.devices_file, "r") as f:
            device_jsons = json.load(f)
    except (OSError, ValueError) as ex:
        print(
            f"failed to read devices file {args.devices_file}: {ex}", file=sys.stderr
        )
        return EXIT_LOAD_ERROR
    if not isinstance(device_jsons, list):
        print(
            f"devices file {args.devices_file} must hold a JSON list", file=sys.stderr
        )
        return EXIT_LOAD_ERROR

    results = []
    exit_code = EXIT_OK
    for device_json in device_jsons:
        try:
            device = PciDevice.model_validate(device_json)
        except ValidationError as ex:
            print(f"skipping invalid device {device_json}: {ex}", file=sys.stderr)
            exit_code = EXIT_NOT_FOUND
            continue
        results.append((device, device.describe(db)))

    if args.json:
        output = [
            {
                "device": device.model_dump(by_alias=True, exclude_none=True),
                "description": description.model_dump(),
            }
            for device, description in results
        ]
        print(json.dumps(output, indent=2))
        return exit_code

    for device, description in results:
        location = device.bus or f"{device.vendor_id}:{device.product_id}"
        kind = (
            description.subclass_name
            or description.class_name
            or f"Class {device.class_id}{device.subclass_id}"
        )
        vendor = description.vendor_name or f"Vendor {device.vendor_id}"
        product = description.product_name or f"Device {device.product_id}"
        print(f"{location} {kind}: {vendor} {product}")
    return exit_code


def dump(db, args):
    print(db.model_dump_json(indent=2))
    return EXIT_OK


def summary(db, args):
    counts = db.summary()
    if args.json:
        print(json.dumps(counts, indent=2))
    else:
        for name, count in counts.items():
            print(f"{name}: {count}")
    return EXIT_OK


COMMANDS = {
    "class": lookup_class,
    "vendor": lookup_vendor,
    "product": lookup_product,
    "describe": describe_devices,
    "dump": dump,
    "summary": summary,
}


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        db = loader.load(candidate_paths=args.pci_ids)
    except LoadError as ex:
        print(f"failed to load pci.ids: {ex}", file=sys.stderr)
        return EXIT_LOAD_ERROR

    return COMMANDS[args.command](db, args)


if __name__ == "__main__":
    sys.exit(main())
