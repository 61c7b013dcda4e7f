import os
import pathlib

from oslotest import base
from pydantic import ValidationError

from pcidb import config


class TestDefaultCandidatePaths(base.BaseTestCase):
    def test_linux(self):
        paths = config.default_candidate_paths(platform="linux", environ={})
        self.assertEqual(
            [
                "/usr/share/hwdata/pci.ids",
                "/usr/share/misc/pci.ids",
                "/usr/local/share/pci.ids",
            ],
            [str(p) for p in paths],
        )

    def test_windows(self):
        paths = config.default_candidate_paths(
            platform="win32", environ={"LOCALAPPDATA": r"C:\Users\me\AppData\Local"}
        )
        self.assertEqual(
            [r"C:\Users\me\AppData\Local\pcidb\pciids.txt"], [str(p) for p in paths]
        )

    def test_windows_without_local_app_data(self):
        paths = config.default_candidate_paths(platform="win32", environ={})
        self.assertEqual([], paths)


class TestLoaderConfig(base.BaseTestCase):
    def test_defaults(self):
        loader_config = config.LoaderConfig()
        self.assertEqual("utf-8", loader_config.encoding)
        self.assertEqual(
            [pathlib.Path(p) for p in config.default_candidate_paths()],
            loader_config.candidate_paths,
        )

    def test_from_environment_without_overrides(self):
        loader_config = config.LoaderConfig.from_environment(environ={})
        self.assertEqual(config.LoaderConfig(), loader_config)

    def test_path_override(self):
        environ = {"PCIDB_PATH": os.pathsep.join(["/opt/a/pci.ids", "", "/opt/b/pci.ids"])}
        loader_config = config.LoaderConfig.from_environment(environ=environ)
        self.assertEqual(
            [pathlib.Path("/opt/a/pci.ids"), pathlib.Path("/opt/b/pci.ids")],
            loader_config.candidate_paths,
        )

    def test_encoding_override(self):
        loader_config = config.LoaderConfig.from_environment(
            environ={"PCIDB_ENCODING": "latin-1"}
        )
        self.assertEqual("latin-1", loader_config.encoding)

    def test_unknown_encoding(self):
        self.assertRaises(ValidationError, config.LoaderConfig, encoding="bogus")

    def test_unknown_encoding_override(self):
        self.assertRaises(
            ValidationError,
            config.LoaderConfig.from_environment,
            environ={"PCIDB_ENCODING": "bogus"},
        )
