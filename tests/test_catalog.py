"""Tests for FormatHandler, FileHandlerCatalog and process-wide registration."""

import sys
import textwrap

import pytest

from flowmodel_io.core import (
    Capability,
    CapabilityImporter,
    CatalogFrozenError,
    FileHandlerCatalog,
    FormatHandler,
    InteropHandler,
    ObjectImporter,
    ObjectKind,
    PluginError,
    auto_discover_file_handlers,
    file_handler,
    get_catalog,
    register_file_handler,
)

from conftest import accepting


def handler(name, extension=None, **kwargs):
    return FormatHandler(name=name, file_extension=extension or name, **kwargs)


class TestFormatHandler:

    def test_display_name(self):
        lpn = handler("labelled Petri net", "lpn")
        xes = handler("event log", ".xes", article="an")

        assert str(lpn) == "a labelled Petri net (.lpn)"
        assert str(xes) == "an event log (.xes)"
        assert xes.file_extension == "xes"

    def test_latex_reference(self):
        lpn = handler("labelled Petri net", "lpn")

        assert lpn.latex_reference() == "\\hyperref[filehandler:labelled Petri net]{a labelled Petri net (.lpn)}"

    def test_declarations_are_tuples_in_order(self):
        importers = [
            CapabilityImporter(Capability.SEMANTICS, accepting(b"", 1)),
            CapabilityImporter(Capability.STOCHASTIC_SEMANTICS, accepting(b"", 2)),
            CapabilityImporter(Capability.SEMANTICS, accepting(b"", 3)),
        ]
        h = handler("slpn", capability_importers=importers)

        assert h.capability_importers == tuple(importers)
        assert h.capabilities() == [Capability.SEMANTICS, Capability.STOCHASTIC_SEMANTICS]
        assert h.declares_capability(Capability.STOCHASTIC_SEMANTICS)
        assert not h.declares_capability(Capability.EVENT_LOG)

    def test_object_kinds(self):
        h = handler("log", object_importers=[
            ObjectImporter(ObjectKind.EVENT_LOG, accepting(b"", 1)),
            ObjectImporter(ObjectKind.EVENT_LOG, accepting(b"", 2)),
        ])

        assert h.object_kinds() == [ObjectKind.EVENT_LOG]
        assert h.declares_object_kind(ObjectKind.EVENT_LOG)

    def test_is_immutable(self):
        h = handler("lpn")

        with pytest.raises(AttributeError):
            h.name = "other"


class TestInteropHandler:

    def test_compares_by_identity(self):
        a = InteropHandler("net", "host.Net", translator_host_to_core=str)
        b = InteropHandler("net", "host.Net", translator_host_to_core=str)

        assert a != b
        assert a == a

    def test_directions(self):
        both = InteropHandler("net", "host.Net", str, str)
        export_only = InteropHandler("net", "host.Net", translator_core_to_host=str)

        assert both.can_import() and both.can_export()
        assert not export_only.can_import()


class TestFileHandlerCatalog:

    def test_iterates_in_declaration_order(self):
        names = ["zeta", "alpha", "mid"]
        catalog = FileHandlerCatalog([handler(n) for n in names])

        assert [h.name for h in catalog] == names
        assert catalog.list_names() == names
        assert len(catalog) == 3

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="lpn"):
            FileHandlerCatalog([handler("lpn"), handler("lpn")])

    def test_lookup(self):
        lpn = handler("labelled Petri net", "lpn")
        catalog = FileHandlerCatalog([lpn, handler("event log", "xes")])

        assert catalog.get("labelled Petri net") is lpn
        assert catalog.get("lpn") is None
        assert catalog.find_by_extension(".LPN") is lpn
        assert catalog.find_by_extension("pnml") is None
        assert lpn in catalog

    def test_handlers_for_capability_and_kind(self):
        a = handler("a", capability_importers=[CapabilityImporter(Capability.EVENT_LOG, accepting(b"", 1))])
        b = handler("b", object_importers=[ObjectImporter(ObjectKind.EVENT_LOG, accepting(b"", 1))])
        c = handler("c", capability_importers=[CapabilityImporter(Capability.EVENT_LOG, accepting(b"", 1))])
        catalog = FileHandlerCatalog([a, b, c])

        assert catalog.handlers_for_capability(Capability.EVENT_LOG) == [a, c]
        assert catalog.handlers_for_object_kind(ObjectKind.EVENT_LOG) == [b]

    def test_flatten_interop_handlers_deduplicates_by_identity(self):
        shared = InteropHandler("shared", "host.Shared", str)
        own = InteropHandler("own", "host.Own", str)
        lookalike = InteropHandler("shared", "host.Shared", str)
        first = handler("first", interop_handlers=[shared, own])
        second = handler("second", interop_handlers=[lookalike, shared])

        flattened = FileHandlerCatalog.flatten_interop_handlers([first, second])

        assert flattened == [shared, own, lookalike]
        assert flattened[2] is lookalike

    def test_display_names_and_latex(self):
        catalog = FileHandlerCatalog([handler("log", "xes", article="an"), handler("net", "lpn")])

        assert catalog.display_names() == ["an log (.xes)", "a net (.lpn)"]
        assert catalog.latex_references()[1] == "\\hyperref[filehandler:net]{a net (.lpn)}"

    def test_generate_docs(self):
        catalog = FileHandlerCatalog([
            handler(
                "labelled Petri net",
                "lpn",
                description="Petri net with labelled transitions.",
                capability_importers=[CapabilityImporter(Capability.SEMANTICS, accepting(b"", 1))],
                object_importers=[ObjectImporter(ObjectKind.LABELLED_PETRI_NET, accepting(b"", 1))],
                interop_handlers=[InteropHandler("lpn", "host.PetriNet", str)],
            ),
        ])

        docs = catalog.generate_docs()

        assert "### `labelled Petri net` (.lpn)" in docs
        assert "Petri net with labelled transitions." in docs
        assert "- a semantics" in docs
        assert "- labelled Petri net" in docs
        assert "`host.PetriNet`" in docs


class TestProcessCatalog:

    def test_registration_order_is_catalog_order(self, clean_catalog):
        register_file_handler(handler("second-declared-first"))
        register_file_handler(handler("declared-second"))

        assert get_catalog().list_names() == ["second-declared-first", "declared-second"]

    def test_catalog_is_built_once(self, clean_catalog):
        register_file_handler(handler("one"))

        assert get_catalog() is get_catalog()

    def test_registration_after_first_use_fails(self, clean_catalog):
        get_catalog()

        with pytest.raises(CatalogFrozenError, match="late"):
            register_file_handler(handler("late"))

    def test_duplicate_registration_fails(self, clean_catalog):
        register_file_handler(handler("dup"))

        with pytest.raises(ValueError, match="dup"):
            register_file_handler(handler("dup"))

    def test_decorator_registers_factory_result(self, clean_catalog):
        @file_handler
        def directly_follows_model():
            return handler("directly follows model", "dfm")

        assert get_catalog().get("directly follows model") is not None
        assert directly_follows_model().name == "directly follows model"

    def test_auto_discover(self, clean_catalog, tmp_path, monkeypatch):
        package = tmp_path / "stub_formats"
        package.mkdir()
        (package / "__init__.py").write_text("")
        for name, extension in [("alpha_format", "alp"), ("beta_format", "bet")]:
            (package / f"{name}.py").write_text(textwrap.dedent(f"""
                from flowmodel_io.core import FormatHandler, register_file_handler

                register_file_handler(FormatHandler(name="{name}", file_extension="{extension}"))
            """))
        (package / "_private.py").write_text("raise RuntimeError('must not be imported')\n")
        monkeypatch.syspath_prepend(str(tmp_path))
        monkeypatch.delitem(sys.modules, "stub_formats", raising=False)

        added = auto_discover_file_handlers("stub_formats")

        assert added == ["alpha_format", "beta_format"]
        assert get_catalog().list_names() == ["alpha_format", "beta_format"]

    def test_auto_discover_reports_failing_module(self, clean_catalog, tmp_path, monkeypatch):
        package = tmp_path / "clashing_formats"
        package.mkdir()
        (package / "__init__.py").write_text(
            "from flowmodel_io.core import FormatHandler, register_file_handler\n"
            "register_file_handler(FormatHandler(name='lpn', file_extension='lpn'))\n"
        )
        (package / "again.py").write_text(
            "from flowmodel_io.core import FormatHandler, register_file_handler\n"
            "register_file_handler(FormatHandler(name='lpn', file_extension='lpn'))\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        with pytest.raises(PluginError, match="clashing_formats.again") as info:
            auto_discover_file_handlers("clashing_formats")

        assert info.value.module == "clashing_formats.again"
        assert isinstance(info.value.__cause__, ValueError)
