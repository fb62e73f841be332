"""Tests for script-hook execution contexts."""

import os as _os
import string as _string
import sys as _sys
import types as _types

import buildhooks.hooks.context as context


class TestCopyModule:
    """Tests for copy_module()."""

    def test_copy_is_a_new_module(self) -> None:
        clone = context.copy_module(_string)
        assert clone is not _string
        assert clone.__name__ == "string"
        assert clone.ascii_letters == _string.ascii_letters

    def test_rebinding_on_copy_leaves_source(self) -> None:
        clone = context.copy_module(_string)
        clone.ascii_letters = "patched"
        assert _string.ascii_letters != "patched"

    def test_functions_are_shared(self) -> None:
        clone = context.copy_module(_os)
        assert clone.getcwd is _os.getcwd

    def test_nested_modules_are_copied(self) -> None:
        clone = context.copy_module(_os)
        assert isinstance(clone.path, _types.ModuleType)
        assert clone.path is not _os.path
        assert clone.path.join is _os.path.join

    def test_cycles_resolve_to_same_copy(self) -> None:
        # os.path imports os, so os.path.os refers back to os
        clone = context.copy_module(_os)
        assert clone.path.os is clone

    def test_visited_is_shared_between_calls(self) -> None:
        visited: dict[int, _types.ModuleType] = {}
        os_copy = context.copy_module(_os, visited)
        path_copy = context.copy_module(_os.path, visited)
        assert os_copy.path is path_copy


class TestBuildContext:
    """Tests for build_context()."""

    def test_default_modules_are_bound(self) -> None:
        ctx = context.build_context()
        for name in context.DEFAULT_CONTEXT_MODULES:
            assert isinstance(ctx[name], _types.ModuleType)
            assert ctx[name] is not _sys.modules[name]

    def test_custom_module_list(self) -> None:
        ctx = context.build_context(modules=["math"])
        assert "math" in ctx
        assert "os" not in ctx

    def test_contexts_are_independent(self) -> None:
        first = context.build_context()
        second = context.build_context()
        first["string"].digits = "patched"
        assert second["string"].digits == "0123456789"
        assert _string.digits == "0123456789"

    def test_builtins_are_private(self) -> None:
        ctx = context.build_context()
        exec("__builtins__['len'] = None", ctx)
        assert len("abc") == 3
        assert context.build_context()["__builtins__"]["len"] is len

    def test_import_returns_context_copy(self) -> None:
        ctx = context.build_context()
        exec("import string\nstring.digits = 'patched'\nimported = string", ctx)
        assert ctx["imported"] is ctx["string"]
        assert _string.digits == "0123456789"

    def test_import_submodule_binds_package_copy(self) -> None:
        ctx = context.build_context()
        exec("import os.path\nimported = os", ctx)
        assert ctx["imported"] is ctx["os"]

    def test_fromlist_import_uses_copies(self) -> None:
        ctx = context.build_context()
        source = "\n".join(
            [
                "from os import path as p",
                "from os.path import join",
            ]
        )
        exec(source, ctx)
        assert ctx["p"] is ctx["os"].path
        assert ctx["join"] is _os.path.join

    def test_other_imports_are_real(self) -> None:
        ctx = context.build_context(modules=["os"])
        exec("import textwrap\nimported = textwrap", ctx)
        assert ctx["imported"] is _sys.modules["textwrap"]

    def test_module_name(self) -> None:
        assert context.build_context()["__name__"] == context.CONTEXT_MODULE_NAME
