import pytest

from depchain.adapters.errors import SourceParseError
from depchain.application.check_dependency_chain import check_dependency_chain
from depchain.domain.chain import ChainState
from depchain.domain.config import CheckConfig
from depchain.domain.errors import AreaSelectorError, InvalidDependencyChainError


async def _check(pkg, walker, reporter, finder, area="package", config=None):
    return await check_dependency_chain(
        pkg, area, walker=walker, reporter=reporter, finder=finder, config=config
    )


@pytest.mark.asyncio
async def test_declared_dependency_is_clean(make_package, walker, reporter, finder):
    pkg = make_package(
        "foo",
        dependencies={"bar": "^1.0.0"},
        files={"src/index.ts": "import x from 'bar/sub';\n"},
    )
    report = await _check(pkg, walker, reporter, finder)
    assert report.state is ChainState.CLEAN
    assert report.invalid_imports == []
    assert reporter.warnings == []


@pytest.mark.asyncio
async def test_type_only_violation_warns(make_package, walker, reporter, finder):
    pkg = make_package("foo", files={"src/index.ts": "import type { T } from 'baz';\n"})
    report = await _check(pkg, walker, reporter, finder)
    assert report.state is ChainState.REPORTED
    assert report.types_only
    assert reporter.warnings == ["📦 Invalid dependency (types only): baz"]
    assert reporter.verbose_lines == ["     > src/index.ts - baz (types only)"]


@pytest.mark.asyncio
async def test_type_only_outcome_is_repeatable(make_package, walker, reporter, finder):
    pkg = make_package("foo", files={"src/index.ts": "import type { T } from 'baz';\n"})
    first = await _check(pkg, walker, reporter, finder)
    second = await _check(pkg, walker, reporter, finder)
    assert first.state is second.state is ChainState.REPORTED
    assert len(reporter.warnings) == 2


@pytest.mark.asyncio
async def test_value_import_violation_raises(make_package, walker, reporter, finder):
    pkg = make_package("foo", files={"src/index.ts": "import { f } from 'baz';\n"})
    with pytest.raises(InvalidDependencyChainError) as excinfo:
        await _check(pkg, walker, reporter, finder)
    assert str(excinfo.value) == "foo has invalid dependency chains."
    assert excinfo.value.package_name == "foo"
    assert reporter.warnings == ["📦 Invalid dependency: baz"]


@pytest.mark.asyncio
async def test_mixed_violations_raise_and_report_everything(
    make_package, walker, reporter, finder
):
    pkg = make_package(
        "foo",
        files={
            "src/a.ts": "import type { T } from 'types-pkg';\n",
            "src/b.ts": "const q = require('@scope/qux/deep');\n",
        },
    )
    with pytest.raises(InvalidDependencyChainError) as excinfo:
        await _check(pkg, walker, reporter, finder)
    report = excinfo.value.report
    assert report is not None and not report.types_only
    assert reporter.warnings == ["📦 Invalid dependencies: types-pkg, @scope/qux"]
    assert reporter.verbose_lines == [
        "     > src/a.ts - types-pkg (types only)",
        "     > src/b.ts - @scope/qux/deep",
    ]


@pytest.mark.asyncio
async def test_builtins_and_internal_imports_never_checked(
    make_package, walker, reporter, finder
):
    pkg = make_package(
        "foo",
        files={
            "src/index.ts": (
                "import fs from 'node:fs';\n"
                "import path from 'path';\n"
                "import helper from './utils/helper';\n"
                "import up from '../index';\n"
            )
        },
    )
    report = await _check(pkg, walker, reporter, finder)
    assert report.state is ChainState.CLEAN


@pytest.mark.asyncio
async def test_own_name_and_ignored_imports_pass(make_package, walker, reporter, finder):
    pkg = make_package(
        "@scope/foo",
        files={
            "src/index.ts": (
                "import type { Self } from '@scope/foo/build/types';\n"
                "import core from 'expo-modules-core';\n"
            )
        },
    )
    report = await _check(pkg, walker, reporter, finder)
    assert report.state is ChainState.CLEAN


@pytest.mark.asyncio
async def test_dev_and_peer_dependencies_are_declarations(
    make_package, walker, reporter, finder
):
    pkg = make_package(
        "foo",
        dev_dependencies={"jest": "*"},
        peer_dependencies={"react": "*"},
        files={"src/index.tsx": "import React from 'react';\nimport j from 'jest';\n"},
    )
    report = await _check(pkg, walker, reporter, finder)
    assert report.state is ChainState.CLEAN


@pytest.mark.asyncio
async def test_test_and_mock_files_never_contribute(make_package, walker, reporter, finder):
    pkg = make_package(
        "foo",
        files={
            "src/index.ts": "export const a = 1;\n",
            "src/__tests__/index-test.ts": "import { f } from 'undeclared';\n",
            "src/__mocks__/fs.ts": "import { g } from 'also-undeclared';\n",
        },
    )
    report = await _check(pkg, walker, reporter, finder)
    assert report.state is ChainState.CLEAN
    assert len(report.files) == 3


@pytest.mark.asyncio
async def test_no_source_files_is_clean(make_package, walker, reporter, finder):
    pkg = make_package("foo", files={"src/__tests__/a-test.ts": "import 'x';\n"})
    report = await _check(pkg, walker, reporter, finder)
    assert report.state is ChainState.CLEAN
    assert report.invalid_imports == []


@pytest.mark.asyncio
async def test_ignored_package_is_skipped_without_reading(make_package, reporter):
    pkg = make_package("expo", files={"src/index.ts": "import { f } from 'baz';\n"})

    class ExplodingWalker:
        def extract(self, text, path):
            raise AssertionError("should not parse")

    class ExplodingFinder:
        def find_sources(self, root):
            raise AssertionError("should not discover")

    report = await check_dependency_chain(
        pkg, walker=ExplodingWalker(), reporter=reporter, finder=ExplodingFinder()
    )
    assert report.state is ChainState.SKIPPED


@pytest.mark.asyncio
async def test_sub_area_is_checked_from_its_own_root(make_package, walker, reporter, finder):
    pkg = make_package(
        "foo",
        files={
            "src/index.ts": "export {};\n",
            "plugin/src/withFoo.ts": "import { ConfigPlugin } from '@expo/config-plugins';\n",
        },
    )
    clean = await _check(pkg, walker, reporter, finder)
    assert clean.state is ChainState.CLEAN
    with pytest.raises(InvalidDependencyChainError):
        await _check(pkg, walker, reporter, finder, area="plugin")
    assert reporter.verbose_lines == [
        "     > plugin/src/withFoo.ts - @expo/config-plugins"
    ]


@pytest.mark.asyncio
async def test_unknown_area_is_a_configuration_error(make_package, walker, reporter, finder):
    pkg = make_package("foo", files={"src/index.ts": "export {};\n"})
    with pytest.raises(AreaSelectorError):
        await _check(pkg, walker, reporter, finder, area="scripts")


@pytest.mark.asyncio
async def test_parse_error_aborts_with_file_name(make_package, walker, reporter, finder):
    pkg = make_package(
        "foo",
        files={
            "src/good.ts": "import { f } from 'baz';\n",
            "src/broken.ts": "import { from 'x'\nconst = ;\n",
        },
    )
    with pytest.raises(SourceParseError) as excinfo:
        await _check(pkg, walker, reporter, finder)
    assert "broken.ts" in str(excinfo.value)
    assert reporter.warnings == []


@pytest.mark.asyncio
async def test_extra_ignored_imports_from_config(make_package, walker, reporter, finder):
    pkg = make_package("foo", files={"src/index.ts": "import x from 'hoisted';\n"})
    config = CheckConfig().extend(ignored_imports=["hoisted"])
    report = await _check(pkg, walker, reporter, finder, config=config)
    assert report.state is ChainState.CLEAN
