"""End-to-end tests for the SuiteAnalyzer."""

from pathlib import Path
from textwrap import dedent

import pytest

from qunitlint.config import QunitLintConfig, RulesConfig
from qunitlint.core.analyzer import SuiteAnalyzer
from qunitlint.models import DeclarationKind, MessageId


@pytest.fixture
def analyzer() -> SuiteAnalyzer:
    """Create a SuiteAnalyzer with default configuration."""
    return SuiteAnalyzer()


def code(text: str) -> str:
    return dedent(text).strip("\n")


class TestIdenticalNamesValid:
    """Sources that must not report duplicate names."""

    @pytest.mark.parametrize(
        "source",
        [
            """
            module("module");
            test("test", function() {});
            """,
            """
            module("module1");
            test("it1", function() {});
            test("it2", function() {});
            """,
            """
            test("it1", function() {});
            test("it2", function() {});
            """,
            """
            module("title", function() {});
            test("title", function() {});
            """,
            """
            module("module1");
            test("it1", function() {});
            module("module2");
            test("it1", function() {});
            """,
            """
            module("module1");
            module("module2");
            """,
            """
            test("test" + n, function() {});
            test("test" + n, function() {});
            """,
            """
            module("module1", function() {
              test("it1", function() {});
              test("it2", function() {});
            });
            module("module2", function() {
              test("it1", function() {});
              test("it2", function() {});
            });
            """,
            """
            test(`it${n}`, function() {});
            test(`it${n}`, function() {});
            """,
        ],
    )
    def test_no_diagnostics(self, analyzer: SuiteAnalyzer, source: str) -> None:
        """Distinct or non-literal names pass."""
        result = analyzer.analyze(code(source))
        assert result.passed, [d.message for d in result.diagnostics]


class TestIdenticalNamesInvalid:
    """Sources that must report duplicate names."""

    @pytest.mark.parametrize(
        ("source", "message_id", "first_line", "line", "column"),
        [
            (
                """
                module("module1");
                test("it1", function() {});
                test("it1", function() {});
                """,
                MessageId.DUPLICATE_TEST,
                2,
                3,
                6,
            ),
            (
                """
                test("it1", function() {});
                test("it1", function() {});
                """,
                MessageId.DUPLICATE_TEST,
                1,
                2,
                6,
            ),
            (
                """
                module("module1", function() {
                  test("it1", function() {});
                  test("it1", function() {});
                });
                """,
                MessageId.DUPLICATE_TEST,
                2,
                3,
                8,
            ),
            (
                """
                module("module1");
                module("module1");
                """,
                MessageId.DUPLICATE_MODULE,
                1,
                2,
                8,
            ),
            (
                """
                module("module1");
                test("it", function() {});
                module("module1");
                """,
                MessageId.DUPLICATE_MODULE,
                1,
                3,
                8,
            ),
        ],
    )
    def test_single_diagnostic(
        self,
        analyzer: SuiteAnalyzer,
        source: str,
        message_id: MessageId,
        first_line: int,
        line: int,
        column: int,
    ) -> None:
        """Repeated literal names in one scope report once at the repeat."""
        result = analyzer.analyze(code(source))
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.message_id == message_id
        assert diagnostic.data["line"] == first_line
        assert (diagnostic.line, diagnostic.column) == (line, column)
        assert diagnostic.rule == "no-identical-names"

    def test_qualified_forms_share_scope(self, analyzer: SuiteAnalyzer) -> None:
        """QUnit.test and test register in the same scope."""
        result = analyzer.analyze('QUnit.test("a", fn);\ntest("a", fn);')
        assert [d.message_id for d in result.diagnostics] == [MessageId.DUPLICATE_TEST]

    def test_each_repeat_reported(self, analyzer: SuiteAnalyzer) -> None:
        """Third and later repeats each report against the first line."""
        result = analyzer.analyze('test("a");\ntest("a");\ntest("a");')
        assert [(d.line, d.data["line"]) for d in result.diagnostics] == [(2, 1), (3, 1)]

    def test_duplicate_message_names_the_test(self, analyzer: SuiteAnalyzer) -> None:
        """The rendered message mentions the name and first line."""
        result = analyzer.analyze('test("it1");\ntest("it1");')
        assert result.diagnostics[0].message == (
            'Test name "it1" is used multiple times in the same module, '
            "first declared on line 1."
        )


class TestCommentedTests:
    """Tests for commented-out test detection through the full pass."""

    @pytest.mark.parametrize(
        "source",
        [
            "QUnit.skip('Name', function () { ok(true); });",
            "#!/some-test()",
            "// TODO: Add test (ASAP)",
            "// TODO: refactor with a Component test (instead of an Acceptance test)",
        ],
    )
    def test_valid(self, analyzer: SuiteAnalyzer, source: str) -> None:
        """Skipped tests, shebangs and TODO notes pass."""
        assert analyzer.analyze(source).passed

    @pytest.mark.parametrize("newline", ["\n", "\r", "\r\n"])
    def test_block_comment_line_offset(self, analyzer: SuiteAnalyzer, newline: str) -> None:
        """Positions inside block comments survive every line ending."""
        result = analyzer.analyze(f"/**{newline}\tQUnit.test('Name', function () {{ ok(true); }}); */")
        (diagnostic,) = result.diagnostics
        assert diagnostic.message == (
            'Unexpected "QUnit.test" in comment. Use QUnit.skip outside of a comment.'
        )
        assert (diagnostic.line, diagnostic.column) == (2, 2)
        assert diagnostic.rule == "no-commented-tests"

    def test_possible_multiple_args(self, analyzer: SuiteAnalyzer) -> None:
        """A permissive match reports at the identifier's column."""
        (diagnostic,) = analyzer.analyze("// Possible multiple args?: test (foo, bar)").diagnostics
        assert diagnostic.data == {"matched_text": "test"}
        assert (diagnostic.line, diagnostic.column) == (1, 29)

    def test_comment_position_after_code(self, analyzer: SuiteAnalyzer) -> None:
        """Comment positions account for preceding code on the same line."""
        source = 'test("a", fn);\nfoo(); // asyncTest("b", fn);'
        (diagnostic,) = analyzer.analyze(source).diagnostics
        assert (diagnostic.line, diagnostic.column) == (2, 11)


class TestDiagnosticOrdering:
    """Diagnostics follow source order across rules."""

    def test_mixed_rules_in_source_order(self, analyzer: SuiteAnalyzer) -> None:
        """Comment and duplicate findings interleave by position."""
        source = code(
            """
            module("m");
            test("a", fn);
            // test("b", fn);
            test("a", fn);
            /* QUnit.test("c") */
            module("m");
            """
        )
        result = analyzer.analyze(source)
        assert [(d.message_id, d.line) for d in result.diagnostics] == [
            (MessageId.NO_COMMENTED_TEST, 3),
            (MessageId.DUPLICATE_TEST, 4),
            (MessageId.NO_COMMENTED_TEST, 5),
            (MessageId.DUPLICATE_MODULE, 6),
        ]


class TestConfiguration:
    """Tests for rule toggles."""

    def test_disabled_rule_is_silent(self) -> None:
        """A disabled rule produces no diagnostics."""
        config = QunitLintConfig(rules=RulesConfig(no_commented_tests=False))
        analyzer = SuiteAnalyzer(config)
        result = analyzer.analyze('// test("x")\ntest("a");\ntest("a");')
        assert [d.rule for d in result.diagnostics] == ["no-identical-names"]

    def test_outline_built_when_rules_disabled(self) -> None:
        """Declarations are collected regardless of rule toggles."""
        config = QunitLintConfig(
            rules=RulesConfig(no_commented_tests=False, no_identical_names=False)
        )
        result = SuiteAnalyzer(config).analyze('test("a");\ntest("a");')
        assert result.passed
        assert len(result.declarations) == 2


class TestOutline:
    """Tests for the declaration outline."""

    def test_nested_modules_hooks_and_tests(self, analyzer: SuiteAnalyzer) -> None:
        """The outline records kind, depth and enclosing module."""
        source = code(
            """
            QUnit.module("outer", function (hooks) {
              hooks.beforeEach(function () {});
              QUnit.test("a", function (assert) { assert.ok(true); });
              QUnit.module("inner", { afterEach() {} }, function () {
                QUnit.test("b", function () {});
              });
            });
            test("top", fn);
            """
        )
        outline = [
            (d.kind, d.name, d.depth, d.module) for d in analyzer.analyze(source).declarations
        ]
        assert outline == [
            (DeclarationKind.MODULE, "outer", 1, "outer"),
            (DeclarationKind.HOOK, "beforeEach", 1, "outer"),
            (DeclarationKind.TEST, "a", 1, "outer"),
            (DeclarationKind.MODULE, "inner", 2, "inner"),
            (DeclarationKind.HOOK, "afterEach", 2, "inner"),
            (DeclarationKind.TEST, "b", 2, "inner"),
            (DeclarationKind.TEST, "top", 0, None),
        ]

    def test_hook_call_requires_hooks_parameter(self, analyzer: SuiteAnalyzer) -> None:
        """Member calls named like hooks outside a module body are ignored."""
        source = 'server.after(fn);\nmodule("m", function () { other.beforeEach(fn); });'
        kinds = [d.kind for d in analyzer.analyze(source).declarations]
        assert kinds == [DeclarationKind.MODULE]

    def test_hook_location(self, analyzer: SuiteAnalyzer) -> None:
        """Hook calls are located at the call."""
        source = 'module("m", function (hooks) {\n  hooks.after(fn);\n});'
        hook = analyzer.analyze(source).declarations[1]
        assert (hook.kind, hook.line, hook.column) == (DeclarationKind.HOOK, 2, 3)


class TestRobustness:
    """Malformed input degrades without raising."""

    def test_unparseable_source(self, analyzer: SuiteAnalyzer) -> None:
        """Syntax errors are counted and analysis continues."""
        result = analyzer.analyze('test("a");\ntest("a");\nfoo(;')
        assert result.parse_errors > 0
        assert any(d.message_id == MessageId.DUPLICATE_TEST for d in result.diagnostics)

    def test_empty_source(self, analyzer: SuiteAnalyzer) -> None:
        """Empty files pass."""
        result = analyzer.analyze("")
        assert result.passed
        assert result.declarations == []

    def test_bytes_with_invalid_utf8(self, analyzer: SuiteAnalyzer) -> None:
        """Undecodable bytes do not stop analysis."""
        result = analyzer.analyze(b'var s = "\xff";\ntest("a");\ntest("a");')
        assert len(result.diagnostics) == 1

    def test_analyze_file(self, analyzer: SuiteAnalyzer, tmp_path: Path) -> None:
        """Files are read from disk and reported with their path."""
        test_file = tmp_path / "suite.js"
        test_file.write_text('// QUnit.skip("x", fn);\n')
        result = analyzer.analyze_file(test_file)
        assert result.path == str(test_file)
        assert result.to_dict()["diagnostics"][0]["message_id"] == "noCommentedTest"
