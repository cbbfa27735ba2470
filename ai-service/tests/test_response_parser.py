"""
Tests for backend reply parsing and artifact validation.
"""
from layoutforge.core.errors import ExtractionError, StructuralValidationError
from layoutforge.services.generation.response_parser import (
    generate_parsing_summary,
    parse_response,
    repair_typescript,
    to_export_manifest,
    tokenize_blocks,
    validate_html,
    validate_typescript,
)


def _fence(label, body):
    return f"```{label}\n{body}\n```"


class TestExtraction:
    def test_three_labelled_blocks(self, three_block_reply):
        file_set = parse_response(three_block_reply, "Login")

        assert file_set.errors == ()
        assert file_set.typescript.file_name == "login.component.ts"
        assert file_set.html.file_name == "login.component.html"
        assert file_set.scss.file_name == "login.component.scss"
        assert file_set.typescript.content.startswith("import { Component }")
        assert file_set.scss.size_bytes == len(file_set.scss.content.encode("utf-8"))

    def test_missing_html_is_exactly_one_error(self, valid_ts, valid_scss):
        reply = "\n\n".join([_fence("typescript", valid_ts), _fence("scss", valid_scss)])

        file_set = parse_response(reply, "Login")

        assert file_set.errors == ("No html code block found",)
        assert file_set.html is None
        assert file_set.issues[0].category == "extraction"
        assert file_set.issues[0].artifact == "html"

    def test_alternative_labels(self, valid_ts, valid_html, valid_scss):
        reply = "\n".join([_fence("ts", valid_ts), _fence("html", valid_html), _fence("css", valid_scss)])

        file_set = parse_response(reply, "Login")

        assert file_set.errors == ()
        assert file_set.scss.content == valid_scss

    def test_filename_comments_on_unlabelled_blocks(self, valid_ts, valid_html, valid_scss):
        reply = "\n".join([
            _fence("", "/* login.component.scss */\n" + valid_scss),
            _fence("", "// login.component.ts\n" + valid_ts),
            _fence("", "<!-- login.component.html -->\n" + valid_html),
        ])

        file_set = parse_response(reply, "Login")

        assert file_set.errors == ()
        assert file_set.typescript.content == valid_ts
        assert file_set.html.content == valid_html
        assert file_set.scss.content == valid_scss

    def test_filename_comment_before_fence(self, valid_ts, valid_html, valid_scss):
        reply = "\n".join([
            "<!-- login.component.html -->", _fence("", valid_html),
            "// login.component.ts", _fence("", valid_ts),
            "/* login.component.scss */", _fence("", valid_scss),
        ])

        file_set = parse_response(reply, "Login")

        assert file_set.errors == ()
        assert file_set.html.content == valid_html

    def test_labelled_block_is_not_reused(self, valid_ts):
        file_set = parse_response(_fence("typescript", valid_ts), "Login")

        assert file_set.typescript is not None
        assert file_set.html is None
        assert file_set.scss is None
        assert file_set.errors == ("No html code block found", "No scss code block found")

    def test_non_string_reply(self):
        file_set = parse_response(None, "Login")

        assert file_set.present_artifacts() == []
        assert len(file_set.errors) == 3

    def test_issue_categories_follow_error_classes(self):
        file_set = parse_response(_fence("typescript", "const x = 1;"), "Login")

        categories = {(issue.artifact, issue.category) for issue in file_set.issues}
        assert ("html", ExtractionError.category) in categories
        assert ("scss", ExtractionError.category) in categories
        assert ("typescript", StructuralValidationError.category) in categories
        assert ExtractionError.category == "extraction"
        assert StructuralValidationError.category == "structure"

    def test_tokenize_blocks(self):
        blocks = tokenize_blocks("intro\n```HTML\n<p>x</p>\n```\n```\nplain\n```")

        assert [block.label for block in blocks] == ["html", ""]
        assert blocks[0].preceding_line == "intro"
        assert blocks[1].first_line == "plain"


class TestRepair:
    def test_style_url_is_rewritten(self, valid_ts, valid_html, valid_scss):
        broken = valid_ts.replace("styleUrls: ['./login.component.scss']", "styleUrl: './login.component.scss'")
        reply = "\n".join([_fence("typescript", broken), _fence("html", valid_html), _fence("scss", valid_scss)])

        file_set = parse_response(reply, "Login")

        assert "styleUrls: ['./login.component.scss']" in file_set.typescript.content
        assert "styleUrl:" not in file_set.typescript.content

    def test_repair_is_idempotent(self, valid_ts):
        assert repair_typescript(valid_ts) == valid_ts


class TestStructuralChecks:
    def test_typescript_checks(self):
        messages = [issue.message for issue in validate_typescript("const x = 1;")]

        assert messages == [
            "TypeScript file missing @Component decorator",
            "TypeScript file missing export class",
            "TypeScript file missing Angular imports",
        ]

    def test_valid_typescript(self, valid_ts):
        assert validate_typescript(valid_ts) == []

    def test_short_html(self):
        issues = validate_html("<p>x</p>")

        assert [issue.message for issue in issues] == ["HTML template appears to be too short"]
        assert issues[0].severity == "error"

    def test_plain_button_is_a_warning(self):
        issues = validate_html('<div class="x"><button>Go</button></div>')

        assert len(issues) == 1
        assert issues[0].severity == "warning"
        assert issues[0].message == "HTML may be missing PrimeNG components"

    def test_warning_is_recorded_in_errors_and_warnings(self, valid_ts, valid_scss):
        html = '<div class="x"><button>Go</button></div>'
        reply = "\n".join([_fence("typescript", valid_ts), _fence("html", html), _fence("scss", valid_scss)])

        file_set = parse_response(reply, "Login")

        assert file_set.errors == ("HTML may be missing PrimeNG components",)
        assert file_set.warnings == ["HTML may be missing PrimeNG components"]

    def test_empty_block(self, valid_ts, valid_html):
        reply = "\n".join([_fence("typescript", valid_ts), _fence("html", valid_html), "```scss\n\n```"])

        file_set = parse_response(reply, "Login")

        assert file_set.errors == ("Empty scss file content",)

    def test_custom_markup_threshold(self, three_block_reply):
        file_set = parse_response(three_block_reply, "Login", min_markup_length=10_000)

        assert file_set.errors == ("HTML template appears to be too short",)


class TestExport:
    def test_manifest_paths(self, three_block_reply):
        manifest = to_export_manifest(parse_response(three_block_reply, "Login"))

        assert [item.path for item in manifest] == [
            "./src/app/components/login.component.ts",
            "./src/app/components/login.component.html",
            "./src/app/components/login.component.scss",
        ]
        assert [item.kind for item in manifest] == ["typescript", "html", "scss"]

    def test_absent_artifacts_are_skipped(self, valid_ts):
        manifest = to_export_manifest(parse_response(_fence("typescript", valid_ts), "Login"), "out/")

        assert [item.path for item in manifest] == ["out/login.component.ts"]

    def test_summary(self, three_block_reply):
        file_set = parse_response(three_block_reply, "Login")

        summary = generate_parsing_summary(file_set)

        assert summary["success"] is True
        assert summary["filesExtracted"] == 3
        assert summary["totalSize"] == sum(a.size_bytes for a in file_set.present_artifacts())
        assert summary["files"]["html"]["fileName"] == "login.component.html"
