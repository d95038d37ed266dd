from pathlib import Path

from mdr.compiler import compile_file, compile_text

from tests.infrastructure.file_utils import write_template
from tests.infrastructure.samples import STEPS_OUTPUT, STEPS_TEMPLATE


def test_steps_example(tmp_path: Path):
    assert compile_text(STEPS_TEMPLATE, tmp_path) == STEPS_OUTPUT


def test_compile_is_idempotent(tmp_path: Path):
    template = write_template(tmp_path / "guide.mdoc", STEPS_TEMPLATE)
    assert compile_file(template) == compile_file(template) == STEPS_OUTPUT


def test_forward_reference(tmp_path: Path):
    src = (
        'Jump to step {% ref("#later .two") %}.\n'
        "\n"
        '{% ol id="later" %}\n'
        '{% li cl="one" %}One{% /li %}\n'
        '{% li cl="two" %}Two{% /li %}\n'
        "{% /ol %}\n"
    )
    assert compile_text(src, tmp_path) == "Jump to step 2.\n\n1. One\n2. Two\n"


def test_plain_markdown_lists(tmp_path: Path):
    src = (
        "1. First\n"
        "2. Second\n"
        "   1. Sub a\n"
        "   2. Sub b\n"
        "3. Third\n"
        "\n"
        "- x\n"
        "- y\n"
    )
    out = compile_text(src, tmp_path)
    assert out == "1. First\n2. Second\n   1. Sub a\n   2. Sub b\n3. Third\n- x\n- y\n"


def test_markdown_blocks_round_trip(tmp_path: Path):
    src = (
        "# Title\n"
        "\n"
        "> quoted\n"
        "\n"
        "```sh\n"
        "mdr push\n"
        "```\n"
        "\n"
        "| a | b |\n"
        "|---|---|\n"
        "| 1 | 2 |\n"
        "\n"
        "---\n"
        "\n"
        "End with `code` and ![img](p.png).\n"
    )
    out = compile_text(src, tmp_path)
    assert out == (
        "# Title\n"
        "\n"
        "> > quoted\n"
        ">\n"
        ">\n"
        "\n"
        "```sh\n"
        "mdr push\n"
        "```\n"
        "\n"
        "| a | b |\n"
        "| --- | --- |\n"
        "| 1 | 2 |\n"
        "\n"
        "---\n"
        "\n"
        "End with `code` and ![img](p.png).\n"
    )


def test_unresolved_reference_renders_question_mark(tmp_path: Path):
    assert compile_text('Step {% ref("#nope .x") %}\n', tmp_path) == "Step ?\n"


def test_output_ends_with_single_newline(tmp_path: Path):
    assert compile_text("\n\n\nHello\n\n\n\n", tmp_path) == "Hello\n"


def test_blockquote_indent_does_not_leak_into_following_paragraph(tmp_path: Path):
    assert compile_text("> quoted\n\nafter\n", tmp_path) == "> > quoted\n>\n>\n\nafter\n"
