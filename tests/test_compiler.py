import subprocess
from pathlib import Path

from texrender.compiler import CommandResult, preprocess, process, resolve_processor, run_command, tex_basename
from texrender.config import ProcessingConfig, ProcessingOptions
from texrender.models import Document


def _staged(tmp_path: Path, name: str = "document.tex") -> Path:
    staging = tmp_path / "staging"
    staging.mkdir()
    path = staging / name
    path.write_text("tex", encoding="utf-8")
    return path


def test_tex_basename_strips_only_tex_extension() -> None:
    assert tex_basename(Path("/tmp/x/document.tex")) == "document"
    assert tex_basename(Path("/tmp/x/paper.v2.tex")) == "paper.v2"
    assert tex_basename(Path("/tmp/x/notes.ltx")) == "notes.ltx"


def test_run_command_passes_default_args_then_basename(tmp_path: Path, toolchain) -> None:
    tool = toolchain.tool("pdftool", message="hello")
    staged = _staged(tmp_path)
    config = ProcessingConfig(default_args={tool: ["-interaction=nonstopmode", "-halt-on-error"]})

    outcome = run_command(tool, "document", staged.parent, config)

    assert outcome.ok
    result: CommandResult = outcome.value
    assert result.succeeded
    assert "hello\n" in result.output
    assert "hello (stderr)" in result.output
    assert toolchain.calls() == ["pdftool -interaction=nonstopmode -halt-on-error document"]


def test_run_command_reports_missing_executable(tmp_path: Path) -> None:
    missing = str(tmp_path / "no-such-tool")
    outcome = run_command(missing, "document", tmp_path, ProcessingConfig())

    assert not outcome.ok
    assert outcome.error.startswith(f"Could not execute {missing}:")


def test_resolve_processor_prefers_options() -> None:
    config = ProcessingConfig()

    assert resolve_processor("pdf", ProcessingOptions(), config).value == "pdflatex"
    assert resolve_processor("pdf", ProcessingOptions(processor="xelatex"), config).value == "xelatex"
    assert resolve_processor("html", ProcessingOptions(), config).error == "Could not find processor for format: html"


def test_preprocess_with_no_commands_succeeds(tmp_path: Path, toolchain) -> None:
    assert preprocess("document", tmp_path, [], ProcessingConfig()).ok
    assert toolchain.calls() == []


def test_preprocess_runs_in_order_and_stops_at_first_failure(tmp_path: Path, toolchain) -> None:
    first = toolchain.tool("first")
    second = toolchain.tool("second", exit_code=2, message="missing citation")
    third = toolchain.tool("third")
    staged = _staged(tmp_path)

    outcome = preprocess("document", staged.parent, [first, second, third], ProcessingConfig())

    assert not outcome.ok
    assert outcome.error.startswith(f"Preprocessing with {second} failed with output: ")
    assert "missing citation" in outcome.error
    assert toolchain.called_names() == ["first", "second"]


def test_preprocess_runs_in_staging_directory(tmp_path: Path, toolchain) -> None:
    marker = toolchain.tool("marker", body='touch "$last.marked"')
    staged = _staged(tmp_path)

    assert preprocess("document", staged.parent, [marker], ProcessingConfig()).ok
    assert (staged.parent / "document.marked").exists()


def test_process_returns_updated_copy_of_document(tmp_path: Path, toolchain) -> None:
    tool = toolchain.tool("pdftool", output_ext="pdf")
    staged = _staged(tmp_path)
    doc = Document(source="tex")

    outcome = process(doc, "pdf", tool, staged, ProcessingConfig())

    assert outcome.ok
    assert outcome.value.output_path == staged.parent / "document.pdf"
    assert outcome.value.format == "pdf"
    assert outcome.value.source == "tex"
    assert doc.output_path is None


def test_process_reports_failure_output(tmp_path: Path, toolchain) -> None:
    tool = toolchain.tool("pdftool", exit_code=1, message="! Undefined control sequence.")
    staged = _staged(tmp_path)

    outcome = process(Document(source="tex"), "pdf", tool, staged, ProcessingConfig())

    assert outcome.error.startswith("Processing failed with output: ")
    assert "! Undefined control sequence." in outcome.error


def test_process_checks_expected_output_exists(tmp_path: Path, toolchain) -> None:
    tool = toolchain.tool("pdftool", output_ext="dvi")
    staged = _staged(tmp_path)

    outcome = process(Document(source="tex"), "pdf", tool, staged, ProcessingConfig())

    assert outcome.error == (
        f"Processor {tool} did not produce expected output at path: {staged.parent / 'document.pdf'}"
    )


def test_process_trusts_processor_when_verification_disabled(tmp_path: Path, toolchain) -> None:
    tool = toolchain.tool("pdftool")
    staged = _staged(tmp_path)

    outcome = process(Document(source="tex"), "pdf", tool, staged, ProcessingConfig(verify_output=False))

    assert outcome.ok
    assert not outcome.value.output_path.exists()


def test_run_command_gives_no_input_to_interactive_tools(tmp_path: Path, toolchain) -> None:
    tool = toolchain.tool(
        "xetex",
        body='if read line; then echo "answered with: $line"; exit 1; fi\necho "no input"',
    )
    staged = _staged(tmp_path)

    outcome = run_command(tool, "document", staged.parent, ProcessingConfig())

    assert outcome.value.succeeded, outcome.value.output
    assert "no input" in outcome.value.output
    assert outcome.value.executable == tool


def test_run_command_passes_stdin_devnull(tmp_path: Path, monkeypatch) -> None:
    seen: dict = {}

    def _fake_run(command, **kwargs):
        seen.update(kwargs)
        return subprocess.CompletedProcess(command, 0, stdout="")

    monkeypatch.setattr(subprocess, "run", _fake_run)

    assert run_command("pdflatex", "document", tmp_path, ProcessingConfig()).ok
    assert seen["stdin"] is subprocess.DEVNULL


def test_run_command_default_args_apply_to_full_paths(tmp_path: Path, toolchain) -> None:
    tool = toolchain.tool("pdflatex", output_ext="pdf")
    staged = _staged(tmp_path)

    assert run_command(tool, "document", staged.parent, ProcessingConfig()).ok
    assert toolchain.calls() == ["pdflatex -interaction=nonstopmode document"]


def test_preprocess_reports_unlaunchable_command(tmp_path: Path, toolchain) -> None:
    missing = str(tmp_path / "no-such-bibtex")
    second = toolchain.tool("second")
    staged = _staged(tmp_path)

    outcome = preprocess("document", staged.parent, [missing, second], ProcessingConfig())

    assert outcome.error.startswith(f"Could not execute {missing}:")
    assert toolchain.calls() == []
