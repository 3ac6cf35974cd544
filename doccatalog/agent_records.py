"""
Convert agent definition records (``*.yaml``) into front-matter markdown.

A record is a handful of top-level ``key: value`` lines followed by an
``instructions:`` block whose indented body becomes the markdown body::

    id: builder
    name: Builder Agent
    model: gemini-2.0
    tools: [fs, shell]
    instructions: |
      You build things.

is rewritten as::

    ---
    id: builder
    name: "Builder Agent"
    type: agent
    model: "gemini-2.0"
    tools: [fs, shell]
    ---

    You build things.

Only this flat subset is understood; the scanner never attempts general YAML.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .errors import ConversionError
from .fileio import match_target_mode

LOGGER = logging.getLogger(__name__)

AGENT_TYPE = "agent"
RECORD_SUFFIX = ".yaml"
NORMALIZED_SUFFIX = ".md"
FRONTMATTER_DELIMITER = "---"

QUOTED_KEYS = frozenset({"name", "description", "model"})
VERBATIM_KEYS = frozenset({"id", "version"})
ARRAY_KEYS = frozenset({"skills", "tools"})
FRONTMATTER_ORDER = ("id", "name", "description", "type", "version", "model", "skills", "tools")

KEY_LINE_RE = re.compile(r"^(?P<key>[A-Za-z_][\w-]*):(?P<rest>.*)$")
QUOTE_AWARE_RE = re.compile(r'^\s*(?:"(?P<quoted>[^"]*)"|(?P<bare>[^"]*))$')
ARRAY_VALUE_RE = re.compile(r"^\s*\[.*\]$")
INSTRUCTIONS_RE = re.compile(r"^instructions:\s*(?:[|>][-+]?)?\s*$")
LEADING_WS_RE = re.compile(r"^(\s+)")


@dataclass(frozen=True)
class RecordField:
    key: str
    value: str
    line: str
    quoted: bool = False

    def render(self) -> str:
        if self.key in ARRAY_KEYS:
            return self.line
        if self.key in QUOTED_KEYS:
            return f'{self.key}: "{self.value}"'
        return f"{self.key}: {self.value}"


@dataclass
class ScannedRecord:
    fields: Dict[str, RecordField] = field(default_factory=dict)
    body: Optional[str] = None

    def has(self, key: str) -> bool:
        return key in self.fields

    def value(self, key: str) -> Optional[str]:
        found = self.fields.get(key)
        return found.value if found else None


def _scan_field(key: str, rest: str, line: str) -> Optional[RecordField]:
    rest = rest.rstrip()
    if key in ARRAY_KEYS:
        if not ARRAY_VALUE_RE.match(rest):
            return None
        return RecordField(key=key, value=rest.strip(), line=line.rstrip())
    if key in QUOTED_KEYS:
        match = QUOTE_AWARE_RE.match(rest)
        if not match:
            return None
        if match.group("quoted") is not None:
            return RecordField(key=key, value=match.group("quoted").strip(), line=line, quoted=True)
        value = match.group("bare").strip()
    else:
        value = rest.strip()
    if not value:
        return None
    return RecordField(key=key, value=value, line=line)


def dedent_block(lines: Sequence[str]) -> str:
    """Strip the indentation of the first non-blank line from every line."""

    first = next((line for line in lines if line.strip()), None)
    indent = ""
    if first is not None:
        match = LEADING_WS_RE.match(first)
        if match:
            indent = match.group(1)
    if not indent:
        return "\n".join(lines)
    out: List[str] = []
    for line in lines:
        if not line.strip():
            out.append("")
        elif line.startswith(indent):
            out.append(line[len(indent) :])
        else:
            # malformed trailing content is kept as-is
            out.append(line)
    return "\n".join(out)


def scan_record(text: str) -> ScannedRecord:
    record = ScannedRecord()
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    for idx, line in enumerate(lines):
        if INSTRUCTIONS_RE.match(line):
            record.body = dedent_block(lines[idx + 1 :]).strip()
            break
        match = KEY_LINE_RE.match(line)
        if not match:
            continue
        key = match.group("key")
        if key in record.fields or key not in QUOTED_KEYS | VERBATIM_KEYS | ARRAY_KEYS:
            continue
        parsed = _scan_field(key, match.group("rest"), line)
        if parsed is not None:
            record.fields[key] = parsed
    return record


def render_record(record: ScannedRecord) -> str:
    lines = [FRONTMATTER_DELIMITER]
    for key in FRONTMATTER_ORDER:
        if key == "type":
            lines.append(f"type: {AGENT_TYPE}")
            continue
        found = record.fields.get(key)
        if found is not None:
            lines.append(found.render())
    lines.append(FRONTMATTER_DELIMITER)
    document = "\n".join(lines) + "\n\n"
    if record.body:
        document += record.body + "\n"
    return document


def normalize_record_text(text: str) -> str:
    return render_record(scan_record(text))


@dataclass(frozen=True)
class ConvertedRecord:
    source: Path
    target: Path


@dataclass
class ConversionReport:
    converted: List[ConvertedRecord] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    error: Optional[str] = None
    failed_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _write_verified(target: Path, content: str) -> None:
    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent))
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(content)
        if Path(tmp_name).read_text(encoding="utf-8") != content:
            raise ConversionError(f"Verification of {target} failed after write", target)
        match_target_mode(tmp_name, target)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as exc:
        raise ConversionError(f"Failed to write {target}: {exc}", target) from exc
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def convert_record_file(path: Path, target_suffix: str = NORMALIZED_SUFFIX) -> Path:
    """
    Replace ``path`` with its normalized sibling ``<stem><target_suffix>``.

    The markdown is fully written and verified before the source is removed.
    A failed removal leaves both files on disk and raises ConversionError.
    """

    target = path.with_suffix(target_suffix)
    if target == path:
        raise ConversionError(f"Target suffix {target_suffix} matches the source file {path}", path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConversionError(f"Failed to read {path}: {exc}", path) from exc

    _write_verified(target, normalize_record_text(text))
    try:
        path.unlink()
    except OSError as exc:
        raise ConversionError(
            f"Converted {path.name} -> {target.name} but could not remove the source: {exc}", path
        ) from exc
    return target


def find_records(directory: Path, source_suffix: str = RECORD_SUFFIX) -> List[Path]:
    return sorted(p for p in directory.iterdir() if p.name.endswith(source_suffix))


def convert_directory(
    directory: Path,
    source_suffix: str = RECORD_SUFFIX,
    target_suffix: str = NORMALIZED_SUFFIX,
) -> ConversionReport:
    report = ConversionReport()
    if not directory.is_dir():
        report.error = f"Record directory not found: {directory}"
        report.failed_path = directory
        LOGGER.error(report.error)
        return report

    sources = find_records(directory, source_suffix)
    LOGGER.info("Found %d %s files to convert.", len(sources), source_suffix)
    for source in sources:
        if not source.is_file():
            LOGGER.debug("Skipping non-file %s", source)
            report.skipped.append(source)
            continue
        try:
            target = convert_record_file(source, target_suffix=target_suffix)
        except ConversionError as exc:
            LOGGER.error(str(exc))
            report.error = str(exc)
            report.failed_path = source
            return report
        LOGGER.info("Converted %s -> %s", source.name, target.name)
        report.converted.append(ConvertedRecord(source=source, target=target))
    return report
