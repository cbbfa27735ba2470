"""
Response Parser & Validator.

Splits the backend's free-text reply into the three Angular artifacts
(TypeScript component, HTML template, SCSS stylesheet), repairs the known
``styleUrl`` incompatibility and runs structural sanity checks.

Extraction is heuristic. Fenced blocks are tokenised once, then three
strategies run from most to least specific:

1. ``match_labeled_block``          - fence label names the artifact language
2. ``match_filename_comment_block`` - a comment names ``<base>.component.<ext>``
3. ``match_any_block``              - any block nobody else claimed

Strategies run in passes (strategy 1 for every artifact, then 2, then 3) so a
block claimed by a more specific rule is never handed to another artifact.
The parser never raises; every problem becomes a ParseIssue.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set

from layoutforge.config import settings
from layoutforge.core.errors import ExtractionError, StructuralValidationError
from layoutforge.models.schemas.codegen import (
    ARTIFACT_KINDS,
    ExportFile,
    GeneratedArtifact,
    GeneratedFileSet,
    ParseIssue,
)
from layoutforge.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ArtifactSpec:
    kind: str
    extension: str
    labels: FrozenSet[str]


ARTIFACT_SPECS: Dict[str, ArtifactSpec] = {
    "typescript": ArtifactSpec("typescript", "ts", frozenset({"typescript", "ts"})),
    "html": ArtifactSpec("html", "html", frozenset({"html"})),
    "scss": ArtifactSpec("scss", "scss", frozenset({"scss", "css"})),
}

ALL_ARTIFACT_LABELS = frozenset(label for spec in ARTIFACT_SPECS.values() for label in spec.labels)

PRIMENG_TAGS = ("p-button", "p-inputText", "p-password")

_FENCE_RE = re.compile(r"```[ \t]*([\w+#.-]*)[^\n]*\n(.*?)```", re.DOTALL)
_COMMENT_PREFIX_RE = re.compile(r"^\s*(//|<!--|/\*)")
_STYLE_URL_RE = re.compile(r"styleUrl:\s*['\"`]([^'\"`]+)['\"`]")
_EXPORT_CLASS_RE = re.compile(r"export\s+class\s+(\w+)")


@dataclass(frozen=True)
class FencedBlock:
    """One fenced code block of the backend reply"""
    index: int
    label: str
    body: str
    preceding_line: str
    start: int

    @property
    def first_line(self) -> str:
        for line in self.body.splitlines():
            if line.strip():
                return line
        return ""


def tokenize_blocks(text: str) -> List[FencedBlock]:
    """
    Find every fenced block in ``text``.

    Postcondition: blocks are in document order, labels are lower-cased and
    ``preceding_line`` is the last non-blank line before the opening fence.
    """
    blocks: List[FencedBlock] = []
    for index, match in enumerate(_FENCE_RE.finditer(text or "")):
        before = text[:match.start()].rstrip().splitlines()
        blocks.append(FencedBlock(
            index=index,
            label=match.group(1).lower(),
            body=match.group(2),
            preceding_line=before[-1] if before else "",
            start=match.start(),
        ))
    return blocks


def _filename_pattern(base_name: str, extension: str) -> re.Pattern:
    return re.compile(rf"{re.escape(base_name.lower())}\.component\.{extension}\b", re.IGNORECASE)


def _is_filename_comment(line: str, pattern: re.Pattern) -> bool:
    return bool(_COMMENT_PREFIX_RE.match(line)) and bool(pattern.search(line))


def match_labeled_block(
    blocks: Sequence[FencedBlock],
    spec: ArtifactSpec,
    claimed: Set[int]
) -> Optional[FencedBlock]:
    """
    Precondition: ``claimed`` holds indices already assigned to other artifacts.
    Postcondition: the first unclaimed block whose fence label is one of the
    artifact's labels, or None.
    """
    for block in blocks:
        if block.index not in claimed and block.label in spec.labels:
            return block
    return None


def match_filename_comment_block(
    blocks: Sequence[FencedBlock],
    spec: ArtifactSpec,
    base_name: str,
    claimed: Set[int]
) -> Optional[FencedBlock]:
    """
    Precondition: as for ``match_labeled_block``.
    Postcondition: the first unclaimed block whose preceding line or first body
    line is a comment naming ``<base>.component.<ext>``, or None.
    """
    pattern = _filename_pattern(base_name, spec.extension)
    for block in blocks:
        if block.index in claimed:
            continue
        if _is_filename_comment(block.preceding_line, pattern) or _is_filename_comment(block.first_line, pattern):
            return block
    return None


def match_any_block(
    blocks: Sequence[FencedBlock],
    spec: ArtifactSpec,
    claimed: Set[int]
) -> Optional[FencedBlock]:
    """
    Last resort.

    Postcondition: the first unclaimed block that is unlabelled or labelled
    with a language no artifact claims, or None. Blocks explicitly labelled
    for a different artifact are never taken.
    """
    for block in blocks:
        if block.index in claimed:
            continue
        if block.label in ALL_ARTIFACT_LABELS and block.label not in spec.labels:
            continue
        return block
    return None


def strip_filename_comment(body: str) -> str:
    """Drop a leading ``// x.component.ts`` style comment line and trim"""
    lines = body.strip().splitlines()
    if lines and _COMMENT_PREFIX_RE.match(lines[0]) and re.search(r"\.component\.(ts|html|scss)\b", lines[0], re.IGNORECASE):
        lines = lines[1:]
    return "\n".join(lines).strip()


def repair_typescript(content: str) -> str:
    """Rewrite ``styleUrl: 'x'`` into ``styleUrls: ['x']``"""
    return _STYLE_URL_RE.sub(r"styleUrls: ['\1']", content)


def validate_typescript(content: str) -> List[ParseIssue]:
    issues: List[ParseIssue] = []

    if "@Component" not in content:
        issues.append(_structure_error("typescript", "TypeScript file missing @Component decorator"))

    if not _EXPORT_CLASS_RE.search(content):
        issues.append(_structure_error("typescript", "TypeScript file missing export class"))

    if "import" not in content or "@angular/core" not in content:
        issues.append(_structure_error("typescript", "TypeScript file missing Angular imports"))

    return issues


def validate_html(content: str, min_length: int = None) -> List[ParseIssue]:
    issues: List[ParseIssue] = []
    min_length = settings.min_markup_length if min_length is None else min_length

    if len(content) < min_length:
        issues.append(_structure_error("html", "HTML template appears to be too short"))

    if "button" in content and not any(tag in content for tag in PRIMENG_TAGS):
        issues.append(ParseIssue(
            severity="warning",
            category=StructuralValidationError.category,
            message="HTML may be missing PrimeNG components",
            artifact="html",
        ))

    return issues


def _structure_error(kind: str, message: str) -> ParseIssue:
    return ParseIssue(severity="error", category=StructuralValidationError.category, message=message, artifact=kind)


def _build_artifact(kind: str, base_name: str, body: str) -> GeneratedArtifact:
    spec = ARTIFACT_SPECS[kind]
    content = strip_filename_comment(body)
    if kind == "typescript":
        content = repair_typescript(content)
    return GeneratedArtifact(
        file_name=f"{base_name.lower()}.component.{spec.extension}",
        content=content,
        language=kind,
        size_bytes=len(content.encode("utf-8")),
    )


def parse_response(model_text: Any, artifact_base_name: str, min_markup_length: int = None) -> GeneratedFileSet:
    """
    Parse backend output into a GeneratedFileSet.

    Args:
        model_text: Raw backend reply
        artifact_base_name: Screen name; file names are ``<name lower>.component.<ext>``
        min_markup_length: HTML length threshold, defaults to settings

    Returns:
        GeneratedFileSet with every present artifact and every issue found
    """
    text = model_text if isinstance(model_text, str) else ""
    blocks = tokenize_blocks(text)

    chosen: Dict[str, FencedBlock] = {}
    claimed: Set[int] = set()

    passes = (
        lambda spec: match_labeled_block(blocks, spec, claimed),
        lambda spec: match_filename_comment_block(blocks, spec, artifact_base_name, claimed),
        lambda spec: match_any_block(blocks, spec, claimed),
    )
    for strategy in passes:
        for kind in ARTIFACT_KINDS:
            if kind in chosen:
                continue
            block = strategy(ARTIFACT_SPECS[kind])
            if block is not None:
                chosen[kind] = block
                claimed.add(block.index)

    artifacts: Dict[str, Optional[GeneratedArtifact]] = {}
    issues: List[ParseIssue] = []

    for kind in ARTIFACT_KINDS:
        block = chosen.get(kind)
        if block is None:
            artifacts[kind] = None
            issues.append(ParseIssue(
                severity="error",
                category=ExtractionError.category,
                message=f"No {kind} code block found",
                artifact=kind,
            ))
            logger.warning(
                "response.parse.artifact_missing",
                extra={"artifact": kind, "blocks": len(blocks)}
            )
            continue
        artifacts[kind] = _build_artifact(kind, artifact_base_name, block.body)

    for kind in ARTIFACT_KINDS:
        artifact = artifacts[kind]
        if artifact is None:
            continue
        if not artifact.content:
            issues.append(_structure_error(kind, f"Empty {kind} file content"))
            continue
        if kind == "typescript":
            issues.extend(validate_typescript(artifact.content))
        elif kind == "html":
            issues.extend(validate_html(artifact.content, min_markup_length))

    file_set = GeneratedFileSet(
        typescript=artifacts["typescript"],
        html=artifacts["html"],
        scss=artifacts["scss"],
        errors=tuple(issue.message for issue in issues),
        issues=tuple(issues),
    )

    logger.info(
        "response.parse.completed",
        extra={
            "blocks": len(blocks),
            "artifacts": len(file_set.present_artifacts()),
            "errors": len(file_set.errors),
        }
    )

    return file_set


def to_export_manifest(file_set: GeneratedFileSet, output_dir: str = None) -> List[ExportFile]:
    """Present, non-empty artifacts in ts / html / scss order. Absent ones are skipped."""
    output_dir = (output_dir or settings.export_output_dir).rstrip("/")
    return [
        ExportFile(path=f"{output_dir}/{artifact.file_name}", content=artifact.content, kind=artifact.language)
        for artifact in file_set.present_artifacts()
        if artifact.content
    ]


def generate_parsing_summary(file_set: GeneratedFileSet) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "success": not file_set.errors,
        "filesExtracted": 0,
        "totalSize": 0,
        "errors": list(file_set.errors),
        "warnings": file_set.warnings,
        "files": {},
    }

    for kind in ARTIFACT_KINDS:
        artifact = file_set.artifact(kind)
        if artifact is None:
            continue
        summary["filesExtracted"] += 1
        summary["totalSize"] += artifact.size_bytes
        summary["files"][kind] = {
            "fileName": artifact.file_name,
            "size": artifact.size_bytes,
            "hasContent": bool(artifact.content),
        }

    return summary
