"""End-to-end documentation workflow for one project."""

from __future__ import annotations

import asyncio
import os
import tempfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Protocol

import logfire
from pydantic import BaseModel, Field, ValidationError

from docwright.core.config import LLMConfiguration
from docwright.core.models import ApiSymbol, DocumentationStatus, GeneratedDocumentation
from docwright.generator.orchestrator import ParallelDocumentationGenerator, ProgressCallback
from docwright.generator.preview import build_preview, group_by_file
from docwright.llm.factory import ProviderFactory

INTENSITIES = ("undocumented", "partially_documented", "all")

# Asked (entry_count, file_count) before anything is written
WriteConfirmation = Callable[[int, int], bool]


class GenerationStatus(StrEnum):
    SUCCESS = "success"
    NO_APIS_FOUND = "no_apis_found"
    GENERATION_FAILED = "generation_failed"
    WRITE_FAILED = "write_failed"


@dataclass
class GenerationResult:
    """Summary of one workflow run."""

    status: GenerationStatus
    message: str
    api_count: int = 0
    success_count: int = 0
    file_count: int = 0
    preview: str | None = None
    cache_file_path: Path | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == GenerationStatus.SUCCESS


class DocumentationWriter(Protocol):
    """Inserts accepted documentation into one source file."""

    def write(self, file_path: str, documents: Sequence[GeneratedDocumentation]) -> None: ...


class HandoffEntry(BaseModel):
    api_symbol_id: str
    fully_qualified_name: str
    line_number: int
    documentation: str


class HandoffDocument(BaseModel):
    files: dict[str, list[HandoffEntry]] = Field(default_factory=dict)


class JsonDocumentationWriter:
    """Collects accepted documentation in a JSON file for an external inserter.

    Each `write` call replaces the entries of one source file and rewrites
    the hand-off file atomically.
    """

    def __init__(self, output_path: Path):
        self.output_path = Path(output_path)

    def write(self, file_path: str, documents: Sequence[GeneratedDocumentation]) -> None:
        handoff = self._load()
        handoff.files[file_path] = [
            HandoffEntry(
                api_symbol_id=doc.api_symbol.id,
                fully_qualified_name=doc.api_symbol.fully_qualified_name,
                line_number=doc.api_symbol.line_number,
                documentation=doc.documentation,
            )
            for doc in documents
        ]

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=self.output_path.parent,
            prefix=f".{self.output_path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp.write(handoff.model_dump_json(indent=2))
        os.replace(tmp.name, self.output_path)

    def _load(self) -> HandoffDocument:
        if not self.output_path.exists():
            return HandoffDocument()
        try:
            return HandoffDocument.model_validate_json(self.output_path.read_text(encoding="utf-8"))
        except ValidationError as e:
            logfire.warn(
                "Existing hand-off file unreadable, starting over",
                path=str(self.output_path),
                error=str(e),
            )
            return HandoffDocument()


def filter_by_intensity(symbols: Sequence[ApiSymbol], intensity: str) -> list[ApiSymbol]:
    """Select the APIs a run should document.

    Raises:
        ValueError: For an unknown intensity.
    """
    match intensity.lower():
        case "undocumented":
            return [
                s for s in symbols if s.documentation_status == DocumentationStatus.UNDOCUMENTED
            ]
        case "partially_documented":
            return [
                s
                for s in symbols
                if s.documentation_status == DocumentationStatus.PARTIALLY_DOCUMENTED
            ]
        case "all":
            return list(symbols)
        case _:
            raise ValueError(
                f"Invalid intensity filter: {intensity}. Valid values: {', '.join(INTENSITIES)}"
            )


class DocumentationService:
    """Filters APIs, generates their documentation and previews or writes it."""

    def __init__(
        self,
        generator: ParallelDocumentationGenerator,
        provider_factory: ProviderFactory,
        writer: DocumentationWriter | None = None,
        confirm_write: WriteConfirmation | None = None,
    ):
        self.generator = generator
        self.provider_factory = provider_factory
        self.writer = writer
        self.confirm_write = confirm_write

    async def run(
        self,
        project_id: str,
        symbols: Sequence[ApiSymbol],
        llm_config: LLMConfiguration,
        intensity: str = "undocumented",
        parallelism: int = 3,
        dry_run: bool = False,
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        """Run the workflow.

        Provider selection failures (no credential, declined fallback) and
        authentication failures propagate; everything else is reported
        through the returned GenerationResult.
        """
        apis = filter_by_intensity(symbols, intensity)
        logfire.info(
            "Filtered APIs by intensity",
            project=project_id,
            total=len(symbols),
            selected=len(apis),
            intensity=intensity,
        )
        if not apis:
            return GenerationResult(GenerationStatus.NO_APIS_FOUND, "No APIs found")

        provider = self.provider_factory.get_provider(llm_config)
        outcome = await self.generator.generate(
            project_id,
            apis,
            provider,
            parallelism=parallelism,
            dry_run=dry_run,
            cancel_event=cancel_event,
            on_progress=on_progress,
        )

        documents = outcome.documents
        if not documents:
            logfire.warn("No documentation was generated successfully", project=project_id)
            return GenerationResult(
                GenerationStatus.GENERATION_FAILED, "Generation failed", api_count=len(apis)
            )

        logfire.info(
            "Generated documentation entries",
            project=project_id,
            success_count=len(documents),
            total=len(apis),
        )

        if dry_run:
            return self._dry_run_result(project_id, apis, documents)
        return self._write(project_id, apis, documents)

    def _dry_run_result(
        self,
        project_id: str,
        apis: list[ApiSymbol],
        documents: list[GeneratedDocumentation],
    ) -> GenerationResult:
        cache_path = self.generator.cache.path_for(project_id)
        logfire.info("Cached dry-run responses", count=len(documents), path=str(cache_path))
        return GenerationResult(
            GenerationStatus.SUCCESS,
            "Dry run complete",
            api_count=len(apis),
            success_count=len(documents),
            file_count=len(group_by_file(documents)),
            preview=build_preview(documents),
            cache_file_path=cache_path,
        )

    def _write(
        self,
        project_id: str,
        apis: list[ApiSymbol],
        documents: list[GeneratedDocumentation],
    ) -> GenerationResult:
        groups = group_by_file(documents)

        if self.writer is None:
            return GenerationResult(
                GenerationStatus.WRITE_FAILED,
                "No documentation writer configured",
                api_count=len(apis),
                success_count=len(documents),
            )

        if self.confirm_write is not None and not self.confirm_write(len(documents), len(groups)):
            logfire.info("User declined to write documentation changes")
            return GenerationResult(
                GenerationStatus.WRITE_FAILED,
                "User cancelled write operation",
                api_count=len(apis),
                success_count=len(documents),
            )

        written = 0
        failed: list[tuple[str, str]] = []
        for index, (file_path, docs) in enumerate(groups.items(), start=1):
            logfire.info(
                "Writing to {file_path} [{current}/{total}]",
                file_path=file_path,
                current=index,
                total=len(groups),
            )
            try:
                self.writer.write(file_path, docs)
                written += 1
            except Exception as e:
                logfire.warn("Failed to write {file_path}", file_path=file_path, error=str(e))
                failed.append((file_path, str(e)))

        # Partial success still consumes the cache
        if written:
            self.generator.cache.clear(project_id)

        if failed:
            return GenerationResult(
                GenerationStatus.WRITE_FAILED,
                f"{written} files written, {len(failed)} failed",
                api_count=len(apis),
                success_count=len(documents),
                file_count=written,
            )
        return GenerationResult(
            GenerationStatus.SUCCESS,
            "All files written successfully",
            api_count=len(apis),
            success_count=len(documents),
            file_count=written,
        )
