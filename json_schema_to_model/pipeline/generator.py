"""
Pipeline generator: runs the phases for a set of root schemas.

1. Node repository: load the root documents and everything they reference
2. Schema model: build one ``Schema`` per distinct node
3. Type model: map the schemas to primitives, collections, maps and classes
4. Backend: render one source file per package
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from .analyzer.ir_nodes import TypeModel
from .backends import PythonBackend
from .config import ClassGeneratorConfig, GeneratorInput
from .context import PipelineContext

logger = logging.getLogger(__name__)


class PipelineGenerator:
    """Generates classes for a set of root schemas."""

    def __init__(
        self,
        inputs: list[GeneratorInput],
        config: ClassGeneratorConfig | None = None,
        search_locations: list[str] | None = None,
        generation_comment: str | None = None,
    ):
        """
        Initialize the generator.

        Args:
            inputs: The root schemas and the packages of their classes
            config: Generator configuration
            search_locations: Additional locations for relative references
            generation_comment: Text added to the documentation of every generated file
        """
        self.inputs = inputs
        self.config = config or ClassGeneratorConfig()
        self.search_locations = search_locations or []
        self.generation_comment = generation_comment
        self.context: PipelineContext | None = None
        self.model: TypeModel | None = None
        self.backend = PythonBackend(self.config)

    def build(self) -> TypeModel:
        """
        Build the type model of all inputs.

        Every call starts from a fresh context, so the result only
        depends on the inputs and the configuration.

        Returns:
            The type model: classes in creation order, the URIs of each
            class, and the diagnostics of the run

        Raises:
            LoadError: If a root document can not be loaded
        """
        context = PipelineContext.create(self.config, self.inputs, self.search_locations)
        roots = []
        for generator_input in self.inputs:
            logger.info("Processing %s", generator_input.url)
            roots.append(context.schema_builder.resolve_root(generator_input.url))
        self.model = context.type_builder.build(roots)
        self.context = context
        logger.info("Built %d classes with %d diagnostics", len(self.model.classes), len(context.diagnostics))
        return self.model

    def generate(self) -> dict[str, str]:
        """
        Generate the source files.

        Returns:
            Relative file path -> source code
        """
        model = self.model if self.model is not None else self.build()
        header_codes: dict[str, str | None] = {}
        for generator_input in self.inputs:
            header_codes.setdefault(generator_input.package_name, generator_input.header_code)
        return self.backend.generate(model, header_codes, self.generation_comment)

    def write(self, output_dir: str | Path) -> list[Path]:
        """
        Generate the source files and write them below a directory.

        Each file is written to a temporary file first and then moved
        into place, so an interrupted run never leaves a partial file.

        Returns:
            The written paths
        """
        output_dir = Path(output_dir)
        written = []
        for relative_path, source in self.generate().items():
            path = output_dir / relative_path
            _write_atomically(path, source)
            logger.info("Wrote %s", path)
            written.append(path)
        return written


def _write_atomically(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", text=True)
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(temp_path, path)
    except BaseException:
        Path(temp_path).unlink(missing_ok=True)
        raise
