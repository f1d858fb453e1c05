# drizzle_gen/utils/imports.py
"""Import bookkeeping for generated source files."""

from typing import Mapping, Union

ImportMap = dict[str, list[str]]


class ImportManager:
    """Ordered mapping of import path to imported names.

    Paths keep first-seen order; names are de-duplicated on insert and
    sorted only when statements are rendered.
    """

    def __init__(self, imports: Mapping[str, list[str]] | None = None):
        self._imports: ImportMap = {}
        if imports:
            self.merge(imports)

    def add_import(self, import_path: str, import_name: str) -> None:
        names = self._imports.setdefault(import_path, [])
        if import_name not in names:
            names.append(import_name)

    def add_imports(self, import_path: str, import_names: list[str]) -> None:
        for name in import_names:
            self.add_import(import_path, name)

    def merge(self, other: Union["ImportManager", Mapping[str, list[str]]]) -> None:
        """Merge another manager or a plain import mapping into this one."""
        source = other.get_imports() if isinstance(other, ImportManager) else other
        for path, names in source.items():
            self.add_imports(path, list(names))

    def get_imports(self) -> ImportMap:
        return {path: list(names) for path, names in self._imports.items()}

    def has_import(self, import_path: str, import_name: str | None = None) -> bool:
        if import_path not in self._imports:
            return False
        if import_name is None:
            return True
        return import_name in self._imports[import_path]

    def clear(self) -> None:
        self._imports = {}

    def generate_import_statements(self) -> list[str]:
        """Render one ``import { ... } from '...';`` line per non-empty path."""
        statements = []
        for path, names in self._imports.items():
            if not names:
                continue
            joined = ", ".join(sorted(set(names)))
            statements.append(f"import {{ {joined} }} from '{path}';")
        return statements

    def __str__(self) -> str:
        return "\n".join(self.generate_import_statements())
