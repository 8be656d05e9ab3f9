"""Template loaders for the fastjade environment.

Loaders provide template source to the Environment. They implement
``get_source(name)`` returning ``(source, filename)`` and
``list_templates()``.

Built-in Loaders:
- ``FileSystemLoader``: Load from one or more template directories
- ``DictLoader``: Load from an in-memory dictionary (testing/embedded)

Custom Loaders:
Implement the Loader protocol:
    ```python
    class DatabaseLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            row = db.query("SELECT source FROM views WHERE name = ?", name)
            if not row:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return row.source, f"db://{name}"

        def list_templates(self) -> list[str]:
            return [r.name for r in db.query("SELECT name FROM views")]
    ```

Thread-Safety:
Loaders should be thread-safe for concurrent ``get_source()`` calls.
Both built-in loaders are (files are read whole, the dict is only read).

"""

from __future__ import annotations

from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from fastjade.environment.exceptions import TemplateNotFoundError


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def list_templates(self, directory: str = "", recursive: bool = True) -> list[str]: ...


class FileSystemLoader:
    """Load templates from filesystem directories.

    Searches one or more directories for templates by name. The first
    matching file is returned.

    Attributes:
        _paths: List of Path objects to search
        _encoding: File encoding (default: utf-8)
        _extension: Template file suffix used by ``list_templates()``

    Search Order:
        Directories are searched in order. First match wins:
            ```python
            loader = FileSystemLoader(["views/custom/", "views/default/"])
            # Looks in views/custom/ first, then views/default/
            ```

    Example:
            >>> loader = FileSystemLoader("views/")
            >>> source, filename = loader.get_source("pages/about.jade")
            >>> print(filename)
            'views/pages/about.jade'

            >>> loader.list_templates()
            ['layout.jade', 'pages/about.jade']

    Raises:
        TemplateNotFoundError: If template not found in any search path

    """

    __slots__ = ("_encoding", "_extension", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
        extension: str = ".jade",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding
        self._extension = extension

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from the filesystem."""
        for base in self._paths:
            path = base / name
            if path.is_file():
                return path.read_text(self._encoding), str(path)

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}"
        )

    def list_templates(self, directory: str = "", recursive: bool = True) -> list[str]:
        """List template names below ``directory`` in every search path.

        Names are relative to their search path and use forward slashes.
        """
        pattern = f"*{self._extension}"
        templates = set()
        for base in self._paths:
            root = base / directory
            if not root.is_dir():
                continue
            found = root.rglob(pattern) if recursive else root.glob(pattern)
            for path in found:
                if path.is_file():
                    templates.add(path.relative_to(base).as_posix())
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory dictionary.

    Maps template names to source strings. Useful for testing, embedded
    templates, or dynamically generated templates.

    Note:
        Returns ``None`` as filename since templates are not file-backed.

    Example:
            >>> loader = DictLoader({"hello.jade": "p Hello, #{name}!"})
            >>> env = Environment(loader=loader)
            >>> env.render_template("hello", name="World")
            '<p>Hello, World!</p>\\n'

    Raises:
        TemplateNotFoundError: If template name not in mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg)
        return self._mapping[name], None

    def list_templates(self, directory: str = "", recursive: bool = True) -> list[str]:
        prefix = f"{directory.strip('/')}/" if directory.strip("/") else ""
        names = []
        for name in self._mapping:
            if not name.startswith(prefix):
                continue
            if not recursive and "/" in name[len(prefix) :]:
                continue
            names.append(name)
        return sorted(names)
