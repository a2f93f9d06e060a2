"""
Collaborators of the markup engine: source and reference resolution.

- SourceResolver finds external snippet files (file= and class= attributes)
  in a list of snippet directories
- MappingReferenceResolver resolves @link targets from a mapping, usually
  loaded from a targets.yaml file
- ReferenceStore hands out opaque ids for resolved references

A targets.yaml file looks like:

    targets:
      java.util.Optional: java.util/Optional///PointingToDeclaration/
      Optional#isPresent: java.util/Optional/isPresent/#/PointingToDeclaration/
"""

import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from ..config import appsettings
from ..models.snippet import SnippetAttributes, SnippetSource
from .log import LOG
from .text import lines_split


class TargetsFileError(Exception):
    """Raised when a targets file cannot be loaded"""
    pass


class ReferenceResolver(Protocol):
    """Resolves a @link target to a reference, or None"""

    def reference_resolve(self, target: str, context: str) -> Optional[str]:
        ...


class MappingReferenceResolver:
    """
    Reference resolver backed by a dict of target name -> reference.

    Args:
        targets: Mapping of target names to references
        member_fallback: Resolve an unmapped "Class#member" target to the
                         reference of "Class"
    """

    def __init__(self, targets: Optional[Dict[str, str]] = None, member_fallback: bool = False):
        self.targets: Dict[str, str] = dict(targets or {})
        self.member_fallback = member_fallback

    @classmethod
    def file_load(cls, path: Path, member_fallback: bool = False) -> "MappingReferenceResolver":
        """
        Load targets from a YAML file with a top-level 'targets' mapping.

        Raises:
            TargetsFileError: If the file is missing, malformed, or its
                              'targets' entry is not a mapping
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                config: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise TargetsFileError(f"Failed to parse {path}: {e}")
        except OSError as e:
            raise TargetsFileError(f"Failed to load {path}: {e}")

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise TargetsFileError(f"{path} must contain a mapping")

        targets = config.get('targets') or {}
        if not isinstance(targets, dict):
            raise TargetsFileError(f"'targets' in {path} must be a mapping")

        LOG(f"Loaded {len(targets)} link targets from {path}", level=2)
        return cls({str(k): str(v) for k, v in targets.items()}, member_fallback=member_fallback)

    def reference_resolve(self, target: str, context: str) -> Optional[str]:
        reference = self.targets.get(target)
        if reference is None and self.member_fallback and '#' in target:
            reference = self.targets.get(target.split('#', 1)[0])
        if reference is None:
            LOG(f"Target {target} not found (in {context})", level=3)
        return reference


class ReferenceStore:
    """
    Append-only store of resolved references.

    Each distinct reference gets one id; storing it again returns the same id.
    The store is owned by the caller and may be shared by many snippets.
    """

    def __init__(self, prefix: str = "ref-"):
        self.prefix = prefix
        self.references: List[str] = []
        self.ids: Dict[str, str] = {}
        self.by_id: Dict[str, str] = {}

    def store(self, reference: str) -> str:
        """Store a reference and return its id"""
        existing = self.ids.get(reference)
        if existing is not None:
            return existing
        reference_id = f"{self.prefix}{len(self.references)}"
        self.references.append(reference)
        self.ids[reference] = reference_id
        self.by_id[reference_id] = reference
        return reference_id

    def reference_get(self, reference_id: str) -> Optional[str]:
        """Get the reference stored under an id, or None"""
        return self.by_id.get(reference_id)

    def __len__(self) -> int:
        return len(self.references)


class SourceResolver:
    """
    Finds the files of external snippets.

    A file= or class= reference is looked up as a relative path in each
    search directory in turn. If that fails, a file with the same name
    anywhere below the search directories is used, provided there is
    exactly one.
    """

    def __init__(self, search_dirs: List[Path]):
        self.search_dirs = [Path(d) for d in search_dirs]

    def path_find(self, relative: str) -> Optional[Path]:
        """Find a snippet file by relative path, then by unique file name"""
        for directory in self.search_dirs:
            candidate = directory / relative
            if candidate.is_file():
                return candidate

        name = Path(relative).name
        matches = []
        for directory in self.search_dirs:
            if directory.is_dir():
                matches.extend(p for p in directory.rglob(name) if p.is_file())
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            LOG(f"Ambiguous snippet file {name}: {len(matches)} candidates", level=2)
        return None

    def externalPath_find(self, attributes: SnippetAttributes) -> Optional[Path]:
        """Find the file a snippet's file= or class= attribute refers to"""
        if attributes.file is not None:
            return self.path_find(attributes.file)
        if attributes.class_name is not None:
            relative = attributes.class_name.replace('.', '/') + appsettings.class_extension
            path = self.path_find(relative)
            if path is None and '.' in attributes.class_name:
                simple = attributes.class_name.rsplit('.', 1)[1]
                path = self.path_find(simple + appsettings.class_extension)
            return path
        return None

    def source_resolve(self, attributes: SnippetAttributes) -> Optional[SnippetSource]:
        """
        Resolve the external source of a snippet.

        Returns:
            SnippetSource with the file's lines and the requested region,
            or None if the snippet has no external reference or the file
            cannot be found or read
        """
        path = self.externalPath_find(attributes)
        if path is None:
            return None

        try:
            text = path.read_text(encoding=appsettings.file_encoding)
        except (OSError, UnicodeDecodeError) as e:
            LOG(f"Cannot read snippet file {path}: {e}", level=1)
            return None

        LOG(f"Resolved external snippet {path}", level=2)
        return SnippetSource(
            lines=lines_split(text),
            origin=str(path),
            region=attributes.region,
        )
