"""
In-memory file tree behind the code editor.

Nodes live in an arena keyed by stable ids; each folder keeps the ordered ids
of its children. Paths are derived, never stored on nodes: a path index is
rebuilt after every structural change (create, rename, delete), so lookups
by path are O(1) and renaming a folder cannot leave stale child paths.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models.generation import GeneratedCode
from models.workspace import FileNode, NodeType
from services.code_utils import project_files
from services.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ROOT_PATH = "/"

LANGUAGE_BY_EXTENSION = {
    "html": "html",
    "css": "css",
    "js": "javascript",
    "ts": "typescript",
    "json": "json",
    "md": "markdown",
    "py": "python",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "jsx": "javascript",
    "tsx": "typescript",
    "txt": "plaintext",
}

STARTER_FILES = {
    "/src/index.html": (
        '<!DOCTYPE html>\n<html lang="en">\n<head>\n  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        '  <title>My App</title>\n  <link rel="stylesheet" href="styles.css">\n</head>\n<body>\n'
        '  <div id="app">\n    <h1>Hello World</h1>\n    <p>Welcome to my application!</p>\n'
        '  </div>\n  <script src="main.js"></script>\n</body>\n</html>'
    ),
    "/src/styles.css": (
        "body {\n  font-family: Arial, sans-serif;\n  margin: 0;\n  padding: 20px;\n"
        "  background-color: #f5f5f5;\n}\n\n#app {\n  max-width: 800px;\n  margin: 0 auto;\n"
        "  background-color: white;\n  padding: 20px;\n  border-radius: 8px;\n"
        "  box-shadow: 0 2px 4px rgba(0, 0, 0, 0.1);\n}\n\nh1 {\n  color: #333;\n}\n\np {\n  color: #666;\n}"
    ),
    "/src/main.js": (
        'document.addEventListener("DOMContentLoaded", () => {\n  console.log("Application loaded");\n'
        '  \n  // Add event listeners\n  const heading = document.querySelector("h1");\n'
        '  if (heading) {\n    heading.addEventListener("click", () => {\n'
        '      alert("Hello from JavaScript!");\n    });\n  }\n});'
    ),
    "/README.md": (
        "# My Application\n\nThis is a simple web application created with HTML, CSS, and JavaScript.\n\n"
        "## Getting Started\n\n1. Clone this repository\n2. Open index.html in your browser\n\n"
        "## Features\n\n- Responsive design\n- Interactive elements\n- Clean code structure"
    ),
}
STARTER_FOLDERS = ["/src", "/assets", "/assets/images"]


def get_language_from_file_name(file_name: str) -> str:
    extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else ""
    return LANGUAGE_BY_EXTENSION.get(extension, "plaintext")


def normalize_path(path: str) -> str:
    path = "/" + path.strip().strip("/")
    return path


@dataclass
class _Node:
    id: str
    name: str
    type: NodeType
    parent_id: Optional[str]
    content: Optional[str] = None
    language: Optional[str] = None
    children: List[str] = field(default_factory=list)


class Workspace:
    def __init__(self, workspace_id: Optional[str] = None, seed: bool = True):
        self.id = workspace_id or str(uuid.uuid4())
        self._root_id = str(uuid.uuid4())
        self._nodes: Dict[str, _Node] = {
            self._root_id: _Node(id=self._root_id, name="", type=NodeType.FOLDER, parent_id=None)
        }
        self._path_index: Dict[str, str] = {}
        self._paths: Dict[str, str] = {}
        self._rebuild_index()
        if seed:
            self._seed()

    def _seed(self) -> None:
        for folder in STARTER_FOLDERS:
            parent, name = folder.rsplit("/", 1)
            self.create_file(parent or ROOT_PATH, NodeType.FOLDER, name)
        for path, content in STARTER_FILES.items():
            parent, name = path.rsplit("/", 1)
            self.create_file(parent or ROOT_PATH, NodeType.FILE, name)
            self.update_file_content(path, content)

    def _rebuild_index(self) -> None:
        self._path_index = {ROOT_PATH: self._root_id}
        self._paths = {self._root_id: ROOT_PATH}
        stack = [(self._root_id, "")]
        while stack:
            node_id, prefix = stack.pop()
            for child_id in self._nodes[node_id].children:
                child_path = f"{prefix}/{self._nodes[child_id].name}"
                self._path_index[child_path] = child_id
                self._paths[child_id] = child_path
                stack.append((child_id, child_path))

    def _lookup(self, path: str) -> _Node:
        node_id = self._path_index.get(normalize_path(path))
        if node_id is None:
            raise NotFoundError(f"No file or folder at '{path}'")
        return self._nodes[node_id]

    def _to_file_node(self, node: _Node) -> FileNode:
        if node.type == NodeType.FOLDER:
            return FileNode(
                id=node.id,
                name=node.name,
                type=node.type,
                path=self._paths[node.id],
                children=[self._to_file_node(self._nodes[child_id]) for child_id in node.children],
            )
        return FileNode(
            id=node.id,
            name=node.name,
            type=node.type,
            path=self._paths[node.id],
            language=node.language,
            content=node.content,
        )

    def _check_name(self, parent: _Node, name: str, ignore_id: Optional[str] = None) -> None:
        if not name or not name.strip() or "/" in name or name in (".", ".."):
            raise ValidationError(f"Invalid name '{name}'")
        for child_id in parent.children:
            if child_id != ignore_id and self._nodes[child_id].name == name:
                raise ValidationError(f"'{name}' already exists in {self._paths[parent.id]}")

    def list_tree(self) -> List[FileNode]:
        """Return the top-level nodes with their children, as copies."""
        root = self._nodes[self._root_id]
        return [self._to_file_node(self._nodes[child_id]) for child_id in root.children]

    def get_file_by_path(self, path: str) -> FileNode:
        return self._to_file_node(self._lookup(path))

    def exists(self, path: str) -> bool:
        return normalize_path(path) in self._path_index

    def create_file(self, parent_path: str, type: NodeType = NodeType.FILE, name: Optional[str] = None) -> FileNode:
        """Create a file or folder in parent_path. Names default to new-file.txt / new-folder."""
        parent = self._lookup(parent_path)
        if parent.type != NodeType.FOLDER:
            raise ValidationError(f"'{parent_path}' is not a folder")

        type = NodeType(type)
        name = name or ("new-file.txt" if type == NodeType.FILE else "new-folder")
        self._check_name(parent, name)

        node = _Node(id=str(uuid.uuid4()), name=name, type=type, parent_id=parent.id)
        if type == NodeType.FILE:
            node.content = ""
            node.language = get_language_from_file_name(name)
        self._nodes[node.id] = node
        parent.children.append(node.id)
        self._rebuild_index()

        logger.debug(f"[{self.id}] Created {type.value} {self._paths[node.id]}")
        return self._to_file_node(node)

    def update_file_content(self, path: str, content: str) -> FileNode:
        node = self._lookup(path)
        if node.type != NodeType.FILE:
            raise ValidationError(f"'{path}' is a folder")
        node.content = content
        return self._to_file_node(node)

    def rename_file(self, path: str, new_name: str) -> FileNode:
        """Rename a node in place; ids are kept and descendant paths follow."""
        node = self._lookup(path)
        if node.id == self._root_id:
            raise ValidationError("The root folder cannot be renamed")
        self._check_name(self._nodes[node.parent_id], new_name, ignore_id=node.id)

        old_path = self._paths[node.id]
        node.name = new_name
        if node.type == NodeType.FILE:
            node.language = get_language_from_file_name(new_name)
        self._rebuild_index()

        logger.debug(f"[{self.id}] Renamed {old_path} -> {self._paths[node.id]}")
        return self._to_file_node(node)

    def delete_file(self, path: str) -> None:
        """Delete a file, or a folder with everything below it."""
        node = self._lookup(path)
        if node.id == self._root_id:
            raise ValidationError("The root folder cannot be deleted")

        self._nodes[node.parent_id].children.remove(node.id)
        stack = [node.id]
        while stack:
            node_id = stack.pop()
            stack.extend(self._nodes[node_id].children)
            del self._nodes[node_id]
        self._rebuild_index()
        logger.debug(f"[{self.id}] Deleted {normalize_path(path)}")

    def write_file(self, path: str, content: str) -> FileNode:
        """Create or overwrite a file, creating missing parent folders."""
        path = normalize_path(path)
        parent_path = ROOT_PATH
        segments = path.strip("/").split("/")
        for folder in segments[:-1]:
            folder_path = f"{parent_path.rstrip('/')}/{folder}"
            if not self.exists(folder_path):
                self.create_file(parent_path, NodeType.FOLDER, folder)
            parent_path = folder_path
        if not self.exists(path):
            self.create_file(parent_path, NodeType.FILE, segments[-1])
        return self.update_file_content(path, content)

    def load_generated_code(self, code: GeneratedCode) -> List[str]:
        """Write the generated project files into the tree and return their paths."""
        written = []
        for relative_path, content in project_files(code).items():
            written.append(self.write_file(relative_path, content).path)
        logger.info(f"[{self.id}] Loaded {len(written)} generated files")
        return written


class WorkspaceStore:
    """In-process registry of independent workspaces."""

    def __init__(self):
        self._workspaces: Dict[str, Workspace] = {}

    def create(self, seed: bool = True) -> Workspace:
        workspace = Workspace(seed=seed)
        self._workspaces[workspace.id] = workspace
        logger.info(f"Created workspace {workspace.id}")
        return workspace

    def get(self, workspace_id: str) -> Workspace:
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            raise NotFoundError(f"Workspace '{workspace_id}' not found")
        return workspace

    def delete(self, workspace_id: str) -> bool:
        return self._workspaces.pop(workspace_id, None) is not None
